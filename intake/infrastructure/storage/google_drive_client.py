"""
Google Drive API v3 — cliente fino e síncrono.

Métodos bloqueantes; quem chama roda em thread (asyncio.to_thread).
"""

import io
import logging

import httplib2
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class GoogleDriveClient:
    """Wrapper sobre o recurso `files` do Drive (inclui drives compartilhados)."""

    def __init__(self, service):
        self._service = service

    @classmethod
    def from_service_account(
        cls,
        project_id: str,
        private_key_id: str,
        private_key: str,
        client_email: str,
        client_id: str,
        timeout_seconds: float = 10.0,
    ) -> "GoogleDriveClient":
        info = {
            "type": "service_account",
            "project_id": project_id,
            "private_key_id": private_key_id,
            # .env costuma trazer a chave com \n literais
            "private_key": private_key.replace("\\n", "\n"),
            "client_email": client_email,
            "client_id": client_id,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        credentials = service_account.Credentials.from_service_account_info(info, scopes=DRIVE_SCOPES)
        http = AuthorizedHttp(credentials, http=httplib2.Http(timeout=timeout_seconds))
        service = build("drive", "v3", http=http, cache_discovery=False)
        logger.info(f"Google Drive client ready ({client_email})")
        return cls(service)

    def find_folder(self, name: str, parent_id: str) -> str | None:
        escaped = name.replace("\\", "\\\\").replace("'", "\\'")
        query = (
            f"name = '{escaped}' and mimeType = '{FOLDER_MIME_TYPE}' "
            f"and '{parent_id}' in parents and trashed = false"
        )
        response = self._service.files().list(
            q=query,
            fields="files(id, name)",
            pageSize=1,
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        ).execute()
        files = response.get("files", [])
        return files[0]["id"] if files else None

    def create_folder(self, name: str, parent_id: str) -> str:
        metadata = {"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]}
        folder = self._service.files().create(
            body=metadata, fields="id", supportsAllDrives=True
        ).execute()
        return folder["id"]

    def upload_file(self, data: bytes, name: str, mime_type: str, parent_id: str) -> dict:
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=False)
        metadata = {"name": name, "parents": [parent_id]}
        return self._service.files().create(
            body=metadata,
            media_body=media,
            fields="id, name, webViewLink, webContentLink",
            supportsAllDrives=True,
        ).execute()
