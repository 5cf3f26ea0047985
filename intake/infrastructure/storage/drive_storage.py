"""
Adapter: Google Drive Document Storage — Implementação COMPLETA.

Cada cadastro ganha uma pasta própria dentro da pasta-pai configurada.
Os uploads do mesmo cadastro compartilham a pasta via FolderSlot.
"""

import asyncio
import logging
import re

from intake.core.entities.folder_slot import FolderSlot
from intake.core.entities.submission import DocumentType, SubmissionContext
from intake.core.errors import FolderProvisioningError, StorageConfigurationError, UploadError
from intake.core.interfaces.folder_provisioner import IFolderProvisioner
from intake.core.interfaces.storage_service import IDocumentStorage, StoredReference
from intake.infrastructure.storage.google_drive_client import GoogleDriveClient

logger = logging.getLogger(__name__)

_FORBIDDEN_CHARS = re.compile(r'[<>:"/\\|?*]')


def build_folder_name(context: SubmissionContext) -> str:
    """
    "UF - Nome DOCUMENTO", ex.: "SP - Maria Silva 52998224725".

    Caracteres proibidos viram "_", apóstrofos somem, espaços colapsam.
    """
    state = context.state or "XX"
    name = context.display_name or "Usuario"
    document = context.tax_id or "SEM_DOC"
    raw = f"{state} - {name} {document}"
    cleaned = _FORBIDDEN_CHARS.sub("_", raw).replace("'", "")
    return re.sub(r"\s+", " ", cleaned).strip()


def drive_download_url(file_id: str) -> str:
    return f"https://drive.google.com/uc?id={file_id}&export=download"


class GoogleDriveDocumentStorage(IDocumentStorage):
    """
    Storage de documentos no Google Drive (drive compartilhado).

    Se a pasta do cadastro não puder ser provisionada, o arquivo vai
    direto para a pasta-pai e o upload segue.
    """

    name = "drive"
    supports_folders = True

    def __init__(self, client: GoogleDriveClient, provisioner: IFolderProvisioner, parent_folder_id: str):
        if not parent_folder_id:
            raise StorageConfigurationError("GOOGLE_DRIVE_PARENT_FOLDER_ID is required for the drive provider")
        self._client = client
        self._provisioner = provisioner
        self._parent_id = parent_folder_id

    async def _provision(self, context: SubmissionContext) -> tuple[str, str]:
        folder_id = await self._provisioner.get_or_create(build_folder_name(context), self._parent_id)
        return folder_id, self._provisioner.folder_url(folder_id)

    async def _resolve_folder(
        self, context: SubmissionContext, folder_slot: FolderSlot | None
    ) -> tuple[str | None, str | None]:
        slot = folder_slot or FolderSlot()
        try:
            return await slot.resolve(lambda: self._provision(context))
        except FolderProvisioningError as e:
            logger.warning(
                f"Folder provisioning failed for submission {context.submission_id}, "
                f"falling back to parent folder: {e}"
            )
            return None, None

    async def store(
        self,
        data: bytes,
        file_name: str,
        content_type: str,
        context: SubmissionContext,
        document_type: DocumentType,
        folder_slot: FolderSlot | None = None,
    ) -> StoredReference:
        folder_id, folder_url = await self._resolve_folder(context, folder_slot)
        doc_type = document_type.value if isinstance(document_type, DocumentType) else document_type
        drive_name = f"{doc_type}_{file_name}"

        try:
            uploaded = await asyncio.to_thread(
                self._client.upload_file, data, drive_name, content_type, folder_id or self._parent_id
            )
        except Exception as e:
            raise UploadError(f"Drive upload failed for {drive_name}: {e}") from e

        file_id = uploaded["id"]
        view_url = uploaded.get("webViewLink") or f"https://drive.google.com/file/d/{file_id}/view"
        logger.info(f"Uploaded {drive_name} to Drive ({file_id})")

        return StoredReference(
            provider=self.name,
            url=view_url,
            file_id=file_id,
            view_url=view_url,
            download_url=drive_download_url(file_id),
            folder_id=folder_id,
            folder_url=folder_url,
        )

    async def ensure_folder(
        self, context: SubmissionContext, folder_slot: FolderSlot | None = None
    ) -> str | None:
        _, folder_url = await self._resolve_folder(context, folder_slot)
        return folder_url
