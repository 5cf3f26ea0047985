"""
Adapter: Drive Folder Provisioner — Implementação COMPLETA.

Busca a pasta pelo nome exato dentro da pasta-pai; cria se não existir.
"""

import asyncio
import logging

from intake.core.errors import FolderProvisioningError
from intake.core.interfaces.folder_provisioner import IFolderProvisioner
from intake.infrastructure.storage.google_drive_client import GoogleDriveClient

logger = logging.getLogger(__name__)


class DriveFolderProvisioner(IFolderProvisioner):

    def __init__(self, client: GoogleDriveClient):
        self._client = client

    async def get_or_create(self, folder_name: str, parent_id: str) -> str:
        try:
            existing = await asyncio.to_thread(self._client.find_folder, folder_name, parent_id)
            if existing:
                logger.info(f"Reusing Drive folder '{folder_name}' ({existing})")
                return existing

            folder_id = await asyncio.to_thread(self._client.create_folder, folder_name, parent_id)
        except Exception as e:
            raise FolderProvisioningError(f"Could not provision folder '{folder_name}': {e}") from e

        logger.info(f"Created Drive folder '{folder_name}' ({folder_id})")
        return folder_id

    def folder_url(self, folder_id: str) -> str:
        return f"https://drive.google.com/drive/folders/{folder_id}"
