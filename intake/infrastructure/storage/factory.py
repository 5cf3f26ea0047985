"""
Escolhe o provider de storage uma vez, na inicialização.
"""

import logging

from intake.config.settings import Settings
from intake.core.errors import StorageConfigurationError
from intake.core.interfaces.storage_service import IDocumentStorage

logger = logging.getLogger(__name__)


def build_storage_provider(settings: Settings) -> IDocumentStorage:
    provider = settings.storage_provider.strip().lower()

    if provider == "s3":
        from intake.infrastructure.storage.s3_storage import S3DocumentStorage

        if not settings.s3_bucket:
            raise StorageConfigurationError("S3_BUCKET is required for the s3 provider")
        logger.info(f"Storage provider: S3 (bucket={settings.s3_bucket}, region={settings.aws_region})")
        return S3DocumentStorage(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            prefix=settings.s3_prefix,
            timeout_seconds=settings.http_timeout_seconds,
        )

    if provider == "drive":
        from intake.infrastructure.storage.drive_folder_provisioner import DriveFolderProvisioner
        from intake.infrastructure.storage.drive_storage import GoogleDriveDocumentStorage
        from intake.infrastructure.storage.google_drive_client import GoogleDriveClient

        if not settings.google_client_email or not settings.google_private_key:
            raise StorageConfigurationError("Google service account credentials are required for the drive provider")
        if not settings.google_drive_parent_folder_id:
            raise StorageConfigurationError("GOOGLE_DRIVE_PARENT_FOLDER_ID is required for the drive provider")

        client = GoogleDriveClient.from_service_account(
            project_id=settings.google_project_id,
            private_key_id=settings.google_private_key_id,
            private_key=settings.google_private_key,
            client_email=settings.google_client_email,
            client_id=settings.google_client_id,
            timeout_seconds=settings.http_timeout_seconds,
        )
        logger.info(f"Storage provider: Google Drive (parent={settings.google_drive_parent_folder_id})")
        return GoogleDriveDocumentStorage(
            client=client,
            provisioner=DriveFolderProvisioner(client),
            parent_folder_id=settings.google_drive_parent_folder_id,
        )

    raise StorageConfigurationError(f"Unknown STORAGE_PROVIDER '{settings.storage_provider}' (use 's3' or 'drive')")
