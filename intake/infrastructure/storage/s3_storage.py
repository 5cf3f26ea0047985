"""
Adapter: S3 Document Storage — Implementação COMPLETA.

Implementação concreta do contrato IDocumentStorage usando AWS S3.
Objetos privados; a URL gravada é a URL canônica do bucket.
"""

import asyncio
import logging
import uuid

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from intake.core.entities.folder_slot import FolderSlot
from intake.core.entities.submission import DocumentType, SubmissionContext
from intake.core.errors import UploadError
from intake.core.interfaces.storage_service import IDocumentStorage, StoredReference

logger = logging.getLogger(__name__)


class S3DocumentStorage(IDocumentStorage):
    """
    Storage de documentos em bucket S3.

    Chave: {prefix}documents/{submission_id}/{document_type}_{uuid}.{ext}
    """

    name = "s3"
    supports_folders = False

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str = "",
        secret_access_key: str = "",
        prefix: str = "",
        timeout_seconds: float = 10.0,
        client=None,
    ):
        self._bucket = bucket
        self._region = region
        self._prefix = prefix
        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=access_key_id or None,
                aws_secret_access_key=secret_access_key or None,
                region_name=region,
            )
            client = session.client(
                "s3",
                config=BotoConfig(
                    signature_version="s3v4",
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                ),
            )
        self._s3 = client

    def make_key(self, submission_id: int, document_type: DocumentType, file_name: str) -> str:
        ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else "bin"
        doc_type = document_type.value if isinstance(document_type, DocumentType) else document_type
        return f"{self._prefix}documents/{submission_id}/{doc_type}_{uuid.uuid4()}.{ext}"

    def object_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    async def store(
        self,
        data: bytes,
        file_name: str,
        content_type: str,
        context: SubmissionContext,
        document_type: DocumentType,
        folder_slot: FolderSlot | None = None,
    ) -> StoredReference:
        key = self.make_key(context.submission_id, document_type, file_name)

        try:
            await asyncio.to_thread(
                self._s3.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL="private",
            )
        except (BotoCoreError, ClientError) as e:
            raise UploadError(f"S3 upload failed for {key}: {e}") from e

        logger.info(f"Uploaded s3://{self._bucket}/{key} ({len(data)} bytes)")
        return StoredReference(provider=self.name, url=self.object_url(key), key=key)
