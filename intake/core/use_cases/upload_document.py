"""
Use Case: Upload Document.

Um arquivo → provider de storage → registro no banco.
Falhas viram log; o documento simplesmente fica de fora.
"""

import asyncio
import logging
from dataclasses import dataclass

from intake.core.entities.folder_slot import FolderSlot
from intake.core.entities.submission import SubmissionContext, SubmissionDocument, UploadedFile
from intake.core.errors import UploadError
from intake.core.interfaces.storage_service import IDocumentStorage, StoredReference
from intake.core.interfaces.submission_store import ISubmissionStore

logger = logging.getLogger(__name__)


@dataclass
class UploadOutcome:
    document: SubmissionDocument
    reference: StoredReference


class UploadDocumentUseCase:

    def __init__(self, storage: IDocumentStorage, store: ISubmissionStore):
        self._storage = storage
        self._store = store

    async def execute(
        self, file: UploadedFile, context: SubmissionContext, folder_slot: FolderSlot | None = None
    ) -> UploadOutcome | None:
        doc_type = file.document_type.value
        try:
            reference = await self._storage.store(
                data=file.data,
                file_name=file.file_name,
                content_type=file.content_type,
                context=context,
                document_type=file.document_type,
                folder_slot=folder_slot,
            )
        except UploadError as e:
            logger.warning(f"Upload of {doc_type} failed for submission {context.submission_id}: {e}")
            return None

        try:
            document = await asyncio.to_thread(self._store.add_document, context.submission_id, file, reference)
        except Exception as e:
            # Arquivo já está no provider, mas sem registro no banco
            logger.error(
                f"ORPHAN_DOCUMENT submission={context.submission_id} type={doc_type} "
                f"provider={reference.provider} locator={reference.key or reference.file_id} "
                f"url={reference.url} error={e}"
            )
            return None

        return UploadOutcome(document=document, reference=reference)
