"""
Submission Repository — inserts and listings.

Handles:
  - Inserting submissions (duplicate detection)
  - Listing submissions, newest first; lookup by id
  - Recording stored documents
"""

import logging

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError

from intake.core.entities.submission import Submission, SubmissionData, SubmissionDocument, UploadedFile
from intake.core.errors import DuplicateSubmissionError
from intake.core.interfaces.storage_service import StoredReference
from intake.core.interfaces.submission_store import ISubmissionStore
from intake.infrastructure.db.database import get_db
from intake.infrastructure.db.models import DocumentRecord, SubmissionRecord

logger = logging.getLogger(__name__)


class SubmissionRepository(ISubmissionStore):
    """Repository for submissions and their documents."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory

    def insert(self, data: SubmissionData) -> Submission:
        """Insert a submission. One atomic statement, one commit."""
        try:
            with get_db(self._session_factory) as db:
                record = SubmissionRecord.from_data(data)
                db.add(record)
                db.flush()
                submission = record.to_entity()
        except IntegrityError as e:
            logger.info(f"Duplicate submission rejected (phone={data.phone})")
            raise DuplicateSubmissionError("Já existe um cadastro com este documento") from e

        logger.info(f"Saved submission {submission.id}")
        return submission

    def list_all(self) -> list[Submission]:
        with get_db(self._session_factory) as db:
            records = (
                db.query(SubmissionRecord)
                .order_by(desc(SubmissionRecord.created_at), desc(SubmissionRecord.id))
                .all()
            )
            return [r.to_entity() for r in records]

    def get(self, submission_id: int) -> Submission | None:
        with get_db(self._session_factory) as db:
            record = db.get(SubmissionRecord, submission_id)
            return record.to_entity() if record else None

    def add_document(
        self, submission_id: int, file: UploadedFile, reference: StoredReference
    ) -> SubmissionDocument:
        with get_db(self._session_factory) as db:
            record = DocumentRecord(
                submission_id=submission_id,
                document_type=file.document_type.value,
                file_name=file.file_name,
                content_type=file.content_type,
                size_bytes=file.size_bytes,
                file_url=reference.url,
                storage_key=reference.key,
                drive_file_id=reference.file_id,
                drive_view_url=reference.view_url,
                drive_download_url=reference.download_url,
            )
            db.add(record)
            db.flush()
            logger.info(f"Saved document {record.id} [{record.document_type}] for submission {submission_id}")
            return record.to_entity()

    def list_documents(self, submission_id: int) -> list[SubmissionDocument]:
        with get_db(self._session_factory) as db:
            records = (
                db.query(DocumentRecord)
                .filter_by(submission_id=submission_id)
                .order_by(DocumentRecord.id)
                .all()
            )
            return [r.to_entity() for r in records]
