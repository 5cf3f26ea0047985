"""
Tests for the SQLAlchemy submission repository.
"""

import pytest

from intake.core.entities.submission import DocumentType, UploadedFile
from intake.core.errors import DuplicateSubmissionError, FieldError, SubmissionValidationError
from intake.core.interfaces.storage_service import StoredReference
from intake.core.use_cases.create_submission import CreateSubmissionUseCase
from intake.infrastructure.db.repository import SubmissionRepository
from intake.infrastructure.rules.brazilian_form_rules import BrazilianFormValidator


def _normalized(form):
    result = BrazilianFormValidator().validate(form)
    assert result.ok, result.errors
    return result.data


class TestInsertAndList:
    """Round-trip through the database."""

    def test_round_trip_minimal_submission(self, repository, maria_form):
        created = repository.insert(_normalized(maria_form))
        assert created.id is not None

        listed = repository.list_all()
        assert len(listed) == 1
        got = listed[0]
        assert got.id == created.id
        assert got.data.full_name == "Maria Silva"
        assert got.data.phone == "31988887777"
        assert got.data.bank_name == "Banco X"
        assert got.data.account_type == "corrente"
        assert got.data.agency == "1234"
        assert got.data.account == "56789-0"
        for omitted in ("email", "cpf", "cnpj", "cep", "street", "number", "complement",
                        "neighborhood", "city", "state", "rg", "birth_date", "pix_key"):
            assert getattr(got.data, omitted) is None, omitted
        assert got.created_at is not None

    def test_list_newest_first(self, repository, maria_form):
        first = repository.insert(_normalized(maria_form))
        maria_form["fullName"] = "Joana Souza"
        second = repository.insert(_normalized(maria_form))

        ids = [s.id for s in repository.list_all()]
        assert ids == [second.id, first.id]

    def test_same_cpf_allowed_without_unique_index(self, repository, maria_form):
        maria_form["cpf"] = "529.982.247-25"
        repository.insert(_normalized(maria_form))
        repository.insert(_normalized(maria_form))
        assert len(repository.list_all()) == 2

    def test_get_by_id(self, repository, maria_form):
        created = repository.insert(_normalized(maria_form))
        assert repository.get(created.id).data.full_name == "Maria Silva"
        assert repository.get(created.id + 1) is None


class TestDuplicates:
    """Unique tax id, when enforced."""

    def test_second_insert_is_duplicate(self, unique_session_factory, maria_form):
        repo = SubmissionRepository(unique_session_factory)
        maria_form["cpf"] = "529.982.247-25"
        repo.insert(_normalized(maria_form))

        with pytest.raises(DuplicateSubmissionError):
            repo.insert(_normalized(maria_form))

        assert len(repo.list_all()) == 1

    def test_missing_cpf_never_conflicts(self, unique_session_factory, maria_form):
        repo = SubmissionRepository(unique_session_factory)
        repo.insert(_normalized(maria_form))
        repo.insert(_normalized(maria_form))
        assert len(repo.list_all()) == 2


class TestDocuments:
    """Document rows reference the committed submission."""

    def test_add_s3_document(self, repository, maria_form):
        submission = repository.insert(_normalized(maria_form))
        file = UploadedFile(DocumentType.SELFIE, "selfie.jpg", "image/jpeg", b"\xff\xd8data")
        ref = StoredReference(provider="s3", url="https://b.s3.r.amazonaws.com/k", key="k")

        doc = repository.add_document(submission.id, file, ref)

        assert doc.submission_id == submission.id
        assert doc.document_type == "selfie"
        assert doc.size_bytes == 6
        assert doc.storage_key == "k"
        assert doc.drive_file_id is None
        assert repository.list_documents(submission.id)[0].id == doc.id

    def test_add_drive_document(self, repository, maria_form):
        submission = repository.insert(_normalized(maria_form))
        file = UploadedFile(DocumentType.DOCUMENT_FRONT, "rg.pdf", "application/pdf", b"%PDF")
        ref = StoredReference(
            provider="drive",
            url="https://drive.google.com/file/d/f1/view",
            file_id="f1",
            view_url="https://drive.google.com/file/d/f1/view",
            download_url="https://drive.google.com/uc?id=f1&export=download",
        )

        doc = repository.add_document(submission.id, file, ref)

        assert doc.storage_key is None
        assert doc.drive_file_id == "f1"
        assert doc.drive_download_url.endswith("export=download")

    def test_document_for_unknown_submission_fails(self, repository):
        file = UploadedFile(DocumentType.SELFIE, "selfie.jpg", "image/jpeg", b"x")
        ref = StoredReference(provider="s3", url="u", key="k")
        with pytest.raises(Exception):
            repository.add_document(9999, file, ref)


class TestCreateSubmissionUseCase:
    """Validation gate in front of the insert."""

    @pytest.mark.asyncio
    async def test_valid_form_is_inserted(self, repository, maria_form):
        use_case = CreateSubmissionUseCase(BrazilianFormValidator(), repository)
        submission = await use_case.execute(maria_form)
        assert repository.get(submission.id) is not None

    @pytest.mark.asyncio
    async def test_file_errors_alone_block_insert(self, repository, maria_form):
        use_case = CreateSubmissionUseCase(BrazilianFormValidator(), repository)

        with pytest.raises(SubmissionValidationError) as exc:
            await use_case.execute(maria_form, [FieldError("selfie", "Arquivo vazio")])

        assert [e.field for e in exc.value.errors] == ["selfie"]
        assert repository.list_all() == []

    @pytest.mark.asyncio
    async def test_field_and_file_errors_reported_together(self, repository, maria_form):
        del maria_form["phone"]
        use_case = CreateSubmissionUseCase(BrazilianFormValidator(), repository)

        with pytest.raises(SubmissionValidationError) as exc:
            await use_case.execute(maria_form, [FieldError("selfie", "Arquivo vazio")])

        assert {e.field for e in exc.value.errors} == {"phone", "selfie"}
