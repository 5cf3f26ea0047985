"""
Pydantic schemas — Response models para a API.

O front fala camelCase; os campos aqui seguem snake_case com alias.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from intake.core.entities.submission import Submission, SubmissionDocument


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldErrorResponse(CamelModel):
    field: str
    message: str


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    errors: list[FieldErrorResponse] = []


class CreatedSubmission(CamelModel):
    id: int
    full_name: str
    email: str | None = None
    created_at: datetime


class CreateSubmissionResponse(CamelModel):
    success: bool = True
    message: str = "Cadastro realizado com sucesso"
    data: CreatedSubmission


class SubmissionResponse(CamelModel):
    id: int
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    cpf: str | None = None
    cnpj: str | None = None
    account_category: str | None = None
    rg: str | None = None
    birth_date: date | None = None
    cep: str | None = None
    street: str | None = None
    number: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    bank_name: str | None = None
    account_type: str | None = None
    agency: str | None = None
    account: str | None = None
    pix_key: str | None = None
    available_limit: str | None = None
    loan_amount: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, submission: Submission) -> "SubmissionResponse":
        d = submission.data
        return cls(
            id=submission.id,
            full_name=d.full_name,
            email=d.email,
            phone=d.phone,
            cpf=d.cpf,
            cnpj=d.cnpj,
            account_category=d.account_category,
            rg=d.rg,
            birth_date=d.birth_date,
            cep=d.cep,
            street=d.street,
            number=d.number,
            complement=d.complement,
            neighborhood=d.neighborhood,
            city=d.city,
            state=d.state,
            bank_name=d.bank_name,
            account_type=d.account_type,
            agency=d.agency,
            account=d.account,
            pix_key=d.pix_key,
            available_limit=d.available_limit,
            loan_amount=d.loan_amount,
            created_at=submission.created_at,
            updated_at=submission.updated_at,
        )


class DocumentResponse(CamelModel):
    id: int
    document_type: str
    file_name: str
    content_type: str | None = None
    size_bytes: int | None = None
    file_url: str
    storage_key: str | None = None
    drive_file_id: str | None = None
    drive_view_url: str | None = None
    drive_download_url: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, document: SubmissionDocument) -> "DocumentResponse":
        return cls(
            id=document.id,
            document_type=document.document_type,
            file_name=document.file_name,
            content_type=document.content_type,
            size_bytes=document.size_bytes,
            file_url=document.file_url,
            storage_key=document.storage_key,
            drive_file_id=document.drive_file_id,
            drive_view_url=document.drive_view_url,
            drive_download_url=document.drive_download_url,
            created_at=document.created_at,
        )


class SubmissionDetail(SubmissionResponse):
    """Cadastro + documentos armazenados."""
    documents: list[DocumentResponse] = []


class SubmissionDetailResponse(CamelModel):
    success: bool = True
    data: SubmissionDetail


class SubmissionListResponse(CamelModel):
    success: bool = True
    data: list[SubmissionResponse]
    total: int


class AddressResponse(CamelModel):
    cep: str
    street: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    ibge: str = ""
    ddd: str = ""


class AddressLookupResponse(CamelModel):
    success: bool = True
    data: AddressResponse


class HealthResponse(CamelModel):
    status: str
    version: str
    database: str
    storage_provider: str
    crm_enabled: bool
    whatsapp_enabled: bool
