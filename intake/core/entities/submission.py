"""
Entity: Submission

Um cadastro recebido pelo formulário (dados pessoais, bancários
e documentos). Modelo puro — sem dependência de framework ou banco.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class AccountType(str, Enum):
    CORRENTE = "corrente"
    POUPANCA = "poupanca"
    SALARIO = "salario"


class AccountCategory(str, Enum):
    PESSOA_FISICA = "pessoa_fisica"
    PESSOA_JURIDICA = "pessoa_juridica"


class DocumentType(str, Enum):
    DOCUMENT_FRONT = "document_front"
    DOCUMENT_BACK = "document_back"
    SELFIE = "selfie"
    RESIDENCE_PROOF = "residence_proof"


# Campo multipart do formulário → tipo de documento
FORM_FILE_FIELDS: dict[str, DocumentType] = {
    "documentFront": DocumentType.DOCUMENT_FRONT,
    "documentBack": DocumentType.DOCUMENT_BACK,
    "selfie": DocumentType.SELFIE,
    "residenceProof": DocumentType.RESIDENCE_PROOF,
}


@dataclass
class SubmissionData:
    """Dados normalizados do formulário, antes do insert."""
    full_name: str
    phone: str                           # apenas dígitos, DDD + número
    bank_name: str
    account_type: str                    # AccountType
    agency: str
    account: str
    email: str | None = None
    cpf: str | None = None               # 11 dígitos
    cnpj: str | None = None              # 14 dígitos
    account_category: str | None = None  # AccountCategory
    rg: str | None = None
    birth_date: date | None = None
    cep: str | None = None
    street: str | None = None
    number: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None             # UF
    pix_key: str | None = None
    available_limit: str | None = None
    loan_amount: str | None = None

    def active_tax_id(self) -> tuple[str, str] | None:
        """
        Documento que identifica o cadastro (pasta, CRM).

        A categoria explícita decide; sem ela, CPF antes de CNPJ.
        """
        if self.account_category == AccountCategory.PESSOA_JURIDICA.value and self.cnpj:
            return "cnpj", self.cnpj
        if self.account_category == AccountCategory.PESSOA_FISICA.value and self.cpf:
            return "cpf", self.cpf
        if self.cpf:
            return "cpf", self.cpf
        if self.cnpj:
            return "cnpj", self.cnpj
        return None


@dataclass
class Submission:
    """Cadastro persistido. O id é gerado pelo banco e nunca muda."""
    id: int
    data: SubmissionData
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class SubmissionContext:
    """O que o storage precisa saber do cadastro para nomear arquivos e pastas."""
    submission_id: int
    state: str | None = None
    display_name: str | None = None
    tax_id: str | None = None

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionContext":
        active = submission.data.active_tax_id()
        return cls(
            submission_id=submission.id,
            state=submission.data.state,
            display_name=submission.data.full_name,
            tax_id=active[1] if active else None,
        )


@dataclass
class UploadedFile:
    """Arquivo recebido em memória no request."""
    document_type: DocumentType
    file_name: str
    content_type: str
    data: bytes = b""

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass
class SubmissionDocument:
    """Documento já armazenado e registrado no banco."""
    id: int
    submission_id: int
    document_type: str
    file_name: str
    content_type: str
    size_bytes: int
    file_url: str
    storage_key: str | None = None        # S3
    drive_file_id: str | None = None      # Google Drive
    drive_view_url: str | None = None
    drive_download_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
