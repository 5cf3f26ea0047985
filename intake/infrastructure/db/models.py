"""
Database Models — SQLAlchemy.

Tables:
  - submissions: cadastros recebidos pelo formulário
  - submission_documents: arquivos enviados (S3 ou Google Drive)
"""

from datetime import datetime

from sqlalchemy import Column, String, Integer, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import DeclarativeBase, relationship

from intake.core.entities.submission import Submission, SubmissionData, SubmissionDocument


class Base(DeclarativeBase):
    pass


class SubmissionRecord(Base):
    """Um cadastro. Todos os campos são nullable — a validação fica antes."""
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Identificação
    full_name = Column(String(255))
    email = Column(String(255))
    phone = Column(String(20), index=True)
    cpf = Column(String(11))
    cnpj = Column(String(14))
    account_category = Column(String(20))
    rg = Column(String(30))
    birth_date = Column(Date)

    # Endereço
    cep = Column(String(8))
    street = Column(Text)
    number = Column(String(20))
    complement = Column(Text)
    neighborhood = Column(String(100))
    city = Column(String(100))
    state = Column(String(2))

    # Dados bancários
    bank_name = Column(String(255))
    account_type = Column(String(20))
    agency = Column(String(10))
    account = Column(String(30))
    pix_key = Column(String(140))

    # Oferta (espelhada no CRM)
    available_limit = Column(String(30))
    loan_amount = Column(String(30))

    documents = relationship(
        "DocumentRecord",
        back_populates="submission",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Submission {self.id} phone={self.phone}>"

    @classmethod
    def from_data(cls, data: SubmissionData) -> "SubmissionRecord":
        return cls(
            full_name=data.full_name,
            email=data.email,
            phone=data.phone,
            cpf=data.cpf,
            cnpj=data.cnpj,
            account_category=data.account_category,
            rg=data.rg,
            birth_date=data.birth_date,
            cep=data.cep,
            street=data.street,
            number=data.number,
            complement=data.complement,
            neighborhood=data.neighborhood,
            city=data.city,
            state=data.state,
            bank_name=data.bank_name,
            account_type=data.account_type,
            agency=data.agency,
            account=data.account,
            pix_key=data.pix_key,
            available_limit=data.available_limit,
            loan_amount=data.loan_amount,
        )

    def to_entity(self) -> Submission:
        return Submission(
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            data=SubmissionData(
                full_name=self.full_name,
                phone=self.phone,
                bank_name=self.bank_name,
                account_type=self.account_type,
                agency=self.agency,
                account=self.account,
                email=self.email,
                cpf=self.cpf,
                cnpj=self.cnpj,
                account_category=self.account_category,
                rg=self.rg,
                birth_date=self.birth_date,
                cep=self.cep,
                street=self.street,
                number=self.number,
                complement=self.complement,
                neighborhood=self.neighborhood,
                city=self.city,
                state=self.state,
                pix_key=self.pix_key,
                available_limit=self.available_limit,
                loan_amount=self.loan_amount,
            ),
        )


class DocumentRecord(Base):
    """Um arquivo do cadastro. Exatamente um formato de referência é preenchido."""
    __tablename__ = "submission_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    submission_id = Column(
        Integer, ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_type = Column(String(50), nullable=False)
    file_name = Column(String(255), nullable=False)
    content_type = Column(String(100))
    size_bytes = Column(Integer)
    file_url = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # S3
    storage_key = Column(String(512))

    # Google Drive
    drive_file_id = Column(String(255))
    drive_view_url = Column(Text)
    drive_download_url = Column(Text)

    submission = relationship("SubmissionRecord", back_populates="documents")

    def __repr__(self):
        return f"<Document {self.id} [{self.document_type}] submission={self.submission_id}>"

    def to_entity(self) -> SubmissionDocument:
        return SubmissionDocument(
            id=self.id,
            submission_id=self.submission_id,
            document_type=self.document_type,
            file_name=self.file_name,
            content_type=self.content_type,
            size_bytes=self.size_bytes,
            file_url=self.file_url,
            storage_key=self.storage_key,
            drive_file_id=self.drive_file_id,
            drive_view_url=self.drive_view_url,
            drive_download_url=self.drive_download_url,
            created_at=self.created_at,
        )
