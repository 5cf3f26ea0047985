"""
Contract: Submission Store

Dona da escrita principal (o cadastro) e dos registros de documentos.
Nenhuma regra de negócio aqui — a validação já aconteceu antes.
"""

from abc import ABC, abstractmethod

from intake.core.entities.submission import Submission, SubmissionData, SubmissionDocument, UploadedFile
from intake.core.interfaces.storage_service import StoredReference


class ISubmissionStore(ABC):
    """
    Port: Submission Store

    Cada insert é uma unidade atômica própria; não há transação
    cobrindo cadastro + documentos.
    """

    @abstractmethod
    def insert(self, data: SubmissionData) -> Submission:
        """
        Insere o cadastro e retorna com o id gerado.

        Raises:
            DuplicateSubmissionError: violação de unicidade.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[Submission]:
        """Todos os cadastros, do mais recente para o mais antigo."""
        ...

    @abstractmethod
    def get(self, submission_id: int) -> Submission | None:
        """Um cadastro pelo id, ou None se não existir."""
        ...

    @abstractmethod
    def add_document(
        self, submission_id: int, file: UploadedFile, reference: StoredReference
    ) -> SubmissionDocument:
        """Registra um documento já armazenado no provider."""
        ...

    @abstractmethod
    def list_documents(self, submission_id: int) -> list[SubmissionDocument]:
        ...
