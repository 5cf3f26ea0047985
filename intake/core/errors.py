"""
Domain errors.

Só ValidationFailure, DuplicateSubmission e falhas fatais de insert
chegam ao cliente HTTP. O resto é tratado dentro do fan-out.
"""

from dataclasses import dataclass


class IntakeError(Exception):
    """Base de todos os erros do domínio."""


@dataclass
class FieldError:
    """Erro de validação ligado a um campo do formulário."""
    field: str
    message: str


class SubmissionValidationError(IntakeError):
    def __init__(self, errors: list[FieldError]):
        super().__init__(f"{len(errors)} campo(s) inválido(s)")
        self.errors = errors


class DuplicateSubmissionError(IntakeError):
    """Violação de unicidade no insert do cadastro (409)."""


class StorageConfigurationError(IntakeError):
    """Provider de storage selecionado sem a configuração necessária."""


class UploadError(IntakeError):
    """Falha do provider ao armazenar um arquivo."""


class FolderProvisioningError(IntakeError):
    """Falha ao buscar/criar a pasta do cadastro no drive."""


class CrmSyncError(IntakeError):
    pass


class NotificationError(IntakeError):
    pass


class PostalCodeLookupError(IntakeError):
    """Falha ao consultar o serviço externo de CEP."""
