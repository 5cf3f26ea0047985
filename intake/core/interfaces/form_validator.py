"""
Contract: Form Validator

Valida e normaliza o formulário bruto. Função pura: sem I/O,
nunca lança exceção por problema de input do usuário.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

from intake.core.entities.submission import SubmissionData
from intake.core.errors import FieldError


@dataclass
class ValidationResult:
    """Ou `data` normalizado, ou a lista de erros por campo."""
    data: SubmissionData | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.data is not None and not self.errors


class IFormValidator(ABC):
    """
    Port: Form Validator
    """

    @abstractmethod
    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        """
        Valida o formulário.

        Args:
            raw: Campos chave/valor como vieram do request.

        Returns:
            ValidationResult com os dados normalizados ou os erros.
        """
        ...
