"""
Use Case: Create Submission.

Valida → insere. É a única parte síncrona do request; o fan-out
começa depois que este use case retorna.
"""

import asyncio
import logging
from typing import Any, Mapping, Sequence

from intake.core.entities.submission import Submission
from intake.core.errors import FieldError, SubmissionValidationError
from intake.core.interfaces.form_validator import IFormValidator
from intake.core.interfaces.submission_store import ISubmissionStore

logger = logging.getLogger(__name__)


class CreateSubmissionUseCase:

    def __init__(self, validator: IFormValidator, store: ISubmissionStore):
        self._validator = validator
        self._store = store

    async def execute(self, raw: Mapping[str, Any], file_errors: Sequence[FieldError] = ()) -> Submission:
        """
        Args:
            raw: Campos do formulário.
            file_errors: Problemas de tipo/tamanho já encontrados nos arquivos;
                entram na mesma resposta de validação.

        Raises:
            SubmissionValidationError: campos inválidos (400).
            DuplicateSubmissionError: violação de unicidade (409).
        """
        result = self._validator.validate(raw)
        if not result.ok or file_errors:
            errors = list(result.errors) + list(file_errors)
            logger.debug(f"Validation failed: {[e.field for e in errors]}")
            raise SubmissionValidationError(errors)

        return await asyncio.to_thread(self._store.insert, result.data)
