from .brazilian_form_rules import BrazilianFormValidator
from .formatters import (
    format_cep,
    format_cnpj,
    format_cpf,
    format_phone,
    normalize_phone,
    only_digits,
    validate_cnpj,
    validate_cpf,
)

__all__ = [
    "BrazilianFormValidator",
    "format_cep",
    "format_cnpj",
    "format_cpf",
    "format_phone",
    "normalize_phone",
    "only_digits",
    "validate_cnpj",
    "validate_cpf",
]
