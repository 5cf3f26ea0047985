"""
Adapter: Brazilian Form Validator — Implementação COMPLETA.

Regras determinísticas para o formulário de cadastro.
Cada regra é uma função pura — fácil de adicionar/remover/testar.
"""

import re
from datetime import date, datetime
from typing import Any, Mapping

from intake.core.entities.submission import AccountCategory, AccountType, SubmissionData
from intake.core.errors import FieldError
from intake.core.interfaces.form_validator import IFormValidator, ValidationResult
from intake.infrastructure.rules.formatters import (
    normalize_phone,
    only_digits,
    sanitize_string,
    validate_cep,
    validate_cnpj,
    validate_cpf,
    validate_email,
    validate_pix_key,
)

# Campo canônico → nomes aceitos no request
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "fullName": ("fullName", "nome"),
    "phone": ("phone", "telefone"),
    "email": ("email",),
    "cpf": ("cpf", "individualTaxId"),
    "cnpj": ("cnpj", "organizationTaxId"),
    "accountCategory": ("accountCategory",),
    "rg": ("rg",),
    "birthDate": ("birthDate",),
    "cep": ("cep", "postalCode"),
    "street": ("street", "logradouro"),
    "number": ("number", "numero"),
    "complement": ("complement", "complemento"),
    "neighborhood": ("neighborhood", "bairro"),
    "city": ("city", "cidade"),
    "state": ("state", "estado"),
    "bankName": ("bankName",),
    "accountType": ("accountType",),
    "agency": ("agency",),
    "account": ("account",),
    "pixKey": ("pixKey",),
    "availableLimit": ("availableLimit",),
    "loanAmount": ("loanAmount",),
}

BANKING_FIELDS = {
    "bankName": "Nome do banco é obrigatório",
    "accountType": "Tipo de conta é obrigatório",
    "agency": "Agência é obrigatória",
    "account": "Conta é obrigatória",
}

ACCOUNT_TYPES = {t.value for t in AccountType}
ACCOUNT_CATEGORIES = {c.value for c in AccountCategory}


class BrazilianFormValidator(IFormValidator):
    """
    Validador do formulário de cadastro.

    Regras implementadas:
        1. Nome completo — obrigatório, mínimo 2 caracteres
        2. Telefone — obrigatório, 10 ou 11 dígitos
        3. Dados bancários — grupo obrigatório, tipo de conta fechado, agência até 4 dígitos
        4. CPF / CNPJ — opcionais, dígitos verificadores mod-11
        5. Categoria da conta — PF ou PJ
        6. Email — formato simples (tem @ e ponto)
        7. CEP e UF — formato
        8. Data de nascimento — formato + plausibilidade
        9. Chave PIX e valores de oferta — formato
    """

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        fields = self._collect(raw)

        rules = [
            self._rule_full_name(fields),
            self._rule_phone(fields),
            self._rule_banking(fields),
            self._rule_tax_ids(fields),
            self._rule_account_category(fields),
            self._rule_email(fields),
            self._rule_address(fields),
            self._rule_birth_date(fields),
            self._rule_pix_key(fields),
            self._rule_offer_values(fields),
        ]

        errors: list[FieldError] = []
        for result in rules:
            if result is not None:
                if isinstance(result, list):
                    errors.extend(result)
                else:
                    errors.append(result)

        if errors:
            return ValidationResult(errors=errors)
        return ValidationResult(data=self._normalize(fields))

    # ─── REGRAS ─────────────────────────────────────────────

    def _rule_full_name(self, fields: dict) -> FieldError | None:
        name = fields["fullName"]
        if not name:
            return FieldError("fullName", "Nome completo é obrigatório")
        if len(name) < 2:
            return FieldError("fullName", "Nome deve ter pelo menos 2 caracteres")
        return None

    def _rule_phone(self, fields: dict) -> FieldError | None:
        phone = fields["phone"]
        if not phone:
            return FieldError("phone", "Telefone é obrigatório")
        if len(normalize_phone(phone)) not in (10, 11):
            return FieldError("phone", "Telefone inválido")
        return None

    def _rule_banking(self, fields: dict) -> list[FieldError] | None:
        errors = [
            FieldError(name, message)
            for name, message in BANKING_FIELDS.items()
            if not fields[name]
        ]

        account_type = fields["accountType"].lower()
        if account_type and account_type not in ACCOUNT_TYPES:
            errors.append(FieldError("accountType", "Tipo de conta inválido"))

        agency = fields["agency"]
        if agency and not re.fullmatch(r"\d{1,4}", agency):
            errors.append(FieldError("agency", "Agência deve conter apenas números (até 4 dígitos)"))

        return errors or None

    def _rule_tax_ids(self, fields: dict) -> list[FieldError] | None:
        errors = []
        if fields["cpf"] and not validate_cpf(fields["cpf"]):
            errors.append(FieldError("cpf", "CPF inválido"))
        if fields["cnpj"] and not validate_cnpj(fields["cnpj"]):
            errors.append(FieldError("cnpj", "CNPJ inválido"))
        return errors or None

    def _rule_account_category(self, fields: dict) -> FieldError | None:
        category = fields["accountCategory"]
        if category and category.lower() not in ACCOUNT_CATEGORIES:
            return FieldError("accountCategory", "Categoria de conta inválida")
        return None

    def _rule_email(self, fields: dict) -> FieldError | None:
        email = fields["email"]
        if email and not validate_email(email):
            return FieldError("email", "Email inválido")
        return None

    def _rule_address(self, fields: dict) -> list[FieldError] | None:
        errors = []
        if fields["cep"] and not validate_cep(fields["cep"]):
            errors.append(FieldError("cep", "CEP inválido"))
        if fields["state"] and not re.fullmatch(r"[A-Za-z]{2}", fields["state"]):
            errors.append(FieldError("state", "Estado deve ser a sigla da UF"))
        return errors or None

    def _rule_birth_date(self, fields: dict) -> FieldError | None:
        value = fields["birthDate"]
        if not value:
            return None
        parsed = self._parse_date(value)
        if parsed is None:
            return FieldError("birthDate", "Data de nascimento inválida")
        if parsed > date.today() or parsed.year < 1900:
            return FieldError("birthDate", "Data de nascimento implausível")
        return None

    def _rule_pix_key(self, fields: dict) -> FieldError | None:
        if fields["pixKey"] and not validate_pix_key(fields["pixKey"]):
            return FieldError("pixKey", "Chave PIX inválida")
        return None

    def _rule_offer_values(self, fields: dict) -> list[FieldError] | None:
        errors = []
        for name in ("availableLimit", "loanAmount"):
            value = fields[name]
            if value and self._parse_amount(value) is None:
                errors.append(FieldError(name, "Valor inválido"))
        return errors or None

    # ─── Helpers ─────────────────────────────────────────────

    @staticmethod
    def _collect(raw: Mapping[str, Any]) -> dict[str, str]:
        """Resolve aliases e sanitiza cada campo (None → "")."""
        fields = {}
        for canonical, aliases in FIELD_ALIASES.items():
            value = ""
            for alias in aliases:
                candidate = raw.get(alias)
                if candidate is not None and str(candidate).strip():
                    value = sanitize_string(str(candidate))
                    break
            fields[canonical] = value
        return fields

    def _normalize(self, fields: dict[str, str]) -> SubmissionData:
        def opt(name: str) -> str | None:
            return fields[name] or None

        birth_date = self._parse_date(fields["birthDate"]) if fields["birthDate"] else None

        return SubmissionData(
            full_name=fields["fullName"],
            phone=normalize_phone(fields["phone"]),
            bank_name=fields["bankName"],
            account_type=fields["accountType"].lower(),
            agency=fields["agency"],
            account=fields["account"],
            email=fields["email"].lower() or None,
            cpf=only_digits(fields["cpf"]) or None,
            cnpj=only_digits(fields["cnpj"]) or None,
            account_category=fields["accountCategory"].lower() or None,
            rg=opt("rg"),
            birth_date=birth_date,
            cep=only_digits(fields["cep"]) or None,
            street=opt("street"),
            number=opt("number"),
            complement=opt("complement"),
            neighborhood=opt("neighborhood"),
            city=opt("city"),
            state=fields["state"].upper() or None,
            pix_key=opt("pixKey"),
            available_limit=self._parse_amount(fields["availableLimit"]) if fields["availableLimit"] else None,
            loan_amount=self._parse_amount(fields["loanAmount"]) if fields["loanAmount"] else None,
        )

    @staticmethod
    def _parse_date(date_str: str) -> date | None:
        """Tenta parsear data em formatos brasileiros comuns e ISO."""
        for fmt in ("%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y", "%Y-%m-%d"):
            try:
                return datetime.strptime(date_str.strip(), fmt).date()
            except ValueError:
                continue
        return None

    @staticmethod
    def _parse_amount(value: str) -> str | None:
        """
        "R$ 10.000,50" → "10000.50". Retorna None se não for valor monetário.
        """
        cleaned = value.replace("R$", "").replace(" ", "")
        # Com separador de milhar: 1.234.567,89
        if re.fullmatch(r"\d{1,3}(\.\d{3})+(,\d{1,2})?", cleaned):
            return cleaned.replace(".", "").replace(",", ".")
        if re.fullmatch(r"\d+([.,]\d{1,2})?", cleaned):
            return cleaned.replace(",", ".")
        return None
