"""
Formatadores e validadores de documentos brasileiros.

Funções puras, sem estado — usadas pelo validador do formulário,
pela mensagem de notificação e pela integração com o CRM.
"""

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

CNPJ_WEIGHTS_1 = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
CNPJ_WEIGHTS_2 = [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]


def only_digits(value: str | None) -> str:
    if not value:
        return ""
    return re.sub(r"\D", "", value)


def sanitize_string(value: str | None) -> str:
    """Trim + remove < e > (texto vai parar em HTML/mensagens)."""
    if value is None:
        return ""
    return re.sub(r"[<>]", "", str(value).strip()).strip()


def normalize_phone(phone: str | None) -> str:
    """Só dígitos, sem o código do país (55) quando vier junto."""
    digits = only_digits(phone)
    if len(digits) in (12, 13) and digits.startswith("55"):
        digits = digits[2:]
    return digits


# ─── Validação ──────────────────────────────────────────────

def validate_cpf(cpf: str | None) -> bool:
    """CPF: 11 dígitos, dois verificadores mod-11 (pesos 10..2 e 11..2)."""
    digits = only_digits(cpf)
    if len(digits) != 11:
        return False
    # Rejeita CPFs com todos os dígitos iguais
    if digits == digits[0] * 11:
        return False

    nums = [int(d) for d in digits]

    sum_1 = sum(n * w for n, w in zip(nums[:9], range(10, 1, -1)))
    d1 = 11 - (sum_1 % 11)
    d1 = 0 if d1 >= 10 else d1

    sum_2 = sum(n * w for n, w in zip(nums[:10], range(11, 1, -1)))
    d2 = 11 - (sum_2 % 11)
    d2 = 0 if d2 >= 10 else d2

    return nums[9] == d1 and nums[10] == d2


def validate_cnpj(cnpj: str | None) -> bool:
    """CNPJ: 14 dígitos, dois verificadores mod-11 com pesos próprios."""
    digits = only_digits(cnpj)
    if len(digits) != 14:
        return False
    if digits == digits[0] * 14:
        return False

    nums = [int(d) for d in digits]

    rem_1 = sum(n * w for n, w in zip(nums[:12], CNPJ_WEIGHTS_1)) % 11
    d1 = 0 if rem_1 < 2 else 11 - rem_1

    rem_2 = sum(n * w for n, w in zip(nums[:13], CNPJ_WEIGHTS_2)) % 11
    d2 = 0 if rem_2 < 2 else 11 - rem_2

    return nums[12] == d1 and nums[13] == d2


def validate_phone(phone: str | None) -> bool:
    return len(normalize_phone(phone)) in (10, 11)


def validate_cep(cep: str | None) -> bool:
    return len(only_digits(cep)) == 8


def validate_email(email: str | None) -> bool:
    if not email:
        return False
    return bool(_EMAIL_RE.match(email.strip().lower()))


def validate_pix_key(pix_key: str | None) -> bool:
    """Chave PIX: email, CPF, CNPJ, telefone ou chave aleatória (UUID)."""
    key = (pix_key or "").strip()
    if not key:
        return True
    if "@" in key:
        return validate_email(key)
    if _UUID_RE.match(key):
        return True
    if re.fullmatch(r"\d{3}\.\d{3}\.\d{3}-\d{2}", key):
        return validate_cpf(key)
    if re.fullmatch(r"\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}", key):
        return validate_cnpj(key)
    if re.fullmatch(r"\+?[\d\s()\-]+", key):
        digits = only_digits(key)
        if len(digits) == 11 and validate_cpf(digits):
            return True
        if len(digits) == 14:
            return validate_cnpj(digits)
        return validate_phone(digits)
    return False


# ─── Formatação ─────────────────────────────────────────────

def format_cpf(value: str | None) -> str:
    d = only_digits(value)
    if len(d) != 11:
        return value or ""
    return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"


def format_cnpj(value: str | None) -> str:
    d = only_digits(value)
    if len(d) != 14:
        return value or ""
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"


def format_phone(value: str | None) -> str:
    d = normalize_phone(value)
    if len(d) == 11:
        return f"({d[:2]}) {d[2:7]}-{d[7:]}"
    if len(d) == 10:
        return f"({d[:2]}) {d[2:6]}-{d[6:]}"
    return value or ""


def format_cep(value: str | None) -> str:
    d = only_digits(value)
    if len(d) != 8:
        return value or ""
    return f"{d[:5]}-{d[5:]}"
