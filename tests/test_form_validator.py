"""
Tests for the form validator and the Brazilian document helpers.
"""

from datetime import date

import pytest

from intake.infrastructure.rules.brazilian_form_rules import BrazilianFormValidator
from intake.infrastructure.rules.formatters import (
    format_cep,
    format_cnpj,
    format_cpf,
    format_phone,
    normalize_phone,
    sanitize_string,
    validate_cnpj,
    validate_cpf,
    validate_email,
    validate_pix_key,
)


@pytest.fixture
def validator():
    return BrazilianFormValidator()


def _fields(result):
    return {e.field for e in result.errors}


class TestTaxIds:
    """CPF and CNPJ check digits."""

    def test_known_valid_cpf(self):
        assert validate_cpf("529.982.247-25")
        assert validate_cpf("52998224725")

    def test_repeated_digit_cpf_rejected(self):
        assert not validate_cpf("111.111.111-11")

    @pytest.mark.parametrize("cpf", ["529.982.247-24", "529.982.247-15", "12345678901", "5299822472"])
    def test_bad_check_digits_rejected(self, cpf):
        assert not validate_cpf(cpf)

    def test_known_valid_cnpj(self):
        assert validate_cnpj("11.222.333/0001-81")

    def test_zero_cnpj_rejected(self):
        assert not validate_cnpj("00.000.000/0000-00")

    def test_bad_cnpj_check_digit_rejected(self):
        assert not validate_cnpj("11.222.333/0001-82")


class TestHelpers:
    """Sanitizing and formatting."""

    def test_sanitize_strips_angle_brackets(self):
        assert sanitize_string("  <b>Maria</b>  ") == "bMaria/b"

    def test_normalize_phone_drops_country_code(self):
        assert normalize_phone("+55 (31) 98888-7777") == "31988887777"

    def test_formatters(self):
        assert format_cpf("52998224725") == "529.982.247-25"
        assert format_cnpj("11222333000181") == "11.222.333/0001-81"
        assert format_phone("31988887777") == "(31) 98888-7777"
        assert format_phone("3133334444") == "(31) 3333-4444"
        assert format_cep("01310100") == "01310-100"

    def test_email_is_permissive(self):
        assert validate_email("a@b.co")
        assert not validate_email("sem-arroba.com")
        assert not validate_email("a@semponto")

    def test_pix_key_shapes(self):
        assert validate_pix_key("maria@example.com")
        assert validate_pix_key("529.982.247-25")
        assert validate_pix_key("123e4567-e89b-12d3-a456-426614174000")
        assert validate_pix_key("(31) 98888-7777")
        assert not validate_pix_key("chave qualquer")


class TestRequiredFields:
    """Phone, name and the banking group."""

    def test_minimal_form_accepted(self, validator, maria_form):
        result = validator.validate(maria_form)
        assert result.ok
        assert result.data.full_name == "Maria Silva"
        assert result.data.phone == "31988887777"
        assert result.data.cpf is None
        assert result.data.cep is None

    @pytest.mark.parametrize("field", ["bankName", "accountType", "agency", "account"])
    def test_missing_banking_field_is_named(self, validator, maria_form, field):
        del maria_form[field]
        result = validator.validate(maria_form)
        assert not result.ok
        assert field in _fields(result)

    def test_missing_phone(self, validator, maria_form):
        maria_form["phone"] = "   "
        result = validator.validate(maria_form)
        assert "phone" in _fields(result)

    def test_short_phone(self, validator, maria_form):
        maria_form["phone"] = "98888"
        assert "phone" in _fields(validator.validate(maria_form))

    def test_name_too_short(self, validator, maria_form):
        maria_form["fullName"] = "M"
        assert "fullName" in _fields(validator.validate(maria_form))

    def test_account_type_closed_set(self, validator, maria_form):
        maria_form["accountType"] = "investimento"
        assert "accountType" in _fields(validator.validate(maria_form))

    def test_account_type_case_insensitive(self, validator, maria_form):
        maria_form["accountType"] = "Poupanca"
        result = validator.validate(maria_form)
        assert result.ok
        assert result.data.account_type == "poupanca"

    @pytest.mark.parametrize("agency", ["12345", "12a4"])
    def test_agency_numeric_up_to_four_digits(self, validator, maria_form, agency):
        maria_form["agency"] = agency
        assert "agency" in _fields(validator.validate(maria_form))

    def test_errors_are_collected_together(self, validator):
        result = validator.validate({})
        assert {"fullName", "phone", "bankName", "accountType", "agency", "account"} <= _fields(result)


class TestOptionalFields:
    """Optional fields are checked only when present."""

    def test_invalid_cpf(self, validator, maria_form):
        maria_form["cpf"] = "111.111.111-11"
        assert _fields(validator.validate(maria_form)) == {"cpf"}

    def test_aliases_are_accepted(self, validator, maria_form):
        maria_form["individualTaxId"] = "529.982.247-25"
        maria_form["organizationTaxId"] = "11.222.333/0001-81"
        maria_form["postalCode"] = "01310-100"
        result = validator.validate(maria_form)
        assert result.ok
        assert result.data.cpf == "52998224725"
        assert result.data.cnpj == "11222333000181"
        assert result.data.cep == "01310100"

    def test_cep_must_have_eight_digits(self, validator, maria_form):
        maria_form["cep"] = "0131-010"
        assert "cep" in _fields(validator.validate(maria_form))

    def test_email_lowercased_and_trimmed(self, validator, maria_form):
        maria_form["email"] = "  Maria.Silva@Example.COM "
        assert validator.validate(maria_form).data.email == "maria.silva@example.com"

    def test_invalid_email(self, validator, maria_form):
        maria_form["email"] = "maria"
        assert "email" in _fields(validator.validate(maria_form))

    def test_state_uppercased(self, validator, maria_form):
        maria_form["state"] = "mg"
        assert validator.validate(maria_form).data.state == "MG"

    def test_invalid_account_category(self, validator, maria_form):
        maria_form["accountCategory"] = "empresa"
        assert "accountCategory" in _fields(validator.validate(maria_form))

    def test_birth_date_brazilian_format(self, validator, maria_form):
        maria_form["birthDate"] = "15/03/1985"
        assert validator.validate(maria_form).data.birth_date == date(1985, 3, 15)

    def test_birth_date_in_future_rejected(self, validator, maria_form):
        maria_form["birthDate"] = f"01/01/{date.today().year + 1}"
        assert "birthDate" in _fields(validator.validate(maria_form))

    def test_offer_values_normalized(self, validator, maria_form):
        maria_form["availableLimit"] = "R$ 10.000,50"
        maria_form["loanAmount"] = "2500"
        data = validator.validate(maria_form).data
        assert data.available_limit == "10000.50"
        assert data.loan_amount == "2500"

    def test_invalid_offer_value(self, validator, maria_form):
        maria_form["loanAmount"] = "muito"
        assert "loanAmount" in _fields(validator.validate(maria_form))

    def test_angle_brackets_stripped_from_output(self, validator, maria_form):
        maria_form["street"] = "<script>Rua A</script>"
        assert validator.validate(maria_form).data.street == "scriptRua A/script"


class TestActiveTaxId:
    """Which tax id identifies the submission."""

    def test_explicit_category_wins(self, validator, maria_form):
        maria_form.update(cpf="52998224725", cnpj="11222333000181", accountCategory="pessoa_juridica")
        data = validator.validate(maria_form).data
        assert data.active_tax_id() == ("cnpj", "11222333000181")

    def test_cpf_first_without_category(self, validator, maria_form):
        maria_form.update(cpf="52998224725", cnpj="11222333000181")
        assert validator.validate(maria_form).data.active_tax_id() == ("cpf", "52998224725")

    def test_none_when_no_tax_id(self, validator, maria_form):
        assert validator.validate(maria_form).data.active_tax_id() is None
