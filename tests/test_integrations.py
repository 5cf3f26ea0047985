"""
Tests for the CRM sync, WhatsApp notifier and postal-code client.

HTTP is faked with httpx.MockTransport.
"""

import json
from datetime import date, datetime

import httpx
import pytest

from intake.core.entities.submission import Submission, SubmissionData
from intake.core.errors import PostalCodeLookupError
from intake.infrastructure.cep.viacep_client import ViaCepClient
from intake.infrastructure.crm.kommo_crm import KommoCrmSync, KommoFieldIds
from intake.infrastructure.notifications.message_builder import SAO_PAULO, build_submission_message
from intake.infrastructure.notifications.whatsapp_notifier import WhatsAppNotifier


def _submission(**overrides) -> Submission:
    values = dict(
        full_name="Maria Silva",
        phone="31988887777",
        bank_name="Banco X",
        account_type="corrente",
        agency="1234",
        account="56789-0",
    )
    values.update(overrides)
    return Submission(id=7, data=SubmissionData(**values))


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestKommoCrmSync:
    """Phone lookup, contact/company/lead updates, failure isolation."""

    @pytest.mark.asyncio
    async def test_full_update_with_mobile_prefix_retry(self):
        requests = []

        def handler(request: httpx.Request):
            requests.append(request)
            if request.method == "GET":
                if request.url.params["query"] == "31988887777":
                    return httpx.Response(204)
                return httpx.Response(200, json={"_embedded": {"contacts": [
                    {"id": 10, "_embedded": {"leads": []}},
                    {"id": 11, "_embedded": {"leads": [{"id": 99}], "companies": [{"id": 5}]}},
                ]}})
            return httpx.Response(200, json={})

        crm = KommoCrmSync("https://crm.test", "tok", client=_client(handler))
        await crm.push(_submission(
            cnpj="11222333000181", email="maria@example.com",
            available_limit="10000.50", loan_amount="2500",
        ))

        searches = [r for r in requests if r.method == "GET"]
        assert [r.url.params["query"] for r in searches] == ["31988887777", "3188887777"]

        patches = {r.url.path: json.loads(r.content) for r in requests if r.method == "PATCH"}
        assert set(patches) == {"/api/v4/contacts/11", "/api/v4/companies/5", "/api/v4/leads/99"}

        fields = KommoFieldIds()
        contact = patches["/api/v4/contacts/11"]
        assert contact["name"] == "Maria Silva"
        values = {f["field_id"]: f["values"][0]["value"] for f in contact["custom_fields_values"]}
        assert values[fields.contact_phone] == "(31) 98888-7777"
        assert values[fields.contact_email] == "maria@example.com"

        company = patches["/api/v4/companies/5"]["custom_fields_values"][0]
        assert company["values"][0]["value"] == 11222333000181

        lead = {f["field_id"]: f["values"][0]["value"] for f in patches["/api/v4/leads/99"]["custom_fields_values"]}
        assert lead[fields.lead_bank] == "Banco X"
        assert lead[fields.lead_agency] == "1234"
        assert lead[fields.lead_account] == "56789-0"
        assert lead[fields.lead_available_limit] == "10000.50"
        assert lead[fields.lead_loan_amount] == "2500"

        assert all(r.headers["Authorization"] == "Bearer tok" for r in requests)

    @pytest.mark.asyncio
    async def test_network_error_is_swallowed(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        crm = KommoCrmSync("https://crm.test", "tok", client=_client(handler))
        await crm.push(_submission())

    @pytest.mark.asyncio
    async def test_contact_without_lead_is_skipped(self):
        methods = []

        def handler(request):
            methods.append(request.method)
            return httpx.Response(200, json={"_embedded": {"contacts": [{"id": 1, "_embedded": {"leads": []}}]}})

        await KommoCrmSync("https://crm.test", "tok", client=_client(handler)).push(_submission())
        assert "PATCH" not in methods

    @pytest.mark.asyncio
    async def test_company_failure_does_not_block_lead(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            if request.method == "GET":
                return httpx.Response(200, json={"_embedded": {"contacts": [
                    {"id": 11, "_embedded": {"leads": [{"id": 99}], "companies": [{"id": 5}]}},
                ]}})
            if "companies" in request.url.path:
                return httpx.Response(500, text="boom")
            return httpx.Response(200, json={})

        await KommoCrmSync("https://crm.test", "tok", client=_client(handler)).push(
            _submission(cnpj="11222333000181")
        )
        assert "/api/v4/leads/99" in paths

    @pytest.mark.asyncio
    async def test_disabled_makes_no_calls(self):
        def handler(request):
            raise AssertionError("should not be called")

        crm = KommoCrmSync("https://crm.test", "tok", enabled=False, client=_client(handler))
        await crm.push(_submission())
        assert not crm.enabled


class TestMessageBuilder:
    """Summary text rules."""

    NOW = datetime(2024, 5, 10, 14, 30, tzinfo=SAO_PAULO)

    def test_zero_documents_says_awaiting(self):
        text = build_submission_message(_submission(), None, now=self.NOW)
        assert "Aguardando documentos" in text
        assert "10/05/2024 14:30:00" in text

    def test_folder_link_included(self):
        text = build_submission_message(_submission(), "https://drive.google.com/drive/folders/f1", now=self.NOW)
        assert "https://drive.google.com/drive/folders/f1" in text
        assert "Aguardando documentos" not in text

    def test_cnpj_preferred_over_cpf(self):
        text = build_submission_message(_submission(cpf="52998224725", cnpj="11222333000181"), now=self.NOW)
        assert "CNPJ: 11.222.333/0001-81" in text
        assert "529.982.247-25" not in text

    def test_no_tax_id(self):
        text = build_submission_message(_submission(), now=self.NOW)
        assert "CPF/CNPJ: Não informado" in text

    def test_optional_fields_omitted_banking_and_state_always(self):
        text = build_submission_message(_submission(), now=self.NOW)
        assert "Email" not in text
        assert "Data Nascimento" not in text
        assert "Estado:* Não informado" in text
        assert "Banco: Banco X" in text
        assert "Agência: 1234" in text
        assert "Conta: 56789-0" in text

    def test_birth_date_when_present(self):
        text = build_submission_message(_submission(birth_date=date(1985, 3, 15), state="MG"), now=self.NOW)
        assert "Data Nascimento: 15/03/1985" in text
        assert "Estado:* MG" in text


class TestWhatsAppNotifier:
    """Multi-recipient delivery."""

    def _notifier(self, handler, recipients, **kwargs):
        return WhatsAppNotifier(
            access_token="tok",
            phone_number_id="123",
            recipients=recipients,
            delivery_delay_seconds=0,
            client=_client(handler),
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_one_failing_destination_out_of_three(self):
        attempted = []

        def handler(request):
            to = json.loads(request.content)["to"]
            attempted.append(to)
            if to == "5531000000002":
                return httpx.Response(500, json={"error": "rate limited"})
            return httpx.Response(200, json={"messages": [{"id": "wamid"}]})

        notifier = self._notifier(handler, ["5531000000001", "5531000000002", "5531000000003"])
        assert await notifier.notify(_submission(), None) is True
        assert attempted == ["5531000000001", "5531000000002", "5531000000003"]

    @pytest.mark.asyncio
    async def test_network_error_on_one_destination(self):
        attempted = []

        def handler(request):
            to = json.loads(request.content)["to"]
            attempted.append(to)
            if to == "a":
                raise httpx.ConnectError("down", request=request)
            return httpx.Response(200, json={})

        assert await self._notifier(handler, ["a", "b"]).notify(_submission()) is True
        assert attempted == ["a", "b"]

    @pytest.mark.asyncio
    async def test_all_destinations_fail(self):
        notifier = self._notifier(lambda r: httpx.Response(400, json={}), ["a", "b"])
        assert await notifier.notify(_submission()) is False

    @pytest.mark.asyncio
    async def test_text_payload(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            assert request.url.path == "/v18.0/123/messages"
            return httpx.Response(200, json={})

        await self._notifier(handler, ["a"]).notify(_submission(), "https://drive.google.com/drive/folders/f1")
        assert bodies[0]["type"] == "text"
        assert "https://drive.google.com/drive/folders/f1" in bodies[0]["text"]["body"]

    @pytest.mark.asyncio
    async def test_template_payload(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={})

        notifier = self._notifier(handler, ["a"], template_name="novo_cadastro")
        await notifier.notify(_submission(cpf="52998224725"), None)

        template = bodies[0]["template"]
        assert bodies[0]["type"] == "template"
        assert template["name"] == "novo_cadastro"
        assert template["language"]["code"] == "pt_BR"
        params = [p["text"] for p in template["components"][0]["parameters"]]
        assert params == ["Maria Silva", "(31) 98888-7777", "529.982.247-25", "Aguardando documentos"]

    @pytest.mark.asyncio
    async def test_disabled(self):
        def handler(request):
            raise AssertionError("should not be called")

        notifier = self._notifier(handler, ["a"], enabled=False)
        assert await notifier.notify(_submission()) is False


class TestViaCepClient:
    """Postal-code lookup mapping."""

    @pytest.mark.asyncio
    async def test_found(self):
        def handler(request):
            assert request.url.path == "/ws/01310100/json/"
            return httpx.Response(200, json={
                "cep": "01310-100", "logradouro": "Avenida Paulista", "complemento": "até 610 - lado par",
                "bairro": "Bela Vista", "localidade": "São Paulo", "uf": "SP", "ibge": "3550308", "ddd": "11",
            })

        address = await ViaCepClient("https://viacep.test/ws", client=_client(handler)).lookup("01310-100")
        assert address["street"] == "Avenida Paulista"
        assert address["city"] == "São Paulo"
        assert address["state"] == "SP"
        assert address["ddd"] == "11"

    @pytest.mark.asyncio
    async def test_not_found(self):
        client = _client(lambda r: httpx.Response(200, json={"erro": True}))
        assert await ViaCepClient("https://viacep.test/ws", client=client).lookup("99999999") is None

    @pytest.mark.asyncio
    async def test_upstream_failure(self):
        client = _client(lambda r: httpx.Response(503))
        with pytest.raises(PostalCodeLookupError):
            await ViaCepClient("https://viacep.test/ws", client=client).lookup("01310100")
