"""
Adapter: Kommo CRM Sync — Implementação COMPLETA.

Localiza o contato pelo telefone e espelha os dados do cadastro
no contato, na empresa (CNPJ) e no lead. Best-effort: nada aqui
interrompe o fan-out.
"""

import logging
from dataclasses import dataclass

import httpx

from intake.core.entities.submission import Submission
from intake.core.errors import CrmSyncError
from intake.core.interfaces.integrations import ICrmSync
from intake.infrastructure.rules.formatters import format_phone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KommoFieldIds:
    """IDs dos campos customizados da conta Kommo."""
    contact_phone: int = 845834
    contact_email: int = 845836
    contact_cpf: int = 1064648
    contact_cnpj: int = 1068892
    company_cnpj: int = 1063367
    lead_available_limit: int = 1051320
    lead_loan_amount: int = 1064640
    lead_bank: int = 1065798
    lead_agency: int = 1065800
    lead_account: int = 1065802


def _field(field_id: int, value) -> dict:
    return {"field_id": field_id, "values": [{"value": value}]}


class KommoCrmSync(ICrmSync):
    """
    Fluxo:
        1. Busca contatos pelo telefone (tenta de novo sem o 9 após o DDD)
        2. Escolhe o primeiro contato com lead
        3. Atualiza contato → empresa (se CNPJ) → lead
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        enabled: bool = True,
        timeout_seconds: float = 10.0,
        field_ids: KommoFieldIds | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = access_token
        self._enabled = enabled
        self._timeout = timeout_seconds
        self._fields = field_ids or KommoFieldIds()
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._enabled and bool(self._token) and bool(self._base_url)

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._token}", "Content-Type": "application/json"}

    async def push(self, submission: Submission) -> None:
        if not self._enabled:
            logger.info("Kommo integration disabled, skipping CRM sync")
            return
        if not self._token or not self._base_url:
            logger.warning("Kommo token or base URL not configured, skipping CRM sync")
            return

        phone = submission.data.phone
        if not phone:
            logger.info(f"Submission {submission.id} has no phone, skipping CRM sync")
            return

        try:
            if self._client is not None:
                await self._sync(self._client, submission)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    await self._sync(client, submission)
        except Exception as e:
            logger.warning(f"CRM sync failed for submission {submission.id}: {e}")

    # ─── Fluxo ──────────────────────────────────────────────

    async def _sync(self, client: httpx.AsyncClient, submission: Submission) -> None:
        data = submission.data
        phone = data.phone

        contacts = await self._search_contacts(client, phone)
        if not contacts and len(phone) > 4 and phone[2] == "9":
            contacts = await self._search_contacts(client, phone[:2] + phone[3:])

        if not contacts:
            logger.info(f"No Kommo contact found for submission {submission.id}")
            return

        contact = next((c for c in contacts if c.get("_embedded", {}).get("leads")), None)
        if contact is None:
            logger.info(f"None of the {len(contacts)} Kommo contact(s) has a lead (submission {submission.id})")
            return

        contact_id = contact["id"]
        lead_id = contact["_embedded"]["leads"][0]["id"]

        await self._patch(client, f"/api/v4/contacts/{contact_id}", {
            "name": data.full_name,
            "custom_fields_values": [
                _field(self._fields.contact_phone, format_phone(phone)),
                _field(self._fields.contact_email, data.email or ""),
                _field(self._fields.contact_cpf, data.cpf or ""),
                _field(self._fields.contact_cnpj, data.cnpj or ""),
            ],
        })
        logger.info(f"Kommo contact {contact_id} updated (submission {submission.id})")

        companies = contact.get("_embedded", {}).get("companies") or []
        if data.cnpj and companies:
            company_id = companies[0]["id"]
            try:
                await self._patch(client, f"/api/v4/companies/{company_id}", {
                    "custom_fields_values": [_field(self._fields.company_cnpj, int(data.cnpj))],
                })
                logger.info(f"Kommo company {company_id} updated with CNPJ")
            except CrmSyncError as e:
                logger.warning(f"Kommo company {company_id} update failed: {e}")

        lead_fields = []
        if data.available_limit:
            lead_fields.append(_field(self._fields.lead_available_limit, data.available_limit))
        if data.loan_amount:
            lead_fields.append(_field(self._fields.lead_loan_amount, data.loan_amount))
        if data.bank_name:
            lead_fields.append(_field(self._fields.lead_bank, data.bank_name))
        if data.agency:
            lead_fields.append(_field(self._fields.lead_agency, data.agency))
        if data.account:
            lead_fields.append(_field(self._fields.lead_account, data.account))

        if lead_fields:
            await self._patch(client, f"/api/v4/leads/{lead_id}", {"custom_fields_values": lead_fields})
            logger.info(f"Kommo lead {lead_id} updated with {len(lead_fields)} field(s)")

    async def _search_contacts(self, client: httpx.AsyncClient, phone: str) -> list[dict]:
        response = await client.get(
            f"{self._base_url}/api/v4/contacts",
            params={"query": phone, "with": "leads,companies"},
            headers=self._headers(),
            timeout=self._timeout,
        )
        # Kommo responde 204 quando a busca não encontra nada
        if response.status_code == 204:
            return []
        if response.status_code != 200:
            raise CrmSyncError(f"contact search returned HTTP {response.status_code}")
        return response.json().get("_embedded", {}).get("contacts", [])

    async def _patch(self, client: httpx.AsyncClient, path: str, payload: dict) -> None:
        response = await client.patch(
            f"{self._base_url}{path}", json=payload, headers=self._headers(), timeout=self._timeout
        )
        if response.status_code >= 400:
            raise CrmSyncError(f"PATCH {path} returned HTTP {response.status_code}: {response.text[:200]}")
