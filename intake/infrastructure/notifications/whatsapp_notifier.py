"""
Adapter: WhatsApp Notifier — Implementação COMPLETA.

WhatsApp Cloud API (Graph). Um POST por destinatário, com
pausa curta entre envios por causa do rate limit do provedor.
"""

import asyncio
import logging

import httpx

from intake.core.entities.submission import Submission
from intake.core.errors import NotificationError
from intake.core.interfaces.integrations import INotifier
from intake.infrastructure.notifications.message_builder import build_submission_message, display_tax_id
from intake.infrastructure.rules.formatters import format_phone

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


class WhatsAppNotifier(INotifier):
    """
    Modos de envio:
        - texto livre (padrão)
        - template aprovado, quando `template_name` está configurado
    """

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        recipients: list[str],
        enabled: bool = True,
        api_version: str = "v18.0",
        template_name: str = "",
        template_language: str = "pt_BR",
        delivery_delay_seconds: float = 1.0,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._token = access_token
        self._phone_number_id = phone_number_id
        self._recipients = list(recipients)
        self._enabled = enabled
        self._api_version = api_version
        self._template_name = template_name
        self._template_language = template_language
        self._delay = delivery_delay_seconds
        self._timeout = timeout_seconds
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._enabled and bool(self._token) and bool(self._phone_number_id) and bool(self._recipients)

    @property
    def messages_url(self) -> str:
        return f"{GRAPH_BASE_URL}/{self._api_version}/{self._phone_number_id}/messages"

    def build_payload(self, recipient: str, submission: Submission, folder_url: str | None) -> dict:
        if self._template_name:
            _, tax_value = display_tax_id(submission.data)
            parameters = [
                submission.data.full_name,
                format_phone(submission.data.phone),
                tax_value,
                folder_url or "Aguardando documentos",
            ]
            return {
                "messaging_product": "whatsapp",
                "to": recipient,
                "type": "template",
                "template": {
                    "name": self._template_name,
                    "language": {"code": self._template_language},
                    "components": [{
                        "type": "body",
                        "parameters": [{"type": "text", "text": p} for p in parameters],
                    }],
                },
            }
        return {
            "messaging_product": "whatsapp",
            "to": recipient,
            "type": "text",
            "text": {"body": build_submission_message(submission, folder_url)},
        }

    async def notify(self, submission: Submission, documents_folder_url: str | None = None) -> bool:
        if not self._enabled:
            logger.info("WhatsApp notifications disabled")
            return False
        if not self._token or not self._phone_number_id:
            logger.warning("WhatsApp configuration incomplete: missing token or phone number id")
            return False
        if not self._recipients:
            logger.warning("WhatsApp configuration incomplete: no recipients")
            return False

        if self._client is not None:
            results = await self._deliver_all(self._client, submission, documents_folder_url)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                results = await self._deliver_all(client, submission, documents_folder_url)

        delivered = sum(results)
        logger.info(
            f"WhatsApp notification for submission {submission.id}: "
            f"{delivered}/{len(results)} recipient(s) reached"
        )
        return any(results)

    async def _deliver_all(
        self, client: httpx.AsyncClient, submission: Submission, folder_url: str | None
    ) -> list[bool]:
        results = []
        for index, recipient in enumerate(self._recipients):
            if index > 0 and self._delay > 0:
                await asyncio.sleep(self._delay)
            try:
                await self._send(client, self.build_payload(recipient, submission, folder_url))
                results.append(True)
            except (NotificationError, httpx.HTTPError) as e:
                logger.warning(f"WhatsApp delivery to {recipient} failed (submission {submission.id}): {e}")
                results.append(False)
        return results

    async def _send(self, client: httpx.AsyncClient, payload: dict) -> None:
        response = await client.post(
            self.messages_url,
            json=payload,
            headers={"Authorization": f"Bearer {self._token}", "Content-Type": "application/json"},
            timeout=self._timeout,
        )
        if response.status_code >= 400:
            raise NotificationError(f"HTTP {response.status_code}: {response.text[:200]}")
