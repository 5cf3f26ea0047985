"""
Composição da aplicação — adapters concretos ligados aos use cases.

Construído uma vez (lazy) e injetado nas rotas via Depends.
"""

import logging
from dataclasses import dataclass

from intake.config.settings import Settings, get_settings
from intake.core.interfaces.form_validator import IFormValidator
from intake.core.interfaces.integrations import ICrmSync, INotifier
from intake.core.interfaces.storage_service import IDocumentStorage
from intake.core.interfaces.submission_store import ISubmissionStore
from intake.core.use_cases.create_submission import CreateSubmissionUseCase
from intake.core.use_cases.fan_out import FanOutOrchestrator
from intake.core.use_cases.upload_document import UploadDocumentUseCase
from intake.infrastructure.cep.viacep_client import ViaCepClient
from intake.infrastructure.crm.kommo_crm import KommoCrmSync
from intake.infrastructure.db.repository import SubmissionRepository
from intake.infrastructure.notifications.whatsapp_notifier import WhatsAppNotifier
from intake.infrastructure.rules.brazilian_form_rules import BrazilianFormValidator
from intake.infrastructure.storage.factory import build_storage_provider

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    validator: IFormValidator
    store: ISubmissionStore
    storage: IDocumentStorage
    crm: ICrmSync
    notifier: INotifier
    cep_client: ViaCepClient
    create_submission: CreateSubmissionUseCase
    orchestrator: FanOutOrchestrator


def build_container(
    settings: Settings,
    store: ISubmissionStore | None = None,
    storage: IDocumentStorage | None = None,
    crm: ICrmSync | None = None,
    notifier: INotifier | None = None,
    cep_client: ViaCepClient | None = None,
) -> AppContainer:
    """Factory — qualquer peça pode ser trocada (testes passam fakes)."""
    validator = BrazilianFormValidator()
    store = store or SubmissionRepository()
    storage = storage or build_storage_provider(settings)
    crm = crm or KommoCrmSync(
        base_url=settings.kommo_base_url,
        access_token=settings.kommo_access_token,
        enabled=settings.kommo_enabled,
        timeout_seconds=settings.http_timeout_seconds,
    )
    notifier = notifier or WhatsAppNotifier(
        access_token=settings.whatsapp_access_token,
        phone_number_id=settings.whatsapp_phone_number_id,
        recipients=settings.whatsapp_recipient_list,
        enabled=settings.whatsapp_enabled,
        api_version=settings.whatsapp_api_version,
        template_name=settings.whatsapp_template_name,
        template_language=settings.whatsapp_template_language,
        delivery_delay_seconds=settings.whatsapp_delivery_delay_seconds,
        timeout_seconds=settings.http_timeout_seconds,
    )
    cep_client = cep_client or ViaCepClient(
        base_url=settings.viacep_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )

    return AppContainer(
        settings=settings,
        validator=validator,
        store=store,
        storage=storage,
        crm=crm,
        notifier=notifier,
        cep_client=cep_client,
        create_submission=CreateSubmissionUseCase(validator, store),
        orchestrator=FanOutOrchestrator(
            storage=storage,
            uploader=UploadDocumentUseCase(storage, store),
            crm=crm,
            notifier=notifier,
        ),
    )


# Lazy singleton
_container: AppContainer | None = None


def get_container() -> AppContainer:
    global _container
    if _container is None:
        _container = build_container(get_settings())
        logger.info(f"Application container ready (storage={_container.storage.name})")
    return _container
