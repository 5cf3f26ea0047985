"""
Use Case: Fan-Out pós-cadastro — Implementação COMPLETA.

Orquestra, depois do commit: CRM → Documentos (concorrentes) →
Pasta (sob demanda) → Notificação. Mede latência de cada etapa.
Roda desacoplado do request; nenhuma falha aqui chega ao cliente.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum

from intake.core.entities.folder_slot import FolderSlot
from intake.core.entities.submission import Submission, SubmissionContext, SubmissionDocument, UploadedFile
from intake.core.interfaces.integrations import ICrmSync, INotifier
from intake.core.interfaces.storage_service import IDocumentStorage
from intake.core.use_cases.upload_document import UploadDocumentUseCase

logger = logging.getLogger(__name__)


class FanOutStage(str, Enum):
    COMMITTED = "committed"
    CRM_UPDATED = "crm_updated"
    DOCUMENTS_UPLOADED = "documents_uploaded"
    FOLDER_ENSURED = "folder_ensured"
    NOTIFIED = "notified"


@dataclass
class FanOutReport:
    """O que aconteceu no fan-out de um cadastro. Só informativo."""
    submission_id: int
    stage: FanOutStage = FanOutStage.COMMITTED
    documents: list[SubmissionDocument] = field(default_factory=list)
    failed_documents: int = 0
    folder_url: str | None = None
    notified: bool = False
    stage_latencies: dict[str, float] = field(default_factory=dict)
    total_latency_ms: float = 0.0
    error: str | None = None


class FanOutOrchestrator:
    """
    Use Case: cadastro commitado → efeitos colaterais independentes.

    Dependency Injection: provider de storage, uploader, CRM e notificador
    vêm pelo construtor; o provider já foi escolhido na inicialização.
    """

    def __init__(
        self,
        storage: IDocumentStorage,
        uploader: UploadDocumentUseCase,
        crm: ICrmSync,
        notifier: INotifier,
    ):
        self._storage = storage
        self._uploader = uploader
        self._crm = crm
        self._notifier = notifier

    async def run(self, submission: Submission, files: list[UploadedFile]) -> FanOutReport:
        """
        Executa o fan-out completo. Nunca lança exceção.

        1. CRM — best-effort
        2. Documentos — todos ao mesmo tempo, pasta compartilhada
        3. Pasta sob demanda — só drive, só se nenhum upload trouxe pasta
        4. Notificação — com o link da pasta, se houver
        """
        report = FanOutReport(submission_id=submission.id)
        t_start = time.perf_counter()

        try:
            context = SubmissionContext.from_submission(submission)
            slot = FolderSlot()

            # ── 1. CRM ─────────────────────────────────────
            t0 = time.perf_counter()
            try:
                await self._crm.push(submission)
            except Exception as e:
                logger.warning(f"CRM sync raised for submission {submission.id}: {e}")
            report.stage_latencies["crm_ms"] = round((time.perf_counter() - t0) * 1000, 2)
            report.stage = FanOutStage.CRM_UPDATED

            # ── 2. Documentos ──────────────────────────────
            t0 = time.perf_counter()
            results = await asyncio.gather(
                *(self._uploader.execute(f, context, slot) for f in files),
                return_exceptions=True,
            )
            folder_url = None
            for f, outcome in zip(files, results):
                if isinstance(outcome, BaseException):
                    logger.warning(
                        f"Upload task for {f.document_type.value} crashed (submission {submission.id}): {outcome}"
                    )
                    report.failed_documents += 1
                elif outcome is None:
                    report.failed_documents += 1
                else:
                    report.documents.append(outcome.document)
                    if folder_url is None and outcome.reference.folder_url:
                        folder_url = outcome.reference.folder_url
            if folder_url is None and slot.is_set:
                folder_url = slot.folder_url
            report.stage_latencies["documents_ms"] = round((time.perf_counter() - t0) * 1000, 2)
            report.stage = FanOutStage.DOCUMENTS_UPLOADED

            # ── 3. Pasta sob demanda ───────────────────────
            if folder_url is None and self._storage.supports_folders:
                t0 = time.perf_counter()
                try:
                    folder_url = await self._storage.ensure_folder(context, slot)
                except Exception as e:
                    logger.warning(f"On-demand folder failed for submission {submission.id}: {e}")
                report.stage_latencies["folder_ms"] = round((time.perf_counter() - t0) * 1000, 2)
                report.stage = FanOutStage.FOLDER_ENSURED
            report.folder_url = folder_url

            # ── 4. Notificação ─────────────────────────────
            t0 = time.perf_counter()
            try:
                report.notified = await self._notifier.notify(submission, folder_url)
            except Exception as e:
                logger.warning(f"Notification raised for submission {submission.id}: {e}")
            report.stage_latencies["notify_ms"] = round((time.perf_counter() - t0) * 1000, 2)
            report.stage = FanOutStage.NOTIFIED

        except Exception as e:
            logger.exception(f"Fan-out aborted for submission {submission.id} at stage {report.stage.value}")
            report.error = str(e)

        report.total_latency_ms = round((time.perf_counter() - t_start) * 1000, 2)
        logger.info(
            f"Fan-out done for submission {submission.id}: "
            f"{len(report.documents)} document(s), {report.failed_documents} failed, "
            f"folder={'yes' if report.folder_url else 'no'}, notified={report.notified}, "
            f"{report.total_latency_ms}ms"
        )
        return report
