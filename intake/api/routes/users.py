"""
Routes: /api/users — cadastro, listagem e detalhe.
"""

import asyncio
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from intake.api.dependencies import AppContainer, get_container
from intake.api.schemas.responses import (
    CreatedSubmission,
    CreateSubmissionResponse,
    DocumentResponse,
    SubmissionDetail,
    SubmissionDetailResponse,
    SubmissionListResponse,
    SubmissionResponse,
)
from intake.core.entities.submission import FORM_FILE_FIELDS, UploadedFile
from intake.core.errors import FieldError, IntakeError, SubmissionValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "application/pdf",
}


async def _read_form(request: Request) -> tuple[dict, list[tuple[str, UploadFile]]]:
    """Separa campos de texto e arquivos. Aceita multipart ou JSON."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            raise SubmissionValidationError([FieldError("body", "JSON inválido")]) from e
        return (body if isinstance(body, dict) else {}), []

    form = await request.form()
    fields, uploads = {}, []
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            uploads.append((key, value))
        else:
            fields[key] = value
    return fields, uploads


async def _read_files(
    uploads: list[tuple[str, UploadFile]], max_bytes: int
) -> tuple[list[UploadedFile], list[FieldError]]:
    """Lê os arquivos para memória ainda dentro do request (o fan-out roda depois)."""
    files, errors = [], []
    seen = set()
    max_mb = max_bytes // (1024 * 1024)
    for field_name, upload in uploads:
        document_type = FORM_FILE_FIELDS.get(field_name)
        if document_type is None:
            logger.debug(f"Ignoring unexpected file field '{field_name}'")
            continue
        # Um arquivo por tipo: vale a primeira parte
        if field_name in seen:
            logger.debug(f"Ignoring repeated file field '{field_name}'")
            continue
        seen.add(field_name)

        data = await upload.read()
        # Campo de arquivo enviado vazio = sem arquivo
        if not data and not upload.filename:
            continue

        content_type = (upload.content_type or "").lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            errors.append(FieldError(
                field_name, "Tipo de arquivo não permitido. Use JPEG, PNG, WEBP ou PDF"
            ))
            continue
        if len(data) > max_bytes:
            errors.append(FieldError(field_name, f"Arquivo excede o limite de {max_mb}MB"))
            continue
        if not data:
            errors.append(FieldError(field_name, "Arquivo vazio"))
            continue

        files.append(UploadedFile(
            document_type=document_type,
            file_name=upload.filename or f"{document_type.value}.bin",
            content_type=content_type,
            data=data,
        ))
    return files, errors


@router.post("/users", status_code=201, response_model=CreateSubmissionResponse)
async def create_user(
    request: Request,
    background_tasks: BackgroundTasks,
    container: AppContainer = Depends(get_container),
):
    """
    Recebe o formulário de cadastro.

    Valida e insere de forma síncrona; CRM, uploads e notificação
    rodam depois que a resposta é enviada.
    """
    try:
        fields, uploads = await _read_form(request)
        files, file_errors = await _read_files(uploads, container.settings.max_upload_bytes)
        submission = await container.create_submission.execute(fields, file_errors)
    except IntakeError:
        # Validação (400) e duplicado (409) têm handlers próprios
        raise
    except Exception:
        logger.exception("Unexpected failure while creating submission")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Erro interno do servidor"},
        )

    background_tasks.add_task(container.orchestrator.run, submission, files)
    logger.info(f"Submission {submission.id} created, fan-out scheduled with {len(files)} file(s)")

    return CreateSubmissionResponse(
        data=CreatedSubmission(
            id=submission.id,
            full_name=submission.data.full_name,
            email=submission.data.email,
            created_at=submission.created_at,
        )
    )


@router.get("/users", response_model=SubmissionListResponse)
async def list_users(container: AppContainer = Depends(get_container)):
    """Todos os cadastros, mais recentes primeiro."""
    submissions = await asyncio.to_thread(container.store.list_all)
    return SubmissionListResponse(
        data=[SubmissionResponse.from_entity(s) for s in submissions],
        total=len(submissions),
    )


@router.get("/users/{submission_id}", response_model=SubmissionDetailResponse)
async def get_user(submission_id: int, container: AppContainer = Depends(get_container)):
    """Um cadastro com os documentos já registrados."""
    submission = await asyncio.to_thread(container.store.get, submission_id)
    if submission is None:
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": "Cadastro não encontrado"},
        )

    documents = await asyncio.to_thread(container.store.list_documents, submission_id)
    detail = SubmissionDetail.from_entity(submission)
    detail.documents = [DocumentResponse.from_entity(d) for d in documents]
    return SubmissionDetailResponse(data=detail)
