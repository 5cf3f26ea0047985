"""
FastAPI Application — Cadastro Intake.

Architecture:
  - PostgreSQL (prod) / SQLite (dev) for submissions
  - S3 or Google Drive for documents (one per deployment)
  - Kommo CRM + WhatsApp Cloud API after commit (background)
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intake.api.dependencies import AppContainer, get_container
from intake.api.routes.cep import router as cep_router
from intake.api.routes.users import router as users_router
from intake.api.schemas.responses import ErrorResponse, FieldErrorResponse, HealthResponse
from intake.config.settings import get_settings
from intake.core.errors import DuplicateSubmissionError, SubmissionValidationError
from intake.infrastructure.db.database import init_db

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

settings = get_settings()

app = FastAPI(
    title="Cadastro Intake",
    description="Form intake with document storage, CRM sync and WhatsApp notification.",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Startup ──
@app.on_event("startup")
async def startup():
    """Configure logging, create tables and pick the storage provider."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    init_db()
    get_container()
    logger.info("Cadastro Intake started")


app.include_router(users_router, prefix="/api", tags=["Submissions"])
app.include_router(cep_router, prefix="/api", tags=["Postal code"])


# ── Error handlers ──
@app.exception_handler(SubmissionValidationError)
async def validation_error_handler(request: Request, exc: SubmissionValidationError):
    body = ErrorResponse(
        message="Dados inválidos",
        errors=[FieldErrorResponse(field=e.field, message=e.message) for e in exc.errors],
    )
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


@app.exception_handler(DuplicateSubmissionError)
async def duplicate_error_handler(request: Request, exc: DuplicateSubmissionError):
    body = ErrorResponse(message=str(exc) or "Cadastro já existe")
    return JSONResponse(status_code=409, content=body.model_dump(by_alias=True))


# ── Health ──
@app.get("/health", response_model=HealthResponse)
async def health(container: AppContainer = Depends(get_container)):
    db_url = container.settings.database_url
    db_type = "PostgreSQL" if "postgres" in db_url else "SQLite"
    return HealthResponse(
        status="ok",
        version=APP_VERSION,
        database=db_type,
        storage_provider=container.storage.name,
        crm_enabled=getattr(container.crm, "enabled", False),
        whatsapp_enabled=getattr(container.notifier, "enabled", False),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("intake.api.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
