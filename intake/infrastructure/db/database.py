"""
Database connection management.

Supports:
  - SQLite (local dev, no setup)
  - PostgreSQL (produção)

Connection string comes from DATABASE_URL env var (via Settings).
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session

from intake.config.settings import get_settings
from intake.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL from settings."""
    return get_settings().database_url


def create_db_engine(url: str = None):
    """Create SQLAlchemy engine."""
    db_url = url or get_database_url()

    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )

        # SQLite só respeita ON DELETE CASCADE com foreign_keys ligado
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        settings = get_settings()
        engine = create_engine(
            db_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
            echo=False,
        )

    return engine


# ── Global engine & session factory ──
_engine = None
_SessionFactory = None


def get_engine():
    """Get or create the global engine."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory():
    """Get or create the session factory."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _SessionFactory


def init_db(engine=None, enforce_unique_tax_id: bool | None = None):
    """Create all tables. Safe to call multiple times."""
    engine = engine or get_engine()
    if enforce_unique_tax_id is None:
        enforce_unique_tax_id = get_settings().enforce_unique_tax_id

    Base.metadata.create_all(engine)

    # Gerações antigas do cadastro exigiam CPF único; NULLs nunca conflitam
    if enforce_unique_tax_id:
        with engine.begin() as conn:
            conn.execute(text(
                "CREATE UNIQUE INDEX IF NOT EXISTS uq_submissions_cpf ON submissions (cpf)"
            ))
        logger.info("Unique index on submissions.cpf enabled")

    db_url = str(engine.url)
    logger.info(f"Database initialized: {db_url.split('@')[-1] if '@' in db_url else db_url}")


@contextmanager
def get_db(session_factory=None) -> Session:
    """Context manager for database sessions."""
    factory = session_factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
