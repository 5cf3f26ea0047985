"""
Shared fixtures for the intake test suite.

The database is a real SQLite file per test; providers are faked
(see tests/fakes.py).
"""

import pytest
from sqlalchemy.orm import sessionmaker

from intake.config.settings import Settings
from intake.infrastructure.db.database import create_db_engine, init_db
from intake.infrastructure.db.repository import SubmissionRepository


MARIA_FORM = {
    "fullName": "Maria Silva",
    "phone": "31988887777",
    "bankName": "Banco X",
    "accountType": "corrente",
    "agency": "1234",
    "account": "56789-0",
}


# ─── Fixtures ───────────────────────────────────────────────

@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        storage_provider="s3",
        kommo_enabled=False,
        whatsapp_enabled=False,
        whatsapp_delivery_delay_seconds=0,
    )


@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'intake_test.db'}")
    init_db(engine, enforce_unique_tax_id=False)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def unique_session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'intake_unique.db'}")
    init_db(engine, enforce_unique_tax_id=True)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def repository(session_factory):
    return SubmissionRepository(session_factory)


@pytest.fixture
def maria_form():
    return dict(MARIA_FORM)
