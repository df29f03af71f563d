"""
Fixtures comuns para todos os testes do backend.
"""
import os

# Must be set before epoxymix.records.models builds its engine
os.environ["EPOXYMIX_DATABASE_URL"] = "sqlite://"
os.environ["EPOXYMIX_EDIT_PASSCODE"] = "4155"
os.environ["EPOXYMIX_TIMEZONE"] = "UTC"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from epoxymix.api import app
from epoxymix.quality.mix_record import CheckKind, MixRecord
from epoxymix.records.access_gate import reset_access_gate
from epoxymix.records.models import EpoxyMixModel, SessionLocal
from epoxymix.settings import AppSettings


@pytest.fixture(autouse=True)
def clean_db():
    """Empty the mix table around every test."""
    db = SessionLocal()
    try:
        db.query(EpoxyMixModel).delete()
        db.commit()
        yield
        db.query(EpoxyMixModel).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture(autouse=True)
def fresh_settings():
    AppSettings.reset()
    reset_access_gate()
    yield
    AppSettings.reset()
    reset_access_gate()


@pytest.fixture
def test_client():
    """Cliente de teste FastAPI."""
    return TestClient(app)


@pytest.fixture
def edit_headers():
    return {"X-Edit-Passcode": "4155"}


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_record():
    """Factory for MixRecord instances."""
    counter = {"n": 0}

    def _make(
        timestamp=None,
        check_kind=None,
        ratio=None,
        employee_id=42,
        **kwargs,
    ) -> MixRecord:
        counter["n"] += 1
        return MixRecord(
            record_id=kwargs.pop("record_id", f"rec-{counter['n']}"),
            timestamp=timestamp,
            employee_id=employee_id,
            ratio=ratio,
            check_kind=check_kind,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_records(make_record):
    """Registos de exemplo cobrindo todos os tipos de check."""
    base = datetime(2026, 10, 16, 8, 0)
    return [
        make_record(timestamp=base, check_kind=CheckKind.STARTUP, ratio="12.100",
                    part_a_gross="24.2", part_b_gross="2.0"),
        make_record(timestamp=base + timedelta(hours=4), check_kind=CheckKind.DAILY, ratio="12.400",
                    part_a_gross="24.8", part_b_gross="2.0"),
        make_record(timestamp=base + timedelta(days=1), check_kind=CheckKind.RATIO_ONLY, ratio="11.950"),
        make_record(timestamp=base + timedelta(days=2, hours=9), check_kind=CheckKind.SHUTDOWN),
        make_record(timestamp=None, check_kind=CheckKind.DAILY, ratio="12.000"),
        make_record(timestamp="not-a-date", check_kind=CheckKind.STARTUP, ratio="12.000"),
    ]


@pytest.fixture
def utc_now():
    return datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
