"""
Pytest Configuration File
-------------------------
Defines global test fixtures for the Underwriting Ledger.

- Every test gets a fresh in-memory SQLite ledger (tables + counters row)
- Clock and transfer gateway are deterministic in-process fakes
- API tests override FastAPI dependencies instead of touching globals
"""

import os

# Must be set before the package reads its configuration.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("OWNER_IDENTITY", "ledger-owner")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-ledger-tests-0123456789")

import pytest
from sqlalchemy.orm import sessionmaker

from underwriting.config import config
from underwriting.ledger.clock import ManualClock
from underwriting.ledger.store import LedgerStore
from underwriting.ledger.transfer import InMemoryTransferGateway
from underwriting.models.profile import UserProfile
from underwriting.services.ledger_service import LedgerService
from underwriting.utils.db import UserProfileRecord, create_ledger_engine, init_db

START_BLOCK = 1_000
DIGEST = "0x" + "ab" * 32
OWNER = config.OWNER_IDENTITY


# =========================================================
# 🗄️ Ledger Fixtures
# =========================================================
@pytest.fixture(scope="function")
def engine():
    engine = create_ledger_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session(engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def store(session):
    return LedgerStore(session)


@pytest.fixture
def clock():
    return ManualClock(START_BLOCK)


@pytest.fixture
def transfers():
    return InMemoryTransferGateway({"alice": 10_000_000, "bob": 10_000_000})


@pytest.fixture
def service(store, clock, transfers):
    return LedgerService(store, clock, transfers, owner=OWNER)


@pytest.fixture
def seed_profile(session):
    """Write a profile row directly, bypassing the workflows (history is never written by them)."""
    def _seed(identity: str, **fields) -> UserProfile:
        profile = UserProfile(identity=identity, **fields)
        session.merge(UserProfileRecord(**profile.model_dump()))
        session.commit()
        return profile
    return _seed


# =========================================================
# 🌐 FastAPI Test Client (for API tests)
# =========================================================
@pytest.fixture(scope="function")
def client(session, clock, transfers):
    """TestClient wired to the per-test ledger, clock and gateway."""
    from fastapi.testclient import TestClient
    from underwriting.api.dependencies import get_clock, get_db_session, get_transfer_gateway
    from underwriting.main import app

    def _session():
        yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_transfer_gateway] = lambda: transfers
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    from underwriting.utils.security import create_jwt_token

    def _headers(identity: str) -> dict:
        return {"Authorization": f"Bearer {create_jwt_token({'sub': identity})}"}
    return _headers
