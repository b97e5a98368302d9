"""Shared fixtures: an in-memory database, a seeded catalog and an API client."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Keep the app module from creating ./skillcheck.db when it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy.pool import StaticPool

from skillcheck import models  # noqa: F401
from skillcheck.config import settings
from skillcheck.database import Base, build_engine, get_db, make_session_factory
from skillcheck.services import account_service, store
from skillcheck.services.seed import seed_catalog


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    session = make_session_factory(engine)()
    with store.unit_of_work(session):
        seed_catalog(session)
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "email": f"student{counter['n']}@example.com",
            "password": "secret123",
            "name": f"Student {counter['n']}",
            "career": "Software Development Engineering",
            "semester": "3",
        }
        data.update(overrides)
        return account_service.register(db, data)

    return _make


@pytest.fixture
def client(engine, db):
    from fastapi.testclient import TestClient

    from skillcheck.main import app
    from skillcheck.middleware.rate_limit import limiter

    TestingSession = make_session_factory(engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    yield TestClient(app)
    limiter.enabled = True
    app.dependency_overrides.clear()
