"""Shared test fixtures.

  use_test_engine  — redirects UoW + infra layer to a temp-file SQLite DB and
                     DATA_DIR to the test's tmp_path.
  make_user        — factory inserting a user row directly.
  client           — FastAPI TestClient wired to the test engine with a fast,
                     always-successful mock ingestion.
"""
import uuid
import pytest
from sqlmodel import SQLModel, Session, create_engine


@pytest.fixture
def use_test_engine(tmp_path, monkeypatch):
    """Monkeypatch infra/db engine references to an isolated temp-file SQLite DB.

    Uses a file (not :memory:) so completion callbacks running on the event
    loop thread see the same database as request threads.
    """
    db_path = tmp_path / "test_docqa.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False},
    )

    import docqa.models  # noqa: F401 — register all ORM mappers
    SQLModel.metadata.create_all(test_engine)

    monkeypatch.setattr("docqa.infra.db.engine.engine", test_engine)
    monkeypatch.setattr("docqa.infra.db.uow.engine", test_engine)
    monkeypatch.setattr("docqa.config.settings.DATA_DIR", tmp_path / "data")

    yield test_engine

    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def make_user(use_test_engine):
    """Insert a user and return its id."""
    from docqa.domain.statuses import UserRole
    from docqa.models.core import User

    def _make(role=UserRole.ADMIN, email=None, is_active=True):
        user = User(
            email=email or f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@example.com",
            name=f"{role.value.title()} User",
            role=role,
            is_active=is_active,
        )
        with Session(use_test_engine) as s:
            s.add(user)
            s.commit()
            return user.id

    return _make


@pytest.fixture
def client(use_test_engine, monkeypatch):
    """FastAPI TestClient backed by the isolated test engine."""
    from fastapi.testclient import TestClient
    from docqa.api.app import create_app

    monkeypatch.setattr("docqa.config.settings.INGESTION_TIMEOUT_MS", 200)
    monkeypatch.setattr("docqa.config.settings.MOCK_INGEST_SUCCESS_RATE", 1.0)
    monkeypatch.setattr("docqa.config.settings.USE_MOCK_INGEST", None)
    monkeypatch.setattr("docqa.config.settings.INGEST_SERVICE_URL", None)

    app = create_app()
    with TestClient(app) as c:
        yield c
