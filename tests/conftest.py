# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import os
import tempfile
from typing import Generator

# Keep the app factory from creating ./uploads while tests import it
os.environ.setdefault("STORAGE_SERVE_LOCAL", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from photo_editor.core.security import create_access_token
from photo_editor.db.base import Base

# Import all models to ensure they are registered with Base
from photo_editor.models import *  # noqa: F401,F403
from photo_editor.services.credit import credit_ledger
from photo_editor.services.photo_session import photo_session_service
from tests.fakes import FakeAIService, FakePersister


def get_test_database_url(worker_id: str = "master") -> str:
    """
    Generate a unique database URL for each pytest-xdist worker.
    For single-process runs (worker_id="master"), use in-memory database.
    """
    if worker_id == "master":
        return "sqlite:///file:photo_editor_testdb?mode=memory&cache=shared&uri=true"
    tmp_dir = tempfile.gettempdir()
    db_path = os.path.join(tmp_dir, f"test_photo_editor_{worker_id}.db")
    return f"sqlite:///{db_path}"


@pytest.fixture(scope="session")
def worker_id(request):
    """
    Get the pytest-xdist worker id.
    Returns 'master' for single-process runs.
    """
    if hasattr(request.config, "workerinput"):
        return request.config.workerinput["workerid"]
    return "master"


# Session-scoped engine and tables - created once per test session (per worker)
@pytest.fixture(scope="session")
def test_engine(worker_id):
    db_url = get_test_database_url(worker_id)
    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if worker_id != "master":
        db_path = os.path.join(
            tempfile.gettempdir(), f"test_photo_editor_{worker_id}.db"
        )
        if os.path.exists(db_path):
            os.remove(db_path)


@pytest.fixture(scope="session")
def test_session_factory(test_engine):
    return sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
    )


@pytest.fixture(scope="function")
def test_db(test_engine, test_session_factory) -> Generator[Session, None, None]:
    """
    Create a test database session with transaction rollback.
    Each test function gets a clean database state via transaction rollback.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    db = test_session_factory(bind=connection)

    nested = connection.begin_nested()

    # If the application code calls session.commit(), restart the nested transaction
    @event.listens_for(db, "after_transaction_end")
    def restart_savepoint(session, trans):
        nonlocal nested
        if trans.nested and not trans._parent.nested:
            nested = connection.begin_nested()

    try:
        yield db
    finally:
        db.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def test_user_id() -> str:
    return "user-1"


@pytest.fixture
def other_user_id() -> str:
    return "user-2"


@pytest.fixture
def test_token(test_user_id: str) -> str:
    """
    Create a valid JWT token for the test user.
    """
    return create_access_token(data={"sub": test_user_id})


@pytest.fixture
def other_token(other_user_id: str) -> str:
    return create_access_token(data={"sub": other_user_id})


@pytest.fixture
def auth_headers(test_token: str) -> dict:
    return {"Authorization": f"Bearer {test_token}"}


@pytest.fixture
def funded_user(test_db: Session, test_user_id: str) -> str:
    """Test user with 100 credits"""
    credit_ledger.grant(test_db, test_user_id, 100, "test grant")
    return test_user_id


@pytest.fixture
def photo_session(test_db: Session, test_user_id: str):
    session, _ = photo_session_service.create_or_reuse(test_db, user_id=test_user_id)
    return session


@pytest.fixture
def fake_ai_service(mocker) -> FakeAIService:
    service = FakeAIService()
    mocker.patch(
        "photo_editor.services.generation.get_ai_service_for_model",
        return_value=service,
    )
    mocker.patch(
        "photo_editor.services.reconciler.get_ai_service_for_model",
        return_value=service,
    )
    return service


@pytest.fixture
def fake_persister(mocker) -> FakePersister:
    from photo_editor.services.reconciler import outcome_reconciler

    persister = FakePersister()
    mocker.patch.object(outcome_reconciler, "persister", persister)
    return persister


@pytest.fixture(scope="function")
def test_client(test_db: Session) -> TestClient:
    """
    Create a test client with database dependency override.
    """
    from photo_editor.api.dependencies import get_db
    from photo_editor.main import create_app

    app = create_app()

    # Override database dependency to always return the same test_db session
    def override_get_db():
        try:
            yield test_db
        except Exception:
            test_db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    return TestClient(app)
