import os
import tempfile

import pytest

from .helpers import TEST_SECRET

_tmpdir = tempfile.mkdtemp(prefix="auth_platform_tests_")
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["AUTH_DATABASE_URL"] = f"sqlite:///{_tmpdir}/auth.db"
os.environ["CHAT_DATABASE_URL"] = f"sqlite:///{_tmpdir}/chat.db"

from fastapi.testclient import TestClient  # noqa: E402

from auth_platform.auth_service import db as auth_db  # noqa: E402
from auth_platform.auth_service.main import app as auth_app  # noqa: E402
from auth_platform.chat_service import db as chat_db  # noqa: E402
from auth_platform.chat_service.main import app as chat_app  # noqa: E402


@pytest.fixture(scope="session")
def auth_client():
    with TestClient(auth_app) as c:
        yield c


@pytest.fixture(scope="session")
def chat_client():
    with TestClient(chat_app) as c:
        yield c


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    auth_db.Base.metadata.drop_all(bind=auth_db.engine)
    auth_db.init_db()
    chat_db.Base.metadata.drop_all(bind=chat_db.engine)
    chat_db.init_db()


@pytest.fixture
def auth_session():
    session = auth_db.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def chat_session():
    session = chat_db.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def registered_user(auth_client):
    """Register a user through the API and return its credentials and id."""
    data = {"username": "alice", "login": "alice1", "password": "secret1"}
    response = auth_client.post("/auth/register", json=data)
    assert response.status_code == 201
    return {**data, "user_id": response.json()["user_id"]}


@pytest.fixture
def user_token(auth_client, registered_user):
    response = auth_client.post(
        "/auth/login",
        json={"login": registered_user["login"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return response.json()["token"]
