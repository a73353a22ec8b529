import pytest
import os
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["OPENROUTER_API_KEY"] = "test-key"

from assessment_hub.database import create_db_engine, create_session_factory, init_db
from assessment_hub.dependencies import get_storage
from assessment_hub.main import app
from assessment_hub.schemas.auth import UserInsert
from assessment_hub.services import auth as auth_service
from assessment_hub.storage import MemStorage
from assessment_hub.storage.sql import SqlStorage
from fastapi.testclient import TestClient

TEST_PASSWORD = "Password123!"


def _sql_storage() -> SqlStorage:
    # SQLite in-memory database shared by every session of this engine
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    init_db(engine)
    return SqlStorage(create_session_factory(engine))


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow, hash the shared test password once."""
    return auth_service.get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def storage():
    """A fresh in-memory store for each test function."""
    return MemStorage()


@pytest.fixture(scope="function", params=["memory", "sql"])
def any_storage(request):
    """Runs the test once per storage backend."""
    if request.param == "memory":
        return MemStorage()
    return _sql_storage()


@pytest.fixture(scope="function")
def make_user(storage, password_hash):
    def _make_user(username, name=None, role="user"):
        return storage.create_user(UserInsert(
            username=username,
            password=password_hash,
            name=name,
            role=role,
        ))
    return _make_user


@pytest.fixture(scope="function")
def owner(make_user):
    return make_user("owner", name="Assessment Owner", role="manager")


@pytest.fixture(scope="function")
def other_user(make_user):
    return make_user("someone.else", name="Someone Else")


@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture to build a bearer header for a stored user."""
    def _auth_headers(user):
        token = auth_service.create_access_token(data={"sub": user.id, "username": user.username})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture(scope="function")
def client(storage):
    """Get a TestClient that uses the per-test store via dependency override."""
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_assessment(client, auth_headers):
    """Creates an assessment through the API and returns its JSON."""
    def _create(user, **overrides):
        body = {
            "name": "Q3 Review",
            "typeId": 1,
            "startDate": "2024-07-01",
            "endDate": "2024-09-30",
        }
        body.update(overrides)
        response = client.post("/api/assessments", json=body, headers=auth_headers(user))
        assert response.status_code == 201, response.text
        return response.json()
    return _create
