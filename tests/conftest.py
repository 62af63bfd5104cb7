import pytest
from fastapi.testclient import TestClient

from app.auth import create_access_token
from app.config import get_settings
from app.database import Database
from app.main import create_app
from app.services.conversation_service import ConversationService

OWNER_ID = "owner-1"


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    """Fresh settings per test with a known owner id and signing key."""
    monkeypatch.setenv("OWNER_ID", OWNER_ID)
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture()
def database():
    """In-memory SQLite store with all tables created."""
    db = Database("sqlite://")
    db.open()
    db.create_all()
    yield db
    db.close()


@pytest.fixture()
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture()
def offline_database():
    """Store that was never configured (empty DATABASE_URL)."""
    db = Database("")
    db.open()
    return db


@pytest.fixture()
def service(database):
    return ConversationService(database)


@pytest.fixture()
def client(database):
    """A test client for the FastAPI app bound to the in-memory store."""
    app = create_app(database)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers():
    """Bearer headers for a given user id (extra claims: name, email, login_method)."""
    def _headers(user_id: str, **claims) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, **claims)}"}
    return _headers
