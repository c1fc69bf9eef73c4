import os

# Settings are read at import time; keep hashing cheap and storage local in tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BACKEND", "local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.models.base import Base
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.tenant import Tenant
from app.models.user import User
from app.models.policy import Policy
from app.models.investment import Investment
from app.models.session import UserSession
from app.models.tenant_context import TenantContext
from app.services.document_storage import LocalDocumentStorage, get_document_storage
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def document_storage(tmp_path):
    """Local document storage in a per-test temporary directory"""
    return LocalDocumentStorage(tmp_path / "uploads")


@pytest.fixture(scope="function")
def make_client(db_session, document_storage):
    """
    Factory for FastAPI test clients sharing the test database.

    Each client has its own cookie jar, i.e. its own login session.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_document_storage] = lambda: document_storage

    clients = []

    def _make():
        test_client = TestClient(app)
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(make_client):
    """FastAPI test client with test database (not logged in)"""
    return make_client()


def register(client, email: str, domain: str = "acme", password: str = DEFAULT_PASSWORD, **extra):
    """Register through the API; the client keeps the session cookie."""
    payload = {"email": email, "password": password, "domain": domain, **extra}
    return client.post("/api/auth/register", json=payload)


def context_for(db_session, email: str) -> TenantContext:
    """Build the tenant context the API would build for this user"""
    user = db_session.query(User).filter(User.email == email).one()
    return TenantContext(user=user, tenant_id=user.tenant_id, role=user.role)


@pytest.fixture
def admin_client(make_client):
    """alice@x.com, first account in tenant 'acme' (admin)"""
    c = make_client()
    response = register(c, "alice@x.com", first_name="Alice")
    assert response.status_code == 201
    return c


@pytest.fixture
def member_client(make_client, admin_client):
    """bob@x.com, second account in tenant 'acme' (user)"""
    c = make_client()
    response = register(c, "bob@x.com", first_name="Bob")
    assert response.status_code == 201
    return c


@pytest.fixture
def other_tenant_client(make_client):
    """carol@y.com, admin of a different tenant 'globex'"""
    c = make_client()
    response = register(c, "carol@y.com", domain="globex")
    assert response.status_code == 201
    return c


@pytest.fixture
def policy_payload():
    return {
        "provider": "Folksam",
        "policy_name": "Home Insurance",
        "policy_number": "FS-1001",
        "policy_type": "Property",
        "country": "Sweden",
        "start_date": "2024-01-01",
        "premium": "1200",
        "premium_currency": "SEK",
        "premium_frequency": "yearly",
    }


@pytest.fixture
def investment_payload():
    return {
        "type": "Stocks",
        "platform": "Avanza",
        "country": "SWEDEN",
        "currency": "SEK",
        "initial_amount": "10000.50",
        "current_value": "12500.25",
    }
