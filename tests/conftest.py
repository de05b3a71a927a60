# tests/conftest.py
import pytest
import logging
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.api.deps import get_db
from app.core.config import settings
from app.core.security import create_access_token
from app.crud import crud_user
from app.models.user import AdminUserCreate

SQLALCHEMY_DATABASE_URL_TEST = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL_TEST,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"

@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create tables once for the entire test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

def override_get_db():
    """Dependency override for test database sessions."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def db_session():
    """
    Provides a database session for one test. Routes commit through their
    own sessions, so every table is emptied afterwards instead of rolled back.
    """
    session = TestingSessionLocal()
    yield session
    session.close()
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())

@pytest.fixture(scope="function")
def client() -> TestClient:
    """Provides a TestClient that does not follow redirects and starts without cookies."""
    return TestClient(app, follow_redirects=False)

@pytest.fixture
def admin_user(db_session):
    return crud_user.create_admin_user(
        db_session, AdminUserCreate(email=ADMIN_EMAIL, full_name="Event Admin", password=ADMIN_PASSWORD)
    )

@pytest.fixture
def admin_token(admin_user) -> str:
    return create_access_token(data={"sub": str(admin_user.id)})

@pytest.fixture
def admin_client(client: TestClient, admin_token: str) -> TestClient:
    """A client carrying the admin session cookie."""
    client.cookies.set(settings.ACCESS_TOKEN_COOKIE_NAME, admin_token)
    return client

@pytest.fixture(autouse=True)
def reset_in_memory_state():
    """Clears in-memory state before each test."""
    from app.services.event_view import event_view_store

    event_view_store.clear()
    yield
    event_view_store.clear()

def pytest_configure(config):
    """
    Hook to configure logging levels before tests are run.
    This silences noisy third-party libraries.
    """
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

@pytest.fixture
def admin_password() -> str:
    return ADMIN_PASSWORD
