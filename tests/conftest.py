"""Pytest configuration and fixtures."""

import os

os.environ["SHARED_PASSWORD"] = "open-sesame"
os.environ["ALLOWED_EMAIL_1"] = "me@example.com"
os.environ["ALLOWED_EMAIL_2"] = "her@example.com"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import duet.models  # noqa: E402,F401
from duet.config import get_settings  # noqa: E402
from duet.database import Base, get_db  # noqa: E402
from duet.services.auth import AuthService  # noqa: E402
from duet.services.jwt import get_jwt_service  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="storage_dir", autouse=True)
def storage_dir_fixture(tmp_path, monkeypatch):
    """Point object storage at a per-test directory."""
    path = tmp_path / "storage"
    monkeypatch.setattr(get_settings(), "STORAGE_DIR", str(path))
    return path


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from duet.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def _make_user(db_session: Session, email: str) -> dict:
    result = AuthService().sign_up(db_session, email, "password123")
    token = get_jwt_service().create_token(user_id=result.user_id, email=result.email)
    return {
        "user_id": result.user_id,
        "email": result.email,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="me")
def me_fixture(db_session: Session):
    """First allow-listed user, with a session token."""
    return _make_user(db_session, "me@example.com")


@pytest.fixture(name="partner")
def partner_fixture(db_session: Session):
    """Second allow-listed user, with a session token."""
    return _make_user(db_session, "her@example.com")


@pytest.fixture(name="unlocked_client")
def unlocked_client_fixture(client: TestClient):
    """Test client whose browser session has already passed the shared passphrase."""
    client.cookies.set("duet_gate", get_jwt_service().create_gate_token())
    return client
