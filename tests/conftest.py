"""Shared test fixtures."""

import uuid
from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtrack.applications.models import ApplicationStatus, JobApplication
from jobtrack.auth.models import User
from jobtrack.cover_letters.models import CoverLetter
from jobtrack.database.base import Base
from jobtrack.integrations.cache import NullCacheService
from jobtrack.profile.models import UserProfile
from jobtrack.resumes.models import Resume

# Models must be imported so Base.metadata.create_all() sees all tables.
_ALL_MODELS = [User, UserProfile, JobApplication, Resume, CoverLetter]


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing.

    Note: SQLite drops timezone info and has no native UUID or enum types,
    but works for service logic testing.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


def _make_user(db_session, email: str) -> User:
    user = User(id=uuid.uuid4(), email=email, password_hash="$2b$12$fakehash")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def test_user(db_session):
    """Create a test user."""
    return _make_user(db_session, "test@example.com")


@pytest.fixture
def other_user(db_session):
    """A second user, for ownership checks."""
    return _make_user(db_session, "other@example.com")


@pytest.fixture
def test_application(db_session, test_user):
    application = JobApplication(
        user_id=test_user.id,
        company="Acme",
        position="Engineer",
        job_description="We need a Python engineer with FastAPI and PostgreSQL experience.",
        status=ApplicationStatus.APPLIED,
    )
    db_session.add(application)
    db_session.commit()
    return application


@pytest.fixture
def null_cache():
    """No-op cache for testing."""
    return NullCacheService()


@asynccontextmanager
async def _test_lifespan(app):
    app.state.cache = NullCacheService()
    yield


def _build_client(db_session, user: User | None):
    from jobtrack.database.base import get_db
    from jobtrack.dependencies import get_current_user
    from jobtrack.main import create_app
    from jobtrack.rate_limit import limiter

    def _test_db():
        yield db_session

    limiter.reset()
    with patch("jobtrack.main.lifespan", _test_lifespan), patch("jobtrack.main.settings") as mock_settings:
        mock_settings.trusted_hosts_list = ["*"]
        mock_settings.cors_origins_list = ["*"]
        mock_settings.cors_allow_credentials = True
        mock_settings.secret_key = "test-secret"
        mock_settings.session_max_age = 3600
        app = create_app()
    app.dependency_overrides[get_db] = _test_db
    if user is not None:
        app.dependency_overrides[get_current_user] = lambda: user
    return app


@pytest.fixture
def app_client(db_session):
    """TestClient with the test database but no logged-in user."""
    app = _build_client(db_session, None)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def auth_client(db_session, test_user):
    """TestClient acting as ``test_user``."""
    app = _build_client(db_session, test_user)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
