"""
Shared fixtures: in-memory SQLite database, test client and seeded users.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobquest.main import app
from jobquest.db.base import Base
import jobquest.db.models  # noqa: F401
from jobquest.db.models.job_posting import JobPosting
from jobquest.db.models.user import UserProfile
from jobquest.core.auth_dependency import get_db
from jobquest.services import identity_service
from jobquest.services.identity_service import Persistence


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def client():
    """Fresh client per test so session cookies never leak between tests."""
    return TestClient(app)


def create_account(db, email, username, password="pw123456", is_admin=False):
    """Identity plus profile document, as signup would leave them."""
    identity = identity_service.create_identity(db, email, password)
    identity_service.update_identity_profile(db, identity, display_name=username)
    profile = UserProfile(uid=identity.uid, email=identity.email, username=username, is_admin=is_admin)
    db.add(profile)
    db.commit()
    return identity


def bearer(identity):
    token = identity_service.issue_session(identity, Persistence.SESSION).access_token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def account_factory(db_session):
    """Create extra accounts inside a test."""
    def _create(email, username, password="pw123456", is_admin=False):
        return create_account(db_session, email, username, password, is_admin)

    return _create


@pytest.fixture
def seeker(db_session):
    return create_account(db_session, "seeker@example.com", "seeker")


@pytest.fixture
def other_seeker(db_session):
    return create_account(db_session, "other@example.com", "other")


@pytest.fixture
def admin(db_session):
    return create_account(db_session, "admin@example.com", "boss", is_admin=True)


@pytest.fixture
def seeker_headers(seeker):
    return bearer(seeker)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def make_job(db_session, admin):
    """Factory inserting a posting directly into the store."""
    def _make_job(title="Backend Engineer", description="Build APIs", keywords=None, applicants=None,
                  salary=90000, job_type="full-time"):
        job = JobPosting(
            title=title,
            description=description,
            salary=salary,
            job_type=job_type,
            keywords=keywords or [],
            posted_by=admin.uid,
            applicants=applicants or [],
        )
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _make_job
