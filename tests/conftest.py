"""
Pytest configuration and fixtures.
"""
import pytest
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.core.database import Base, get_db
from app.main import app
from app.services.photo_storage import get_photo_storage

# Import all models to ensure they register with Base.metadata
from app.models import Audit, Auditor, Area, Credential

# Use file-based SQLite for testing (more reliable than in-memory, and shared across threads)
TEST_DATABASE_URL = "sqlite:///./test_safety_audits.db"

test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
    pool_pre_ping=False,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakePhotoStorage:
    """Stands in for the MinIO-backed store: records calls, returns predictable URLs."""

    def __init__(self):
        self.deleted = []
        self.issued = []

    def create_upload_target(self, filename):
        from app.services.photo_storage import UploadTarget, unique_object_name

        object_name = unique_object_name(filename)
        self.issued.append(object_name)
        return UploadTarget(
            upload_url=f"https://storage.test/audit-photos/{object_name}?X-Amz-Signature=abc",
            file_url=f"https://storage.test/audit-photos/{object_name}",
            object_name=object_name,
        )

    def delete_photo(self, object_name):
        from app.core.exceptions import InvalidArgumentError

        if object_name in (".", ".."):
            raise InvalidArgumentError("invalid photo name")
        self.deleted.append(object_name)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """
    Create all tables before tests run and drop them after all tests complete.
    """
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function", autouse=True)
def clean_tables():
    """Start every test from empty tables."""
    db = TestingSessionLocal()
    try:
        for model in (Audit, Auditor, Area, Credential):
            db.execute(delete(model))
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture(scope="function")
def photo_storage():
    return FakePhotoStorage()


@pytest.fixture(scope="function")
def client(photo_storage):
    """
    Create a test client with database and photo storage overrides.

    The get_db dependency is overridden to use TestingSessionLocal,
    creating a new session for each request (as FastAPI expects).
    """
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def session_factory():
    """Sessions for tests that open their own connections, e.g. from worker threads."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def db_session():
    """
    Provide a database session for tests that need direct DB access.
    """
    db = TestingSessionLocal()
    try:
        yield db
        db.rollback()
    finally:
        db.close()


@pytest.fixture
def make_audit(db_session):
    """Insert an audit directly, with sensible defaults for fields the test does not care about."""
    from datetime import date, datetime, timezone

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "timestamp": datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc),
            "area": "Warehouse",
            "auditor": "Alex Doe",
            "audit_date": date(2026, 1, 1),
            "risk_type": "Missing PPE",
            "potential": "Low",
            "description": f"Observation {counter['n']}",
            "responsible": "Maintenance",
            "deadline": date(2026, 1, 15),
            "status": "In Progress",
            "action_description": "Fix it",
        }
        values.update(overrides)
        audit = Audit(**values)
        db_session.add(audit)
        db_session.commit()
        db_session.refresh(audit)
        return audit

    return _make
