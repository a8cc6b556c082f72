"""Pytest fixtures and configuration for StudyHub tests."""

import os

# The module-level engine is built at import time; keep it off the local file DB.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from studyhub.database.database import Base, get_db
from studyhub.models.task import Task, TaskStatus, TaskCategory, TaskPriority


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_session(test_user_id):
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    Also creates a test user (with an empty dashboard blob) in the database.
    """
    from studyhub.auth.passwords import hash_password
    from studyhub.database.models import UserDB, UserDataDB

    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    # Create test user (required for foreign key constraints)
    now = datetime.utcnow()
    session.add(UserDB(
        id=test_user_id,
        email="test@example.com",
        name="Test User",
        password_hash=hash_password(TEST_PASSWORD),
        created_at=now,
        updated_at=now,
    ))
    session.flush()
    session.add(UserDataDB(user_id=test_user_id, tasks=[], stats=None, reminder_enabled=False, updated_at=now))
    session.commit()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "DSA Practice",
        "time": "6:00 PM - 8:00 PM",
        "day": "Wed",
        "category": TaskCategory.CODING,
        "status": TaskStatus.PENDING,
        "priority": TaskPriority.HIGH,
        "color": "bg-red-500",
        "due_date": None,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def test_user(test_user_id):
    """Create a test user object."""
    from studyhub.models.user import User
    now = datetime.utcnow()
    return User(
        id=test_user_id,
        email="test@example.com",
        name="Test User",
        created_at=now,
        updated_at=now,
    )


def _override_db(app, db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def test_client(db_session: Session, test_user):
    """Create a FastAPI test client with overridden database dependency and authentication."""
    from studyhub.api.app import app, reminder_scanners
    from studyhub.auth.dependencies import get_current_user

    _override_db(app, db_session)

    # Override authentication to return test user
    def override_get_current_user():
        return test_user

    app.dependency_overrides[get_current_user] = override_get_current_user

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
    reminder_scanners.clear()


@pytest.fixture
def auth_client(db_session: Session):
    """FastAPI test client that goes through real bearer-token authentication."""
    from studyhub.api.app import app, reminder_scanners

    _override_db(app, db_session)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    reminder_scanners.clear()
