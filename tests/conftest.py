"""Pytest fixtures and configuration for dailyplan tests."""

import os

# Keep the app's module-level engine off the developer's database file
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dailyplan.database.database import Base
from dailyplan.database.memory import InMemoryStateRepository
from dailyplan.database.repository import SqlStateRepository
from dailyplan.models.config import PlannerState, SchedulingConfig
from dailyplan.models.task import Task, TaskDuration, TaskStatus


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Fixed reference time for deterministic scoring
FIXED_NOW = datetime(2026, 1, 15, 12, 0)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from dailyplan.database import models  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_repository(db_session: Session):
    """Create a SqlStateRepository instance for testing."""
    return SqlStateRepository(db_session)


@pytest.fixture
def memory_repository():
    """Create an empty InMemoryStateRepository."""
    return InMemoryStateRepository()


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock(now):
    """Clock callable returning the fixed reference time."""
    return lambda: now


@pytest.fixture
def config():
    return SchedulingConfig()


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    A fresh id is generated on every use of the fixture.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "description": "Test description",
        "tags": [],
        "priority": 3,
        "duration": TaskDuration.MEDIUM,
        "status": TaskStatus.TODO,
        "created_at": now,
        "updated_at": now,
        "deadline": None,
        "scheduled_date": None,
        "last_scheduled": None,
        "last_worked_on": None,
        "conditions": [],
    }


@pytest.fixture
def make_task(sample_task_base):
    """Factory building a Task from the base dict with a fresh id per call."""
    def _make(**overrides) -> Task:
        data = {**sample_task_base, "id": str(uuid.uuid4())}
        data.update(overrides)
        return Task(**data)
    return _make


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def task_with_deadline(sample_task_base, now):
    """Create a task due in 12 hours."""
    return Task(**{**sample_task_base, "deadline": now + timedelta(hours=12)})


@pytest.fixture
def blocked_task(sample_task_base):
    """Create a task with an unresolved precondition."""
    return Task(**{**sample_task_base, "conditions": ["waiting for review"]})


@pytest.fixture
def seeded_memory_repository(make_task):
    """Memory repository seeded with three todo tasks and an empty plan."""
    tasks = [make_task(title=f"Task {i}") for i in range(3)]
    return InMemoryStateRepository(PlannerState(tasks=tasks))


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from dailyplan.api.app import app
    from dailyplan.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
