"""Pytest fixtures — file-backed SQLite database, recreated for every test."""
import os

SQLITE_URL = "sqlite:///./test.db"

# Must be set before the app modules build their engine and settings
os.environ.setdefault("DATABASE_URL", SQLITE_URL)
os.environ.setdefault("SEED_ON_STARTUP", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from time_profiles.database import Base, get_db
from time_profiles.main import app

# Import all models so they register with Base.metadata
from time_profiles.models.time_profile import TimeProfile  # noqa: F401
from time_profiles.models.queued_job import QueuedJob      # noqa: F401
from time_profiles.services import time_profile_service


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers shared by the test modules
# ---------------------------------------------------------------------------
def make_profile(db, **attrs) -> TimeProfile:
    """Create a profile through the service, the way callers do."""
    attrs.setdefault("description", "test profile")
    return time_profile_service.create_time_profile(db, **attrs)


def make_rollup_profile(db, **attrs) -> TimeProfile:
    attrs.setdefault("rollup_daily_metrics", True)
    return make_profile(db, **attrs)


def queued_jobs(db) -> list[QueuedJob]:
    return db.query(QueuedJob).order_by(QueuedJob.job_id).all()


def clear_queue(db) -> None:
    db.query(QueuedJob).delete()
    db.commit()
