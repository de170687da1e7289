"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Force a throwaway SQLite DB when pytest runs; don't inherit from .env
_test_dir = tempfile.mkdtemp(prefix="netgrowth_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_dir, 'app.db')}"
os.environ["QUEUE_EMAIL_ENABLED"] = "false"
os.environ.pop("QUEUE_MAX_NEW_REQUESTS", None)
os.environ.pop("QUEUE_WEEKLY_LIMIT", None)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from netgrowth.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session (for integration tests)."""
    from netgrowth.db.session import get_db
    from netgrowth.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def db(tmp_path) -> Session:
    """Session on a fresh per-test SQLite database with all tables created."""
    import netgrowth.models  # noqa: F401  (registers tables)
    from netgrowth.db.session import Base

    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """Test session with default scoring config and categories seeded."""
    from netgrowth.services.scoring.config_loader import seed_default_scoring_config

    seed_default_scoring_config(db)
    return db
