"""Pytest configuration and fixtures for figtokens tests.

Test isolation strategy:
- Each test gets a fresh schema (create_all / drop_all) on its own engine
- DATABASE_URL selects the database; in-memory SQLite is the default
- Figma is never contacted: HTTP is intercepted with respx
"""

import os
import sys
from collections.abc import Generator
from pathlib import Path

# Add repo root to sys.path for importing top-level packages (e.g., apps)
_repo_root = Path(__file__).parent.parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("FIGTOKENS_ENV", "test")
os.environ.setdefault("LOG_JSON", "false")

import httpx
import pytest
import respx
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from figtokens.api.deps import get_db
from figtokens.app import create_app
from figtokens.config import clear_settings_cache
from figtokens.db.engine import create_db_engine
from figtokens.db.models import Base
from figtokens.db.session import create_session_factory
from figtokens.services.figma_client import FigmaClient
from tests.factories import FIGMA_BASE_URL


def get_test_database_url() -> str:
    """Get the test database URL from environment."""
    return os.environ["DATABASE_URL"]


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create a database engine with a fresh schema for one test."""
    engine = create_db_engine(get_test_database_url())

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the test engine."""
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def figma_mock() -> Generator[respx.MockRouter, None, None]:
    """Intercept all HTTP traffic; routes are relative to the Figma API base URL."""
    with respx.mock(base_url=FIGMA_BASE_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def figma_client() -> Generator[FigmaClient, None, None]:
    """Provide a FigmaClient over a real httpx.Client (mock with figma_mock)."""
    with httpx.Client() as http_client:
        yield FigmaClient(http_client, base_url=FIGMA_BASE_URL)


@pytest.fixture
def app(db_session: Session):
    """Provide the FastAPI app with get_db bound to the test session."""
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Provide a FastAPI test client.

    The lifespan runs, so the app holds a real FigmaClient; intercept its
    traffic with the figma_mock fixture.
    """
    with TestClient(app) as client:
        yield client


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset the settings cache before each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
