"""Shared pytest fixtures for Jobs API test suites.

An in-memory SQLite database shared through ``StaticPool`` stands in for
PostgreSQL so the suites run without external services.
"""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.db.base import Database  # noqa: E402

SQLITE_URL = "sqlite://"


def make_database() -> Database:
    return Database(
        SQLITE_URL,
        engine_options={
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        },
    )


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """Provide a connected, empty database."""
    db = make_database()
    db.connect()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database) -> Generator[Session, None, None]:
    with database.session() as db_session:
        yield db_session


@pytest.fixture
def client(database: Database) -> Generator[TestClient, None, None]:
    """Provide an API test client bound to the test database."""
    from app.main import create_app

    with TestClient(create_app(database=database)) as test_client:
        yield test_client
