"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.database import create_session_factory
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = create_session_factory(engine)


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Factory for connections to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def file_session_factory(tmp_path: Path) -> Generator[sessionmaker[Session], None, None]:
    """
    Mock real setup with multiple connections to the same database file.

    The in-memory database above shares a single connection, so it cannot show two writers racing each other.
    """
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'sessions.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=file_engine)
    try:
        yield create_session_factory(file_engine)
    finally:
        file_engine.dispose()
