"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from qedb.core.types import MigrationDefinition
from qedb.store.database import Database
from qedb.store.executor import SQLAlchemyStatementExecutor
from qedb.store.migration_store import MigrationStore
from tests.fakes import InMemoryMigrationStore, RecordingExecutor


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def db_url(test_db_path: Path) -> str:
    """Provide a SQLAlchemy URL for the temporary database."""
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db(db_url: str) -> Database:
    """Provide a connected database instance."""
    database = Database(db_url)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def migration_store(db: Database) -> MigrationStore:
    """Provide a MigrationStore instance."""
    return MigrationStore(db)


@pytest.fixture
def executor(db: Database) -> SQLAlchemyStatementExecutor:
    """Provide a SQLAlchemyStatementExecutor instance."""
    return SQLAlchemyStatementExecutor(db)


@pytest.fixture
def fake_store() -> InMemoryMigrationStore:
    """Provide an empty in-memory migration store."""
    return InMemoryMigrationStore()


@pytest.fixture
def fake_executor() -> RecordingExecutor:
    """Provide a recording executor."""
    return RecordingExecutor()


@pytest.fixture
def init_and_seed() -> list[MigrationDefinition]:
    """Schema migration followed by a seed migration (SQLite-compatible)."""
    return [
        MigrationDefinition(
            identifier="init",
            statements=["CREATE TABLE IF NOT EXISTS t (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"],
        ),
        MigrationDefinition(
            identifier="seed",
            statements=["INSERT INTO t (name) VALUES ('first')"],
        ),
    ]
