"""Test fakes for testing without a real database.

Example:
    from tests.fakes import InMemoryMigrationStore, RecordingExecutor

    runner = MigrationRunner(InMemoryMigrationStore(), RecordingExecutor())
"""

from .migrations import (
    InMemoryMigrationStore,
    RecordingExecutor,
    TransactionalRecordingExecutor,
)

__all__ = [
    "InMemoryMigrationStore",
    "RecordingExecutor",
    "TransactionalRecordingExecutor",
]
