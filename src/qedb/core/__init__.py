"""Core types, configuration and errors for QEDB."""

from .config import Config, PostgresConfig, normalize_url
from .exceptions import (
    DatabaseError,
    ExecutionError,
    MigrationDefinitionError,
    QEDBError,
    StatementFailedError,
    StoreUnavailableError,
)
from .types import MigrationDefinition, MigrationRecord, MigrationStatus, RunResult

__all__ = [
    "Config",
    "PostgresConfig",
    "normalize_url",
    "QEDBError",
    "DatabaseError",
    "StoreUnavailableError",
    "ExecutionError",
    "StatementFailedError",
    "MigrationDefinitionError",
    "MigrationDefinition",
    "MigrationRecord",
    "MigrationStatus",
    "RunResult",
]
