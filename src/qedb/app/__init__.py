"""Application wiring for QEDB."""

from .protocols import (
    MigrationStoreProtocol,
    StatementExecutorProtocol,
    TransactionalExecutorProtocol,
)

__all__ = [
    "MigrationStoreProtocol",
    "StatementExecutorProtocol",
    "TransactionalExecutorProtocol",
]
