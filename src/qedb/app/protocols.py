"""Protocol definitions for injectable migration dependencies.

The runner depends on these interfaces rather than on the SQLAlchemy
implementations, so tests and callers can substitute fakes.

Example:
    class MyRunner:
        def __init__(
            self,
            store: MigrationStoreProtocol,
            executor: StatementExecutorProtocol,
        ):
            self._store = store
            self._executor = executor
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..core.types import MigrationRecord


@runtime_checkable
class StatementExecutorProtocol(Protocol):
    """Executes a single statement against the target database."""

    def execute(self, statement: str) -> None:
        """Execute one statement.

        Raises:
            ExecutionError: Carrying the engine's diagnostic unchanged.
        """
        ...


@runtime_checkable
class TransactionalExecutorProtocol(StatementExecutorProtocol, Protocol):
    """Executor that can group statements into one transaction."""

    def atomic(self) -> AbstractContextManager[StatementExecutorProtocol]:
        """Yield an executor whose statements commit or roll back together."""
        ...


@runtime_checkable
class MigrationStoreProtocol(Protocol):
    """Protocol for the applied-migration record store."""

    def ensure_initialized(self) -> None:
        """Create the backing structure if absent."""
        ...

    def has_applied(self, identifier: str) -> bool:
        """Check whether an identifier has been recorded."""
        ...

    def mark_applied(self, identifier: str) -> None:
        """Record an identifier, absorbing duplicate-key conflicts."""
        ...

    def list_applied(self) -> list["MigrationRecord"]:
        """Get all records, oldest first."""
        ...
