"""Statement execution against the target database."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ..core.exceptions import DatabaseError, ExecutionError

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

    from .database import Database


def _execute_raw(connection: Connection, statement: str) -> None:
    """Send a statement to the driver verbatim.

    ``no_parameters`` keeps the driver from interpreting ``%`` and
    SQLAlchemy from parsing ``:name`` binds, so ``$$`` bodies and ``::``
    casts pass through untouched.
    """
    try:
        connection.exec_driver_sql(
            statement, execution_options={"no_parameters": True}
        )
    except DBAPIError as e:
        diagnostic = str(e.orig) if e.orig is not None else str(e)
        raise ExecutionError(diagnostic.strip()) from e


class ConnectionExecutor:
    """Executes statements on one connection inside its open transaction."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def execute(self, statement: str) -> None:
        _execute_raw(self.connection, statement)


class SQLAlchemyStatementExecutor:
    """Executes one statement at a time through a SQLAlchemy engine.

    ``execute`` runs each statement on an autocommit connection, so every
    statement commits on its own, the same as ``psql -c``. ``atomic`` groups
    several statements into one transaction that is rolled back if any of
    them fails.

    Example:
        executor = SQLAlchemyStatementExecutor(db)
        executor.execute("CREATE TABLE IF NOT EXISTS t (id INT)")

        with executor.atomic() as unit:
            unit.execute("INSERT INTO t VALUES (1)")
            unit.execute("INSERT INTO t VALUES (2)")
    """

    def __init__(self, db: Database):
        """Initialize with database connection.

        Args:
            db: Database instance.
        """
        self.db = db

    def execute(self, statement: str) -> None:
        """Execute and commit a single statement.

        Args:
            statement: Statement body, sent as-is.

        Raises:
            ExecutionError: If the engine rejects the statement.
            DatabaseError: If no connection can be obtained.
        """
        try:
            with self.db.engine.connect() as connection:
                connection = connection.execution_options(isolation_level="AUTOCOMMIT")
                _execute_raw(connection, statement)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

    @contextmanager
    def atomic(self) -> Iterator[ConnectionExecutor]:
        """Open a transaction and yield an executor bound to it.

        Commits when the block exits normally, rolls back otherwise.

        Raises:
            DatabaseError: If no connection can be obtained or the commit
                fails.
        """
        try:
            with self.db.engine.begin() as connection:
                yield ConnectionExecutor(connection)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Transaction failed: {e}") from e
