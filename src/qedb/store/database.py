"""SQLAlchemy engine manager for QEDB."""

import time
from contextlib import contextmanager
from typing import Iterator

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import DatabaseError


class Database:
    """Database connection manager.

    Wraps a SQLAlchemy engine created from a URL. The engine is lazy: no
    connection is opened until a statement runs, so ``connect()`` succeeds
    even when the server is still starting. Use ``wait_until_ready()`` to
    block until it accepts connections.
    """

    def __init__(self, url: str, connect_timeout: float | None = None):
        """Initialize database with URL.

        Args:
            url: SQLAlchemy database URL.
            connect_timeout: Seconds the driver waits for a connection
                (PostgreSQL only).
        """
        self.url = url
        self.connect_timeout = connect_timeout
        self._engine: Engine | None = None

    def connect(self) -> None:
        """Create the engine. Calling it again is a no-op."""
        if self._engine is not None:
            return

        connect_args: dict = {}
        if self.connect_timeout and self.url.startswith("postgresql"):
            connect_args["connect_timeout"] = max(1, int(self.connect_timeout))

        try:
            self._engine = create_engine(self.url, connect_args=connect_args)
        except Exception as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine:
            try:
                self._engine.dispose()
            except Exception as e:
                raise DatabaseError(f"Failed to close database: {e}") from e
            finally:
                self._engine = None

    @property
    def engine(self) -> Engine:
        """The underlying engine.

        Raises:
            DatabaseError: If the database is not connected.
        """
        if self._engine is None:
            raise DatabaseError("Database not connected")
        return self._engine

    @property
    def dialect_name(self) -> str:
        """Dialect of the connected engine, e.g. ``postgresql`` or ``sqlite``."""
        return self.engine.dialect.name

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Context manager for database transactions.

        Commits on success, rolls back on error.

        Yields:
            A connection bound to the open transaction.

        Raises:
            DatabaseError: If not connected or the transaction fails.
        """
        engine = self.engine
        try:
            with engine.begin() as connection:
                yield connection
        except SQLAlchemyError as e:
            raise DatabaseError(f"Transaction failed: {e}") from e

    def ping(self) -> bool:
        """Check whether the database accepts connections."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.debug(f"Database not reachable: {e}")
            return False

    def wait_until_ready(self, timeout: float, interval: float = 2.0) -> None:
        """Poll the database until it accepts connections.

        Args:
            timeout: Maximum seconds to wait.
            interval: Seconds between attempts.

        Raises:
            DatabaseError: If the database is still unreachable at the deadline.
        """
        deadline = time.monotonic() + timeout
        attempt = 0

        while True:
            attempt += 1
            if self.ping():
                logger.info(f"Database is ready (attempt {attempt})")
                return

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DatabaseError(
                    f"Database not reachable after {attempt} attempts ({timeout}s)"
                )

            logger.info(f"Waiting for database... (attempt {attempt})")
            time.sleep(min(interval, remaining))
