"""Persistence of applied migration identifiers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from loguru import logger
from sqlalchemy import inspect, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.schema import CreateTable

from ..core.exceptions import DatabaseError, StoreUnavailableError
from ..core.types import MigrationRecord
from .models import SchemaMigrationModel

if TYPE_CHECKING:
    from sqlalchemy.sql.dml import Insert

    from .database import Database


class MigrationStore:
    """Append-only record of applied migrations in ``schema_migrations``.

    Every read goes to the database; nothing is cached, since concurrent
    runners in other processes may write between calls.

    Example:
        store = MigrationStore(db)
        store.ensure_initialized()
        if not store.has_applied("2026-02-16_quickeats_init"):
            ...
            store.mark_applied("2026-02-16_quickeats_init")
    """

    table = SchemaMigrationModel.__table__

    def __init__(self, db: Database):
        """Initialize with database connection.

        Args:
            db: Database instance.
        """
        self.db = db

    def ensure_initialized(self) -> None:
        """Create the marker table if it does not exist.

        Raises:
            StoreUnavailableError: If the database cannot be reached or the
                table cannot be created.
        """
        try:
            with self.db.transaction() as conn:
                conn.execute(CreateTable(self.table, if_not_exists=True))
        except DatabaseError as e:
            raise StoreUnavailableError(
                f"Migration store unavailable: {e.__cause__ or e}"
            ) from e

    def exists(self) -> bool:
        """Check whether the marker table exists."""
        try:
            with self.db.engine.connect() as conn:
                return inspect(conn).has_table(self.table.name)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Migration store unavailable: {e}") from e

    def has_applied(self, identifier: str) -> bool:
        """Check whether a record exists for an identifier.

        Args:
            identifier: Migration identifier, compared by exact equality.

        Returns:
            True if the migration has been recorded as applied.
        """
        query = (
            select(self.table.c.version)
            .where(self.table.c.version == identifier)
            .limit(1)
        )
        try:
            with self.db.engine.connect() as conn:
                return conn.execute(query).first() is not None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Migration store unavailable: {e}") from e

    def mark_applied(self, identifier: str) -> None:
        """Record an identifier as applied, unless already recorded.

        A concurrent runner may record the same identifier between our
        ``has_applied`` check and this insert; that conflict is absorbed.

        Args:
            identifier: Migration identifier.
        """
        statement = self._insert_if_absent(identifier)
        try:
            with self.db.transaction() as conn:
                result = conn.execute(statement)
        except DatabaseError as e:
            if isinstance(e.__cause__, IntegrityError):
                logger.debug(f"Migration {identifier} already recorded by another runner")
                return
            raise StoreUnavailableError(
                f"Failed to record migration {identifier}: {e.__cause__ or e}"
            ) from e

        if result.rowcount == 0:
            logger.debug(f"Migration {identifier} already recorded by another runner")

    def list_applied(self) -> list[MigrationRecord]:
        """Get all applied migrations, oldest first.

        Returns:
            Records ordered by ``applied_at`` then identifier. Empty if the
            marker table has not been created yet.
        """
        if not self.exists():
            return []

        query = select(self.table.c.version, self.table.c.applied_at).order_by(
            self.table.c.applied_at, self.table.c.version
        )
        try:
            with self.db.engine.connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Migration store unavailable: {e}") from e

        return [MigrationRecord(identifier=row.version, applied_at=row.applied_at) for row in rows]

    def _insert_if_absent(self, identifier: str) -> Insert:
        values = {
            "version": identifier,
            "applied_at": datetime.now(timezone.utc),
        }
        dialect = self.db.dialect_name

        if dialect == "postgresql":
            return (
                postgresql.insert(self.table)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["version"])
            )
        if dialect == "sqlite":
            return (
                sqlite.insert(self.table)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["version"])
            )
        # Other dialects: plain insert, IntegrityError handled by the caller
        return insert(self.table).values(**values)
