"""Application container class.

Holds the wired database, store, executor and runner and closes the
database when done. Use create_application() from qedb.app.factory to
create a configured instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.config import Config
    from ..migrations.runner import MigrationRunner
    from ..store.database import Database
    from ..store.executor import SQLAlchemyStatementExecutor
    from ..store.migration_store import MigrationStore


class Application:
    """Application container with wired components and lifecycle management.

    Attributes:
        db: Database instance.
        store: MigrationStore over ``schema_migrations``.
        executor: Statement executor.
        runner: MigrationRunner wired to store and executor.

    Example:
        with create_application(config) as app:
            app.runner.run(discover_migrations())
    """

    def __init__(
        self,
        db: "Database",
        store: "MigrationStore",
        executor: "SQLAlchemyStatementExecutor",
        runner: "MigrationRunner",
        config: "Config",
    ):
        self.db = db
        self.store = store
        self.executor = executor
        self.runner = runner
        self.config = config

    def close(self) -> None:
        """Release database resources."""
        self.db.close()

    def __enter__(self) -> "Application":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
