"""Data access layer for QEDB.

This package provides the persistence layer including:
- Database: SQLAlchemy engine and transaction management
- MigrationStore: the ``schema_migrations`` marker table
- SQLAlchemyStatementExecutor: runs migration statements verbatim

Example:
    from qedb.store import Database, MigrationStore, SQLAlchemyStatementExecutor

    db = Database("postgresql+psycopg://appuser@localhost:5000/myapp")
    db.connect()
    store = MigrationStore(db)
    executor = SQLAlchemyStatementExecutor(db)
"""

from .database import Database
from .executor import ConnectionExecutor, SQLAlchemyStatementExecutor
from .migration_store import MigrationStore

__all__ = [
    "Database",
    "MigrationStore",
    "SQLAlchemyStatementExecutor",
    "ConnectionExecutor",
]
