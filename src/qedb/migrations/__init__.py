"""Database migrations for QEDB.

Migrations are named, ordered lists of statements tracked in the
``schema_migrations`` table. Bundled migrations live in the ``versions``
subpackage.

Example:
    from qedb.migrations import MigrationRunner, discover_migrations

    runner = MigrationRunner(store, executor)
    result = runner.run(discover_migrations())
"""

from .runner import MigrationRunner, discover_migrations

__all__ = [
    "MigrationRunner",
    "discover_migrations",
]
