"""Application composition root.

Example:
    from qedb.app.factory import create_application
    from qedb.core.config import Config

    with create_application(Config.from_env()) as app:
        app.runner.run(discover_migrations())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..migrations.runner import MigrationRunner
from ..store.database import Database
from ..store.executor import SQLAlchemyStatementExecutor
from ..store.migration_store import MigrationStore
from .application import Application

if TYPE_CHECKING:
    from ..core.config import Config


def create_application(config: "Config", atomic: bool | None = None) -> Application:
    """Create an Application with all dependencies wired.

    Args:
        config: Application configuration.
        atomic: Override ``config.atomic``.

    Returns:
        Application whose database engine has been created.

    Raises:
        DatabaseError: If the engine cannot be created from the URL.
    """
    db = Database(config.url, connect_timeout=config.connect_timeout)
    db.connect()

    store = MigrationStore(db)
    executor = SQLAlchemyStatementExecutor(db)
    runner = MigrationRunner(
        store,
        executor,
        atomic=config.atomic if atomic is None else atomic,
    )

    return Application(
        db=db,
        store=store,
        executor=executor,
        runner=runner,
        config=config,
    )
