"""Status and list commands for QEDB CLI."""

from ...app.factory import create_application
from ...core.config import Config
from ...migrations.runner import discover_migrations


def handle_status(args, config: Config) -> None:
    """Handle status command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    definitions = discover_migrations()

    with create_application(config) as app:
        statuses = app.runner.status(definitions)

    print("QEDB Migration Status")
    print("=" * 50)

    if not statuses:
        print("No migrations bundled.")
        return

    for status in statuses:
        state = status.applied_at.isoformat() if status.is_applied else "pending"
        print(f"  {status.identifier}  {state}")

    pending = sum(1 for s in statuses if not s.is_applied)
    print()
    print(f"Applied: {len(statuses) - pending}  Pending: {pending}")


def handle_list(args, config: Config) -> None:
    """Handle list command.

    Lists bundled migrations without touching the database.
    """
    for definition in discover_migrations():
        print(
            f"{definition.identifier}  {definition.description} "
            f"({len(definition.statements)} statements)"
        )
