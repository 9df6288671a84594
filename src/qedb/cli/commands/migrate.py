"""Migrate command for QEDB CLI."""

import argparse

from ...app.factory import create_application
from ...core.config import Config
from ...migrations.runner import discover_migrations


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add database connection arguments to a subcommand parser.

    Args:
        parser: Subcommand parser to extend.
    """
    parser.add_argument(
        "--url",
        help="Database URL (default: DATABASE_URL or POSTGRES_* environment)",
    )


def handle_migrate(args, config: Config) -> None:
    """Handle migrate command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Raises:
        DatabaseError: If the database does not become reachable.
        StatementFailedError: If a migration statement fails.
    """
    definitions = discover_migrations()
    atomic = True if args.atomic else None

    with create_application(config, atomic=atomic) as app:
        if args.wait > 0:
            app.db.wait_until_ready(args.wait)

        result = app.runner.run(definitions)

    for identifier in result.skipped:
        print(f"Already applied: {identifier}")
    for identifier in result.applied:
        print(f"Applied: {identifier}")

    if result.changed:
        print(f"✓ Applied {len(result.applied)} migration(s)")
    else:
        print("✓ Database is up to date")
