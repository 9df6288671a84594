"""CLI entry point for QEDB."""

import argparse
import sys
from typing import NoReturn, Sequence

from loguru import logger

from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="qedb",
        description="QuickEats database - apply schema and seed migrations",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 1.0.0")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output",
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    migrate_parser = subparsers.add_parser("migrate", help="Apply pending migrations")
    commands.add_connection_arguments(migrate_parser)
    migrate_parser.add_argument(
        "--atomic",
        action="store_true",
        help="Run each migration's statements in a single transaction",
    )
    migrate_parser.add_argument(
        "--wait",
        type=float,
        default=0.0,
        metavar="SECONDS",
        help="Wait up to SECONDS for the database to accept connections",
    )

    status_parser = subparsers.add_parser("status", help="Show applied and pending migrations")
    commands.add_connection_arguments(status_parser)

    subparsers.add_parser("list", help="List bundled migrations")

    return parser


def configure_logging(level: str) -> None:
    """Send log output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
        if getattr(args, "url", None):
            config.database_url = args.url
        configure_logging("DEBUG" if args.verbose else config.log_level)

        if args.command == "migrate":
            commands.handle_migrate(args, config)
        elif args.command == "status":
            commands.handle_status(args, config)
        elif args.command == "list":
            commands.handle_list(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
