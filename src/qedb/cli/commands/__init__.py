"""Command implementations for QEDB CLI."""

from .migrate import add_connection_arguments, handle_migrate
from .status import handle_list, handle_status

__all__ = [
    "add_connection_arguments",
    "handle_migrate",
    "handle_status",
    "handle_list",
]
