"""Custom exceptions for QEDB."""


class QEDBError(Exception):
    """Base exception for all QEDB errors."""

    pass


class DatabaseError(QEDBError):
    """Database connection or operation failed."""

    pass


class StoreUnavailableError(DatabaseError):
    """Migration record store cannot be reached or initialized."""

    pass


class ExecutionError(QEDBError):
    """A statement was rejected by the database engine.

    The message is the engine's diagnostic, passed through as-is.
    """

    pass


class MigrationDefinitionError(QEDBError):
    """Migration definitions are malformed or inconsistent."""

    pass


class StatementFailedError(QEDBError):
    """A statement inside a migration definition failed."""

    def __init__(
        self,
        identifier: str,
        index: int,
        statement: str,
        cause: QEDBError,
    ):
        """Initialize exception with the failing position.

        Args:
            identifier: Identifier of the migration being applied.
            index: Zero-based position of the statement in the migration.
            statement: The statement body that failed.
            cause: The executor error: an ExecutionError carrying the engine
                diagnostic, or a DatabaseError if no connection or commit
                was possible.
        """
        self.identifier = identifier
        self.index = index
        self.statement = statement
        self.cause = cause
        super().__init__(
            f"Migration {identifier!r} failed at statement {index}: {cause}"
        )
