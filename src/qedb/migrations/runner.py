"""Idempotent migration runner for QEDB.

Applies named migrations in the order given, each at most once, tracking
completion in the migration store. Success is remembered, failure is not:
a migration that fails part-way is never recorded and is retried in full
on the next run.
"""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING, Iterable, Sequence

from loguru import logger

from ..app.protocols import TransactionalExecutorProtocol
from ..core.exceptions import (
    DatabaseError,
    ExecutionError,
    MigrationDefinitionError,
    StatementFailedError,
)
from ..core.types import MigrationDefinition, MigrationStatus, RunResult

if TYPE_CHECKING:
    from ..app.protocols import MigrationStoreProtocol, StatementExecutorProtocol

VERSIONS_PACKAGE = "qedb.migrations.versions"


def discover_migrations(package: str = VERSIONS_PACKAGE) -> list[MigrationDefinition]:
    """Load migration definitions from a package of modules.

    Each module must define ``IDENTIFIER`` and ``STATEMENTS`` and may define
    ``DESCRIPTION``. Modules without the required attributes are skipped.

    Args:
        package: Dotted name of the package to scan.

    Returns:
        Definitions ordered by module name.

    Raises:
        MigrationDefinitionError: If a module defines the attributes with
            the wrong types.
    """
    versions = importlib.import_module(package)
    definitions = []

    for _, modname, ispkg in sorted(
        pkgutil.iter_modules(versions.__path__), key=lambda m: m.name
    ):
        if ispkg:
            continue

        module = importlib.import_module(f"{package}.{modname}")

        if not hasattr(module, "IDENTIFIER") or not hasattr(module, "STATEMENTS"):
            logger.warning(f"Skipping invalid migration module: {modname}")
            continue

        statements = module.STATEMENTS
        if not isinstance(statements, (list, tuple)) or not all(
            isinstance(s, str) for s in statements
        ):
            raise MigrationDefinitionError(
                f"Migration module {modname}: STATEMENTS must be a list of strings"
            )

        definitions.append(
            MigrationDefinition(
                identifier=module.IDENTIFIER,
                statements=tuple(statements),
                description=getattr(module, "DESCRIPTION", ""),
            )
        )

    return definitions


def _check_unique(definitions: Sequence[MigrationDefinition]) -> None:
    seen: set[str] = set()
    for definition in definitions:
        if definition.identifier in seen:
            raise MigrationDefinitionError(
                f"Duplicate migration identifier: {definition.identifier!r}"
            )
        seen.add(definition.identifier)


class MigrationRunner:
    """Applies unapplied migrations in order, exactly once each.

    By default each statement commits on its own. With ``atomic=True`` the
    statements of one migration share a transaction, so a failure leaves
    none of them applied; this requires an executor with ``atomic()``.

    Example:
        runner = MigrationRunner(MigrationStore(db), SQLAlchemyStatementExecutor(db))
        result = runner.run(discover_migrations())
        print(f"Applied {len(result.applied)} migrations")
    """

    def __init__(
        self,
        store: MigrationStoreProtocol,
        executor: StatementExecutorProtocol,
        atomic: bool = False,
    ):
        """Initialize runner.

        Args:
            store: Record of applied migrations.
            executor: Runs individual statements.
            atomic: Wrap each migration's statements in one transaction.

        Raises:
            TypeError: If ``atomic`` is set and the executor cannot open
                transactions.
        """
        if atomic and not isinstance(executor, TransactionalExecutorProtocol):
            raise TypeError(
                f"{type(executor).__name__} does not support atomic execution"
            )
        self.store = store
        self.executor = executor
        self.atomic = atomic

    def run(self, definitions: Iterable[MigrationDefinition]) -> RunResult:
        """Apply every migration that has not been applied yet.

        Stops at the first failing statement; later migrations are not
        attempted. Nothing is retried.

        Args:
            definitions: Migrations in the order they must be applied.

        Returns:
            Identifiers applied by this run and identifiers skipped.

        Raises:
            StoreUnavailableError: If the store cannot be initialized.
            StatementFailedError: If a statement fails.
            MigrationDefinitionError: If identifiers are duplicated.
        """
        definitions = list(definitions)
        _check_unique(definitions)

        self.store.ensure_initialized()
        result = RunResult()

        for definition in definitions:
            if self.store.has_applied(definition.identifier):
                logger.info(f"Migration {definition.identifier} already applied, skipping")
                result.skipped.append(definition.identifier)
                continue

            logger.info(
                f"Applying migration {definition.identifier}: {definition.description}"
            )
            self._apply(definition)
            self.store.mark_applied(definition.identifier)
            result.applied.append(definition.identifier)
            logger.debug(f"Migration {definition.identifier} applied successfully")

        logger.info(
            f"Applied {len(result.applied)} migration(s), "
            f"{len(result.skipped)} already applied"
        )
        return result

    def pending(
        self, definitions: Iterable[MigrationDefinition]
    ) -> list[MigrationDefinition]:
        """Get the migrations a run would apply, without applying them.

        Does not create the marker table.
        """
        applied = {record.identifier for record in self.store.list_applied()}
        return [d for d in definitions if d.identifier not in applied]

    def status(self, definitions: Iterable[MigrationDefinition]) -> list[MigrationStatus]:
        """Get the applied state of each migration, in the given order."""
        records = {record.identifier: record for record in self.store.list_applied()}
        return [
            MigrationStatus(
                identifier=d.identifier,
                description=d.description,
                applied_at=records[d.identifier].applied_at
                if d.identifier in records
                else None,
            )
            for d in definitions
        ]

    def _apply(self, definition: MigrationDefinition) -> None:
        if self.atomic:
            try:
                with self.executor.atomic() as unit:
                    self._execute_statements(unit, definition)
            except DatabaseError as e:
                # Opening or committing the transaction failed; blame the last statement
                index = max(len(definition.statements) - 1, 0)
                statement = definition.statements[index] if definition.statements else ""
                logger.error(
                    f"Migration {definition.identifier} failed to commit: {e}"
                )
                raise StatementFailedError(
                    definition.identifier, index, statement, e
                ) from e
        else:
            self._execute_statements(self.executor, definition)

    def _execute_statements(
        self, executor: StatementExecutorProtocol, definition: MigrationDefinition
    ) -> None:
        total = len(definition.statements)
        for index, statement in enumerate(definition.statements):
            logger.debug(f"{definition.identifier} [{index + 1}/{total}]")
            try:
                executor.execute(statement)
            except (ExecutionError, DatabaseError) as e:
                logger.error(
                    f"Migration {definition.identifier} failed at statement {index}: {e}"
                )
                raise StatementFailedError(
                    definition.identifier, index, statement, e
                ) from e
