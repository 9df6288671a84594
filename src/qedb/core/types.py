"""Type definitions for QEDB."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .exceptions import MigrationDefinitionError


@dataclass(frozen=True)
class MigrationDefinition:
    """A named, ordered set of statements applied at most once."""

    identifier: str
    statements: tuple[str, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str):
            raise MigrationDefinitionError(
                f"Migration identifier must be a string, not {type(self.identifier).__name__}"
            )
        if not self.identifier:
            raise MigrationDefinitionError("Migration identifier must not be empty")
        if isinstance(self.statements, str):
            raise MigrationDefinitionError(
                f"Migration {self.identifier!r}: statements must be a sequence, not str"
            )
        try:
            statements = tuple(self.statements)
        except TypeError:
            raise MigrationDefinitionError(
                f"Migration {self.identifier!r}: statements must be a sequence"
            ) from None
        for index, statement in enumerate(statements):
            if not isinstance(statement, str):
                raise MigrationDefinitionError(
                    f"Migration {self.identifier!r}: statement {index} must be a "
                    f"string, not {type(statement).__name__}"
                )
        object.__setattr__(self, "statements", statements)
        if not self.description:
            object.__setattr__(self, "description", self.identifier)

    def __repr__(self) -> str:
        return (
            f"MigrationDefinition({self.identifier!r}, "
            f"{len(self.statements)} statements)"
        )


@dataclass(frozen=True)
class MigrationRecord:
    """Durable proof that a migration identifier has completed."""

    identifier: str
    applied_at: datetime


@dataclass
class RunResult:
    """Outcome of a successful migration run."""

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Whether this run applied anything."""
        return bool(self.applied)


@dataclass
class MigrationStatus:
    """Applied state of a single migration definition."""

    identifier: str
    description: str
    applied_at: Optional[datetime] = None

    @property
    def is_applied(self) -> bool:
        return self.applied_at is not None
