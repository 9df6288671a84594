"""SQLAlchemy ORM models for the QEDB storage layer.

Only the migration marker table lives here. Application tables are
created by the migrations themselves and are not mapped.
"""

from datetime import datetime

from sqlalchemy import DateTime, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models in QEDB."""

    pass


class SchemaMigrationModel(Base):
    """One row per applied migration.

    The identifier is stored in ``version`` so that existing
    ``schema_migrations`` tables with this layout are reused as-is.
    """

    __tablename__ = "schema_migrations"

    version: Mapped[str] = mapped_column(Text, primary_key=True)
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
