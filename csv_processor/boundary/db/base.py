"""
SQLAlchemy declarative base and shared column mixins.

Constraint names follow a fixed convention so schema diffs stay stable
across PostgreSQL and SQLite.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, MetaData, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base; every model registers on its metadata."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UUIDMixin:
    """UUID v4 primary key generated client-side on insert."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """
    Creation and modification times in UTC.

    updated_at is refreshed by the ORM on every UPDATE it issues; code
    that changes a row through a bulk statement sets it explicitly.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class SoftDeleteMixin:
    """Adds an is_deleted flag; rows are hidden, never removed."""

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
