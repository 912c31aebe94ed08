"""SQLAlchemy Declarative Base - shared base class and timestamp columns.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Integer primary keys (SQLite in tests autoincrements INTEGER only)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all Plub ORM models."""
    pass


class TimestampMixin:
    """created_at / modified_at maintained by the ORM."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    modified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
