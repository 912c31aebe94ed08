"""Account ORM - users, their preferred sub-categories and server-side refresh tokens.

Invariants:
    - email is `<provider id>@<SOCIAL_TYPE>`; nullable only after withdrawal
    - nickname unique; released (NULL) after withdrawal
    - At most one RefreshToken per account (unique account_id), rotated on reissue

Design Decisions:
    - Refresh tokens in a table instead of a key-value store: one less moving part,
      same replace-on-issue semantics
"""

from datetime import date, datetime

from sqlalchemy import (
    Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from plub.core.domain_types import AccountStatus, Role
from plub.db.base import Base, TimestampMixin


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    nickname: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    introduce: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_type: Mapped[str] = mapped_column(String(10), nullable=False)
    profile_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    fcm_token: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Role.USER.value,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountStatus.NORMAL.value,
    )


class AccountCategory(Base):
    """An account's preferred sub-category, chosen at signup."""
    __tablename__ = "account_categories"
    __table_args__ = (UniqueConstraint("account_id", "sub_category_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    sub_category_id: Mapped[int] = mapped_column(
        ForeignKey("sub_categories.id", ondelete="CASCADE"), nullable=False,
    )


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True,
    )
    token: Mapped[str] = mapped_column(String(1000), nullable=False)
