"""Recruit ORM - a plubbing's enrollment posting, its questions, applications and bookmarks.

Invariants:
    - Exactly one Recruit per Plubbing (unique plubbing_id)
    - AppliedAccount unique per (account, recruit); answers is a JSON list of
      {"questionId": int, "answer": str}
    - Bookmark unique per (account, recruit); hard deleted on toggle-off
"""

from sqlalchemy import (
    JSON, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from plub.core.domain_types import ApplicantStatus, RecruitStatus
from plub.db.base import Base, TimestampMixin


class Recruit(TimestampMixin, Base):
    __tablename__ = "recruits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plubbing_id: Mapped[int] = mapped_column(
        ForeignKey("plubbings.id", ondelete="CASCADE"), nullable=False, unique=True,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    introduce: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=RecruitStatus.RUNNING.value,
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class RecruitQuestion(Base):
    __tablename__ = "recruit_questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recruit_id: Mapped[int] = mapped_column(
        ForeignKey("recruits.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    question: Mapped[str] = mapped_column(String(500), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class AppliedAccount(TimestampMixin, Base):
    __tablename__ = "applied_accounts"
    __table_args__ = (UniqueConstraint("account_id", "recruit_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    recruit_id: Mapped[int] = mapped_column(
        ForeignKey("recruits.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    answers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ApplicantStatus.WAITING.value,
    )


class Bookmark(TimestampMixin, Base):
    __tablename__ = "bookmarks"
    __table_args__ = (UniqueConstraint("account_id", "recruit_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    recruit_id: Mapped[int] = mapped_column(
        ForeignKey("recruits.id", ondelete="CASCADE"), nullable=False,
    )
