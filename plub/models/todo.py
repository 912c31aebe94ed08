"""Todo ORM - per-date timelines of a member's to-dos within a plubbing.

Invariants:
    - TodoTimeline unique per (account, plubbing, date)
    - A timeline holds at most max_todos_per_timeline Todos (checked by the service)
    - Todo state is derived from (checked, proof); proof implies checked
    - TodoLike unique per (account, timeline); hard deleted on toggle-off

Design Decisions:
    - Todo.date duplicates its timeline's date: calendar queries skip the join
"""

import datetime

from sqlalchemy import (
    Boolean, Date, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from plub.db.base import Base, TimestampMixin


class TodoTimeline(TimestampMixin, Base):
    __tablename__ = "todo_timelines"
    __table_args__ = (UniqueConstraint("account_id", "plubbing_id", "date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    plubbing_id: Mapped[int] = mapped_column(
        ForeignKey("plubbings.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Todo(TimestampMixin, Base):
    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timeline_id: Mapped[int] = mapped_column(
        ForeignKey("todo_timelines.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
    )
    plubbing_id: Mapped[int] = mapped_column(
        ForeignKey("plubbings.id", ondelete="CASCADE"), nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    checked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    proof: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    proof_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class TodoLike(TimestampMixin, Base):
    __tablename__ = "todo_likes"
    __table_args__ = (UniqueConstraint("account_id", "timeline_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
    )
    timeline_id: Mapped[int] = mapped_column(
        ForeignKey("todo_timelines.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
