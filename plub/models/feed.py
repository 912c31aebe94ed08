"""Feed ORM - group board posts, threaded comments and likes.

Invariants:
    - Always belongs to a Plubbing (plubbing_id FK) and an authoring Account
    - visibility=False is a soft delete; rows are never hard deleted
    - pin_at is set whenever pin is True
    - FeedComment.comment_group_id equals the id of the thread's root comment
    - FeedLike unique per (account, feed); hard deleted on toggle-off

Design Decisions:
    - like_count / comment_count denormalized on Feed: list pages read them without
      aggregating; services change them with atomic `col = col +/- 1` UPDATEs
    - comment_group_id denormalized: a whole thread is fetched with one equality filter
"""

from datetime import datetime

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from plub.core.domain_types import FeedType, ViewType
from plub.db.base import Base, TimestampMixin


class Feed(TimestampMixin, Base):
    __tablename__ = "feeds"
    __table_args__ = (
        Index("ix_feeds_plubbing_pin_visibility", "plubbing_id", "pin", "visibility"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plubbing_id: Mapped[int] = mapped_column(
        ForeignKey("plubbings.id", ondelete="CASCADE"), nullable=False,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    feed_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FeedType.LINE.value,
    )
    view_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ViewType.NORMAL.value,
    )
    feed_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    pin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pin_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    visibility: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class FeedComment(TimestampMixin, Base):
    __tablename__ = "feed_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feed_id: Mapped[int] = mapped_column(
        ForeignKey("feeds.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("feed_comments.id", ondelete="CASCADE"), nullable=True,
    )
    comment_group_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    visibility: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class FeedLike(TimestampMixin, Base):
    __tablename__ = "feed_likes"
    __table_args__ = (UniqueConstraint("account_id", "feed_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
    )
    feed_id: Mapped[int] = mapped_column(
        ForeignKey("feeds.id", ondelete="CASCADE"), nullable=False, index=True,
    )
