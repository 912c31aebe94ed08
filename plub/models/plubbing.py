"""Plubbing ORM - the group itself and its membership rows.

Invariants:
    - 4 <= max_accounts <= 20, checked at the schema boundary
    - cur_account_num counts ACTIVE memberships, host included
    - One AccountPlubbing per (account, plubbing); leaving flips status, never deletes

Design Decisions:
    - days stored as a JSON list of MeetingDay values: read whole, never queried by element
"""

from sqlalchemy import (
    JSON, Boolean, Float, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from plub.core.domain_types import MembershipStatus, OnOff, PlubbingStatus
from plub.db.base import Base, TimestampMixin


class Plubbing(TimestampMixin, Base):
    __tablename__ = "plubbings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    goal: Mapped[str] = mapped_column(String(255), nullable=False)
    main_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PlubbingStatus.ACTIVE.value,
    )
    visibility: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    days: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    on_off: Mapped[str] = mapped_column(
        String(5), nullable=False, default=OnOff.OFF.value,
    )
    time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    road_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    place_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    place_position_x: Mapped[float | None] = mapped_column(Float, nullable=True)
    place_position_y: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_accounts: Mapped[int] = mapped_column(Integer, nullable=False)
    cur_account_num: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    introduce: Mapped[str | None] = mapped_column(Text, nullable=True)


class AccountPlubbing(TimestampMixin, Base):
    """Membership of one account in one plubbing."""
    __tablename__ = "account_plubbings"
    __table_args__ = (UniqueConstraint("account_id", "plubbing_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    plubbing_id: Mapped[int] = mapped_column(
        ForeignKey("plubbings.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    is_host: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=MembershipStatus.ACTIVE.value,
    )
