"""Initial schema - accounts, categories, plubbings, recruits, feeds, notices, todos, reports.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer, primary_key=True, autoincrement=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _fk(name: str, target: str, nullable: bool = False, **kwargs) -> sa.Column:
    return sa.Column(
        name, sa.Integer, sa.ForeignKey(f"{target}.id", ondelete="CASCADE"),
        nullable=nullable, **kwargs,
    )


def upgrade() -> None:
    op.create_table(
        "accounts",
        _id(),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("nickname", sa.String(20), nullable=True, unique=True),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column("birthday", sa.Date, nullable=True),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column("introduce", sa.Text, nullable=True),
        sa.Column("social_type", sa.String(10), nullable=False),
        sa.Column("profile_image", sa.String(2000), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fcm_token", sa.String(500), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="ROLE_USER"),
        sa.Column("status", sa.String(20), nullable=False, server_default="NORMAL"),
        *_timestamps(),
    )
    op.create_table(
        "refresh_tokens",
        _id(),
        _fk("account_id", "accounts", unique=True),
        sa.Column("token", sa.String(1000), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("icon", sa.String(2000), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "sub_categories",
        _id(),
        _fk("category_id", "categories", index=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "account_categories",
        _id(),
        _fk("account_id", "accounts", index=True),
        _fk("sub_category_id", "sub_categories"),
        sa.UniqueConstraint("account_id", "sub_category_id"),
    )

    op.create_table(
        "plubbings",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("goal", sa.String(255), nullable=False),
        sa.Column("main_image", sa.String(2000), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("visibility", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("days", sa.JSON, nullable=False),
        sa.Column("on_off", sa.String(5), nullable=False, server_default="OFF"),
        sa.Column("time", sa.String(10), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("road_address", sa.String(255), nullable=True),
        sa.Column("place_name", sa.String(255), nullable=True),
        sa.Column("place_position_x", sa.Float, nullable=True),
        sa.Column("place_position_y", sa.Float, nullable=True),
        sa.Column("max_accounts", sa.Integer, nullable=False),
        sa.Column("cur_account_num", sa.Integer, nullable=False, server_default="1"),
        sa.Column("views", sa.Integer, nullable=False, server_default="0"),
        sa.Column("introduce", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "account_plubbings",
        _id(),
        _fk("account_id", "accounts", index=True),
        _fk("plubbing_id", "plubbings", index=True),
        sa.Column("is_host", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(10), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "plubbing_id"),
    )
    op.create_table(
        "plubbing_sub_categories",
        _id(),
        _fk("plubbing_id", "plubbings", index=True),
        _fk("sub_category_id", "sub_categories", index=True),
        sa.UniqueConstraint("plubbing_id", "sub_category_id"),
    )

    op.create_table(
        "recruits",
        _id(),
        _fk("plubbing_id", "plubbings", unique=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("introduce", sa.Text, nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="RUNNING"),
        sa.Column("views", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "recruit_questions",
        _id(),
        _fk("recruit_id", "recruits", index=True),
        sa.Column("question", sa.String(500), nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_table(
        "applied_accounts",
        _id(),
        _fk("account_id", "accounts", index=True),
        _fk("recruit_id", "recruits", index=True),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="WAITING"),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "recruit_id"),
    )
    op.create_table(
        "bookmarks",
        _id(),
        _fk("account_id", "accounts", index=True),
        _fk("recruit_id", "recruits"),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "recruit_id"),
    )

    op.create_table(
        "feeds",
        _id(),
        _fk("plubbing_id", "plubbings"),
        _fk("account_id", "accounts", index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("feed_type", sa.String(20), nullable=False, server_default="LINE"),
        sa.Column("view_type", sa.String(10), nullable=False, server_default="NORMAL"),
        sa.Column("feed_image", sa.String(2000), nullable=True),
        sa.Column("pin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("pin_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("visibility", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index(
        "ix_feeds_plubbing_pin_visibility", "feeds", ["plubbing_id", "pin", "visibility"],
    )
    op.create_table(
        "feed_comments",
        _id(),
        _fk("feed_id", "feeds", index=True),
        _fk("account_id", "accounts"),
        _fk("parent_id", "feed_comments", nullable=True),
        sa.Column("comment_group_id", sa.Integer, nullable=True, index=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("visibility", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "feed_likes",
        _id(),
        _fk("account_id", "accounts"),
        _fk("feed_id", "feeds", index=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "feed_id"),
    )

    op.create_table(
        "notices",
        _id(),
        _fk("plubbing_id", "plubbings", index=True),
        _fk("account_id", "accounts"),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("visibility", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "notice_comments",
        _id(),
        _fk("notice_id", "notices", index=True),
        _fk("account_id", "accounts"),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("visibility", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "notice_likes",
        _id(),
        _fk("account_id", "accounts"),
        _fk("notice_id", "notices", index=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "notice_id"),
    )

    op.create_table(
        "todo_timelines",
        _id(),
        _fk("account_id", "accounts", index=True),
        _fk("plubbing_id", "plubbings", index=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "plubbing_id", "date"),
    )
    op.create_table(
        "todos",
        _id(),
        _fk("timeline_id", "todo_timelines", index=True),
        _fk("account_id", "accounts"),
        _fk("plubbing_id", "plubbings"),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("checked", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("proof", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("proof_image", sa.String(2000), nullable=True),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "todo_likes",
        _id(),
        _fk("account_id", "accounts"),
        _fk("timeline_id", "todo_timelines", index=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", "timeline_id"),
    )

    op.create_table(
        "reports",
        _id(),
        _fk("reporter_id", "accounts"),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.Integer, nullable=False),
        sa.Column("report_type", sa.String(30), nullable=False),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("plubbing_id", sa.Integer, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("reporter_id", "target_type", "target_id"),
    )


def downgrade() -> None:
    for table in (
        "reports", "todo_likes", "todos", "todo_timelines",
        "notice_likes", "notice_comments", "notices",
        "feed_likes", "feed_comments", "feeds",
        "bookmarks", "applied_accounts", "recruit_questions", "recruits",
        "plubbing_sub_categories", "account_plubbings", "plubbings",
        "account_categories", "sub_categories", "categories",
        "refresh_tokens", "accounts",
    ):
        op.drop_table(table)
