"""ORM Models - SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Entities reference each other by FK columns only; no relationship() collections

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so Base.metadata is complete before create_all
      and Alembic autogenerate run
"""

from plub.models.account import Account, AccountCategory, RefreshToken  # noqa: F401
from plub.models.category import Category, SubCategory, PlubbingSubCategory  # noqa: F401
from plub.models.plubbing import Plubbing, AccountPlubbing  # noqa: F401
from plub.models.recruit import (  # noqa: F401
    Recruit, RecruitQuestion, AppliedAccount, Bookmark,
)
from plub.models.feed import Feed, FeedComment, FeedLike  # noqa: F401
from plub.models.notice import Notice, NoticeComment, NoticeLike  # noqa: F401
from plub.models.todo import TodoTimeline, Todo, TodoLike  # noqa: F401
from plub.models.report import Report  # noqa: F401
