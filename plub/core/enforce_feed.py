"""Feed Rules - pure checks shared by feed, comment and notice services.

Invariants:
    - SYSTEM feeds can never be edited or deleted, whoever asks
    - Deleted (invisible) feeds and comments reject every mutation
    - A group holds at most `limit` pinned feeds at once
"""

from plub.core.domain_types import ViewType
from plub.core.errors import ErrorKind, PlubError


def check_feed_visible(visibility: bool) -> None:
    if not visibility:
        raise PlubError(ErrorKind.DELETED_STATUS_FEED)


def check_comment_visible(visibility: bool) -> None:
    if not visibility:
        raise PlubError(ErrorKind.DELETED_STATUS_COMMENT)


def check_not_system(view_type: ViewType | str) -> None:
    if ViewType(view_type) is ViewType.SYSTEM:
        raise PlubError(ErrorKind.CANNOT_DELETE_FEED)


def check_pin_capacity(pinned_count: int, limit: int) -> None:
    """Reject pinning when `limit` feeds of the group are already pinned."""
    if pinned_count >= limit:
        raise PlubError(ErrorKind.MAX_FEED_PIN)


def check_author(author_id: int, caller_id: int) -> None:
    if author_id != caller_id:
        raise PlubError(ErrorKind.NOT_FEED_AUTHOR_ERROR)


def check_comment_deleter(
    comment_author_id: int, feed_author_id: int, caller_id: int,
) -> None:
    """Comment author or the author of the feed it sits on."""
    if caller_id not in (comment_author_id, feed_author_id):
        raise PlubError(ErrorKind.NOT_FEED_AUTHOR_ERROR)
