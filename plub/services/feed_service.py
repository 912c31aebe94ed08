"""Feed Service - group board posts, pins, likes and threaded comments.

Invariants:
    - Every read and write is scoped to one plubbing; a feed of another plubbing is NOT_FOUND_FEED
    - SYSTEM feeds reject update and delete from anyone (CANNOT_DELETE_FEED)
    - Pin is a host-only toggle; at most max_pinned_feeds visible feeds pinned per plubbing
    - A comment's comment_group_id is its parent's group id, else its own id
    - Deleting a comment soft-deletes it and every visible descendant;
      comment_count drops by exactly the number of comments hidden
    - Comment order: newest thread first, then by id inside a thread

Design Decisions:
    - Feed lists use keyset pagination on id (newest first); totals counted per plubbing
    - Descendants collected iteratively (core.comment_tree) from one query over the
      feed's comments, then hidden with one UPDATE
    - The feed author is notified of new comments, except on their own comment
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.comment_tree import collect_descendants, resolve_group_id
from plub.core.domain_types import FeedType, ReportTarget, ViewType
from plub.core.enforce_feed import (
    check_author, check_comment_deleter, check_comment_visible,
    check_feed_visible, check_not_system, check_pin_capacity,
)
from plub.core.errors import ErrorKind, PlubError
from plub.core.notification import NullDispatcher, PushDispatcher, comment_push
from plub.core.pagination import Page, has_cursor, slice_page
from plub.models.account import Account
from plub.models.feed import Feed, FeedComment, FeedLike
from plub.models.plubbing import Plubbing
from plub.schemas.feed import (
    CommentRequest, CommentResponse, CommentUpdateRequest, FeedCardResponse,
    FeedRequest, LikeResponse, PinResponse,
)
from plub.schemas.report import ReportBody, ReportResponse
from plub.services.likes import liked_ids, toggle_like
from plub.services.membership import MembershipGuard
from plub.services.report_service import ReportService

logger = logging.getLogger(__name__)

DEFAULT_MAX_PINNED_FEEDS = 20


def _feed_rows():
    return (
        select(Feed, Account.nickname, Account.profile_image)
        .join(Account, Account.id == Feed.account_id)
    )


def _comment_rows():
    return (
        select(FeedComment, Account.nickname, Account.profile_image)
        .join(Account, Account.id == FeedComment.account_id)
    )


class FeedService:

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: PushDispatcher | None = None,
        max_pinned_feeds: int = DEFAULT_MAX_PINNED_FEEDS,
    ):
        self.db = db
        self.guard = MembershipGuard(db)
        self.dispatcher = dispatcher or NullDispatcher()
        self.max_pinned_feeds = max_pinned_feeds

    # --- Lookups --------------------------------------------------------

    async def _get_feed(self, plubbing_id: int, feed_id: int) -> Feed:
        feed = await self.db.get(Feed, feed_id)
        if feed is None or feed.plubbing_id != plubbing_id:
            raise PlubError(ErrorKind.NOT_FOUND_FEED)
        return feed

    async def _get_comment(self, feed: Feed, comment_id: int) -> FeedComment:
        comment = await self.db.get(FeedComment, comment_id)
        if comment is None or comment.feed_id != feed.id:
            raise PlubError(ErrorKind.NOT_FOUND_COMMENT)
        return comment

    async def _cards(
        self, rows, viewer: Account, is_host: bool,
    ) -> list[FeedCardResponse]:
        rows = list(rows)
        liked = await liked_ids(
            self.db, FeedLike, "feed_id", viewer.id, [feed.id for feed, _, _ in rows],
        )
        return [
            FeedCardResponse(
                feed_id=feed.id,
                feed_type=feed.feed_type,
                view_type=feed.view_type,
                title=feed.title,
                content=feed.content,
                feed_image=feed.feed_image,
                created_at=feed.created_at,
                pin=feed.pin,
                pin_at=feed.pin_at,
                account_id=feed.account_id,
                nickname=nickname,
                profile_image=profile_image,
                like_count=feed.like_count,
                comment_count=feed.comment_count,
                is_author=feed.account_id == viewer.id,
                is_host=is_host,
                is_liked=feed.id in liked,
            )
            for feed, nickname, profile_image in rows
        ]

    async def _card(self, feed: Feed, viewer: Account) -> FeedCardResponse:
        result = await self.db.execute(_feed_rows().where(Feed.id == feed.id))
        plubbing = await self.db.get(Plubbing, feed.plubbing_id)
        is_host = await self.guard.is_host(viewer, plubbing)
        return (await self._cards(result.all(), viewer, is_host))[0]

    # --- Feeds ----------------------------------------------------------

    async def create_feed(
        self, account: Account, plubbing_id: int, request: FeedRequest,
    ) -> int:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        feed = Feed(
            plubbing_id=plubbing.id,
            account_id=account.id,
            title=request.title,
            content=request.content,
            feed_type=request.feed_type.value,
            feed_image=request.feed_image,
            view_type=ViewType.NORMAL.value,
            pin=False,
            visibility=True,
        )
        self.db.add(feed)
        await self.db.commit()
        logger.info(
            "Feed created",
            extra={"account_id": account.id, "plubbing_id": plubbing.id, "feed_id": feed.id},
        )
        return feed.id

    async def create_system_feed(
        self, plubbing: Plubbing, member: Account, member_number: int,
    ) -> Feed:
        """Announce a new member. Caller commits."""
        feed = Feed(
            plubbing_id=plubbing.id,
            account_id=member.id,
            title=f"Member #{member_number} has joined",
            content=f"<b>{member.nickname}</b> joined <b>{plubbing.name}</b>",
            feed_type=FeedType.LINE.value,
            view_type=ViewType.SYSTEM.value,
            pin=False,
            visibility=True,
        )
        self.db.add(feed)
        await self.db.flush()
        return feed

    async def list_feeds(
        self, account: Account, plubbing_id: int, size: int, cursor_id: int | None = None,
    ) -> Page[FeedCardResponse]:
        """Visible, unpinned feeds of the plubbing, newest first."""
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        is_host = await self.guard.is_host(account, plubbing)

        conditions = [
            Feed.plubbing_id == plubbing.id,
            Feed.pin.is_(False),
            Feed.visibility.is_(True),
        ]
        total = await self.db.scalar(select(func.count(Feed.id)).where(*conditions))
        query = _feed_rows().where(*conditions)
        if has_cursor(cursor_id):
            query = query.where(Feed.id < cursor_id)
        result = await self.db.execute(query.order_by(Feed.id.desc()).limit(size + 1))
        cards = await self._cards(result.all(), account, is_host)
        return slice_page(cards, size, total or 0)

    async def list_pinned(self, account: Account, plubbing_id: int) -> list[FeedCardResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        is_host = await self.guard.is_host(account, plubbing)
        result = await self.db.execute(
            _feed_rows()
            .where(Feed.plubbing_id == plubbing.id)
            .where(Feed.pin.is_(True))
            .where(Feed.visibility.is_(True))
            .order_by(Feed.pin_at.desc(), Feed.id.desc())
        )
        return await self._cards(result.all(), account, is_host)

    async def list_my_feeds(
        self, account: Account, plubbing_id: int, size: int, cursor_id: int | None = None,
    ) -> Page[FeedCardResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        is_host = await self.guard.is_host(account, plubbing)

        conditions = [
            Feed.plubbing_id == plubbing.id,
            Feed.account_id == account.id,
            Feed.visibility.is_(True),
        ]
        total = await self.db.scalar(select(func.count(Feed.id)).where(*conditions))
        query = _feed_rows().where(*conditions)
        if has_cursor(cursor_id):
            query = query.where(Feed.id < cursor_id)
        result = await self.db.execute(query.order_by(Feed.id.desc()).limit(size + 1))
        cards = await self._cards(result.all(), account, is_host)
        return slice_page(cards, size, total or 0)

    async def get_feed(
        self, account: Account, plubbing_id: int, feed_id: int,
    ) -> FeedCardResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        await self.guard.check_member(account, plubbing)
        return await self._card(feed, account)

    async def update_feed(
        self, account: Account, plubbing_id: int, feed_id: int, request: FeedRequest,
    ) -> FeedCardResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        check_not_system(feed.view_type)
        check_author(feed.account_id, account.id)

        feed.title = request.title
        feed.content = request.content
        feed.feed_type = request.feed_type.value
        feed.feed_image = request.feed_image
        await self.db.commit()
        logger.info(
            "Feed updated",
            extra={"account_id": account.id, "plubbing_id": plubbing.id, "feed_id": feed.id},
        )
        return await self._card(feed, account)

    async def delete_feed(self, account: Account, plubbing_id: int, feed_id: int) -> None:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        check_not_system(feed.view_type)
        check_author(feed.account_id, account.id)

        feed.visibility = False
        feed.pin = False
        await self.db.commit()
        logger.info(
            "Feed soft-deleted",
            extra={"account_id": account.id, "plubbing_id": plubbing.id, "feed_id": feed.id},
        )

    async def pin_feed(self, account: Account, plubbing_id: int, feed_id: int) -> PinResponse:
        """Host-only toggle: pins an unpinned feed, unpins a pinned one."""
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        await self.guard.check_host(account, plubbing)

        if feed.pin:
            feed.pin = False
            feed.pin_at = None
        else:
            pinned = await self.db.scalar(
                select(func.count(Feed.id))
                .where(Feed.plubbing_id == plubbing.id)
                .where(Feed.pin.is_(True))
                .where(Feed.visibility.is_(True))
            )
            check_pin_capacity(pinned or 0, self.max_pinned_feeds)
            feed.pin = True
            feed.pin_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"Feed pin -> {feed.pin}",
            extra={"account_id": account.id, "plubbing_id": plubbing.id, "feed_id": feed.id},
        )
        return PinResponse(feed_id=feed.id, pin=feed.pin)

    async def like_feed(self, account: Account, plubbing_id: int, feed_id: int) -> LikeResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        await self.guard.check_member(account, plubbing)

        liked, like_count = await toggle_like(
            self.db, FeedLike, Feed, "feed_id", account.id, feed.id,
        )
        await self.db.commit()
        return LikeResponse(target_id=feed.id, is_liked=liked, like_count=like_count)

    # --- Comments -------------------------------------------------------

    def _comment_response(
        self, comment: FeedComment, nickname: str | None, profile_image: str | None,
        viewer: Account, feed: Feed,
    ) -> CommentResponse:
        return CommentResponse(
            comment_id=comment.id,
            content=comment.content,
            parent_comment_id=comment.parent_id,
            comment_group_id=comment.comment_group_id,
            created_at=comment.created_at,
            account_id=comment.account_id,
            nickname=nickname,
            profile_image=profile_image,
            is_comment_author=comment.account_id == viewer.id,
            is_feed_author=feed.account_id == viewer.id,
        )

    async def list_comments(
        self, account: Account, plubbing_id: int, feed_id: int,
        size: int, cursor_id: int | None = None,
    ) -> Page[CommentResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        await self.guard.check_member(account, plubbing)

        conditions = [FeedComment.feed_id == feed.id, FeedComment.visibility.is_(True)]
        total = await self.db.scalar(
            select(func.count(FeedComment.id)).where(*conditions),
        )
        query = _comment_rows().where(*conditions)
        if has_cursor(cursor_id):
            cursor = await self._get_comment(feed, cursor_id)
            query = query.where(or_(
                FeedComment.comment_group_id < cursor.comment_group_id,
                and_(
                    FeedComment.comment_group_id == cursor.comment_group_id,
                    FeedComment.id > cursor.id,
                ),
            ))
        result = await self.db.execute(
            query.order_by(FeedComment.comment_group_id.desc(), FeedComment.id.asc())
            .limit(size + 1)
        )
        responses = [
            self._comment_response(comment, nickname, image, account, feed)
            for comment, nickname, image in result.all()
        ]
        return slice_page(responses, size, total or 0)

    async def create_comment(
        self, account: Account, plubbing_id: int, feed_id: int, request: CommentRequest,
    ) -> CommentResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        await self.guard.check_member(account, plubbing)

        parent: FeedComment | None = None
        if request.parent_comment_id is not None:
            parent = await self.db.get(FeedComment, request.parent_comment_id)
            if parent is None:
                raise PlubError(ErrorKind.NOT_FOUND_COMMENT)
            if parent.feed_id != feed.id:
                raise PlubError(ErrorKind.NOT_FOUND_FEED)
            check_comment_visible(parent.visibility)

        comment = FeedComment(
            feed_id=feed.id,
            account_id=account.id,
            parent_id=parent.id if parent else None,
            content=request.content,
            visibility=True,
        )
        self.db.add(comment)
        await self.db.flush()
        comment.comment_group_id = resolve_group_id(
            parent.comment_group_id if parent else None, comment.id,
        )
        await self.db.execute(
            update(Feed)
            .where(Feed.id == feed.id)
            .values(comment_count=Feed.comment_count + 1)
        )
        await self.db.commit()
        logger.info(
            "Comment created",
            extra={"account_id": account.id, "plubbing_id": plubbing.id, "feed_id": feed.id},
        )

        if feed.account_id != account.id:
            author = await self.db.get(Account, feed.account_id)
            if author is not None:
                self.dispatcher.dispatch(comment_push(
                    feed_author_id=author.id,
                    feed_author_token=author.fcm_token,
                    plubbing_name=plubbing.name,
                    commenter_nickname=account.nickname or "",
                    feed_author_nickname=author.nickname or "",
                    content=comment.content,
                ))
        return self._comment_response(
            comment, account.nickname, account.profile_image, account, feed,
        )

    async def update_comment(
        self, account: Account, plubbing_id: int, feed_id: int, comment_id: int,
        request: CommentUpdateRequest,
    ) -> CommentResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        feed = await self._get_feed(plubbing.id, feed_id)
        check_feed_visible(feed.visibility)
        comment = await self._get_comment(feed, comment_id)
        check_comment_visible(comment.visibility)
        check_author(comment.account_id, account.id)

        comment.content = request.content
        await self.db.commit()
        return self._comment_response(
            comment, account.nickname, account.profile_image, account, feed,
        )

    async def delete_comment(
        self, account: Account, plubbing_id: int, feed_id: int, comment_id: int,
    ) -> int:
        """Soft-delete the comment and its visible descendants. Returns how many were hidden."""
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        comment = await self._get_comment(feed, comment_id)
        check_comment_visible(comment.visibility)
        check_comment_deleter(comment.account_id, feed.account_id, account.id)

        edges = await self.db.execute(
            select(FeedComment.id, FeedComment.parent_id)
            .where(FeedComment.feed_id == feed.id)
        )
        targets = [comment.id, *collect_descendants(comment.id, edges.all())]
        hidden = await self.db.execute(
            update(FeedComment)
            .where(FeedComment.id.in_(targets))
            .where(FeedComment.visibility.is_(True))
            .values(visibility=False)
            .execution_options(synchronize_session="evaluate")
        )
        count = hidden.rowcount
        await self.db.execute(
            update(Feed)
            .where(Feed.id == feed.id)
            .values(comment_count=Feed.comment_count - count)
        )
        await self.db.commit()
        logger.info(
            f"Comment thread soft-deleted ({count} comments)",
            extra={"account_id": account.id, "plubbing_id": plubbing.id, "feed_id": feed.id},
        )
        return count

    async def report_comment(
        self, account: Account, plubbing_id: int, feed_id: int, comment_id: int,
        body: ReportBody,
    ) -> ReportResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        feed = await self._get_feed(plubbing.id, feed_id)
        comment = await self._get_comment(feed, comment_id)
        check_comment_visible(comment.visibility)
        await self.guard.check_member(account, plubbing)
        return await ReportService(self.db, self.dispatcher).create(
            account, ReportTarget.FEED_COMMENT, comment.id, body.report_type, body.reason,
        )
