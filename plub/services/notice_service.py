"""Notice Service - host announcements with flat comments and likes.

Invariants:
    - Only the host posts notices; only the notice author edits or deletes one
    - Notices and comments are soft deleted; hidden rows read as DELETED_STATUS_*
    - A comment is deleted by its author or by the notice author
    - comment_count tracks visible comments
"""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import ReportTarget
from plub.core.errors import ErrorKind, PlubError
from plub.core.pagination import Page, slice_page
from plub.models.account import Account
from plub.models.notice import Notice, NoticeComment, NoticeLike
from plub.schemas.feed import LikeResponse
from plub.schemas.notice import (
    NoticeCommentRequest, NoticeCommentResponse, NoticeRequest, NoticeResponse,
)
from plub.schemas.report import ReportBody, ReportResponse
from plub.services.likes import toggle_like
from plub.services.membership import MembershipGuard
from plub.services.report_service import ReportService

logger = logging.getLogger(__name__)

DEFAULT_NOTICE_PAGE_SIZE = 20


class NoticeService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.guard = MembershipGuard(db)

    async def _get_notice(self, plubbing_id: int, notice_id: int) -> Notice:
        notice = await self.db.get(Notice, notice_id)
        if notice is None or notice.plubbing_id != plubbing_id:
            raise PlubError(ErrorKind.NOT_FOUND_NOTICE)
        if not notice.visibility:
            raise PlubError(ErrorKind.DELETED_STATUS_NOTICE)
        return notice

    async def _get_comment(self, notice: Notice, comment_id: int) -> NoticeComment:
        comment = await self.db.get(NoticeComment, comment_id)
        if comment is None or comment.notice_id != notice.id:
            raise PlubError(ErrorKind.NOT_FOUND_NOTICE_COMMENT)
        if not comment.visibility:
            raise PlubError(ErrorKind.DELETED_STATUS_NOTICE_COMMENT)
        return comment

    async def _response(
        self, notice: Notice, viewer: Account, is_host: bool,
    ) -> NoticeResponse:
        author = await self.db.get(Account, notice.account_id)
        liked = await self.db.execute(
            select(NoticeLike.id)
            .where(NoticeLike.account_id == viewer.id)
            .where(NoticeLike.notice_id == notice.id)
        )
        return NoticeResponse(
            notice_id=notice.id,
            title=notice.title,
            content=notice.content,
            created_at=notice.created_at,
            account_id=notice.account_id,
            nickname=author.nickname if author else None,
            like_count=notice.like_count,
            comment_count=notice.comment_count,
            is_host=is_host,
            is_liked=liked.first() is not None,
        )

    async def create(self, account: Account, plubbing_id: int, request: NoticeRequest) -> int:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)
        notice = Notice(
            plubbing_id=plubbing.id,
            account_id=account.id,
            title=request.title,
            content=request.content,
            visibility=True,
            like_count=0,
            comment_count=0,
        )
        self.db.add(notice)
        await self.db.commit()
        logger.info(
            "Notice created",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )
        return notice.id

    async def list_notices(
        self, account: Account, plubbing_id: int, page: int, size: int,
    ) -> Page[NoticeResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        is_host = await self.guard.is_host(account, plubbing)

        conditions = [Notice.plubbing_id == plubbing.id, Notice.visibility.is_(True)]
        total = await self.db.scalar(select(func.count(Notice.id)).where(*conditions))
        result = await self.db.execute(
            select(Notice).where(*conditions)
            .order_by(Notice.id.desc())
            .offset(page * size).limit(size + 1)
        )
        responses = [
            await self._response(notice, account, is_host)
            for notice in result.scalars().all()
        ]
        return slice_page(responses, size, total or 0)

    async def get(self, account: Account, plubbing_id: int, notice_id: int) -> NoticeResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        notice = await self._get_notice(plubbing.id, notice_id)
        return await self._response(notice, account, await self.guard.is_host(account, plubbing))

    async def update(
        self, account: Account, plubbing_id: int, notice_id: int, request: NoticeRequest,
    ) -> NoticeResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        notice = await self._get_notice(plubbing.id, notice_id)
        if notice.account_id != account.id:
            raise PlubError(ErrorKind.NOT_NOTICE_AUTHOR)
        notice.title = request.title
        notice.content = request.content
        await self.db.commit()
        return await self._response(notice, account, await self.guard.is_host(account, plubbing))

    async def delete(self, account: Account, plubbing_id: int, notice_id: int) -> None:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        notice = await self._get_notice(plubbing.id, notice_id)
        if notice.account_id != account.id:
            raise PlubError(ErrorKind.NOT_NOTICE_AUTHOR)
        notice.visibility = False
        await self.db.execute(
            delete(NoticeLike).where(NoticeLike.notice_id == notice.id),
        )
        await self.db.commit()
        logger.info(
            "Notice soft-deleted",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )

    async def like(self, account: Account, plubbing_id: int, notice_id: int) -> LikeResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        notice = await self._get_notice(plubbing.id, notice_id)
        liked, like_count = await toggle_like(
            self.db, NoticeLike, Notice, "notice_id", account.id, notice.id,
        )
        await self.db.commit()
        return LikeResponse(target_id=notice.id, is_liked=liked, like_count=like_count)

    # --- Comments -------------------------------------------------------

    async def list_comments(
        self, account: Account, plubbing_id: int, notice_id: int, page: int, size: int,
    ) -> Page[NoticeCommentResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        notice = await self._get_notice(plubbing.id, notice_id)

        conditions = [
            NoticeComment.notice_id == notice.id, NoticeComment.visibility.is_(True),
        ]
        total = await self.db.scalar(select(func.count(NoticeComment.id)).where(*conditions))
        result = await self.db.execute(
            select(NoticeComment, Account.nickname, Account.profile_image)
            .join(Account, Account.id == NoticeComment.account_id)
            .where(*conditions)
            .order_by(NoticeComment.id.asc())
            .offset(page * size).limit(size + 1)
        )
        responses = [
            NoticeCommentResponse(
                comment_id=comment.id,
                content=comment.content,
                created_at=comment.created_at,
                account_id=comment.account_id,
                nickname=nickname,
                profile_image=profile_image,
                is_comment_author=comment.account_id == account.id,
                is_notice_author=notice.account_id == account.id,
            )
            for comment, nickname, profile_image in result.all()
        ]
        return slice_page(responses, size, total or 0)

    async def create_comment(
        self, account: Account, plubbing_id: int, notice_id: int,
        request: NoticeCommentRequest,
    ) -> NoticeCommentResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        notice = await self._get_notice(plubbing.id, notice_id)

        comment = NoticeComment(
            notice_id=notice.id, account_id=account.id,
            content=request.content, visibility=True,
        )
        self.db.add(comment)
        await self.db.execute(
            update(Notice)
            .where(Notice.id == notice.id)
            .values(comment_count=Notice.comment_count + 1)
        )
        await self.db.commit()
        return NoticeCommentResponse(
            comment_id=comment.id,
            content=comment.content,
            created_at=comment.created_at,
            account_id=account.id,
            nickname=account.nickname,
            profile_image=account.profile_image,
            is_comment_author=True,
            is_notice_author=notice.account_id == account.id,
        )

    async def update_comment(
        self, account: Account, plubbing_id: int, notice_id: int, comment_id: int,
        request: NoticeCommentRequest,
    ) -> NoticeCommentResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        notice = await self._get_notice(plubbing.id, notice_id)
        comment = await self._get_comment(notice, comment_id)
        if comment.account_id != account.id:
            raise PlubError(ErrorKind.NOT_NOTICE_AUTHOR)
        comment.content = request.content
        await self.db.commit()
        return NoticeCommentResponse(
            comment_id=comment.id,
            content=comment.content,
            created_at=comment.created_at,
            account_id=account.id,
            nickname=account.nickname,
            profile_image=account.profile_image,
            is_comment_author=True,
            is_notice_author=notice.account_id == account.id,
        )

    async def delete_comment(
        self, account: Account, plubbing_id: int, notice_id: int, comment_id: int,
    ) -> None:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        notice = await self._get_notice(plubbing.id, notice_id)
        comment = await self._get_comment(notice, comment_id)
        if account.id not in (comment.account_id, notice.account_id):
            raise PlubError(ErrorKind.NOT_NOTICE_AUTHOR)
        comment.visibility = False
        await self.db.execute(
            update(Notice)
            .where(Notice.id == notice.id)
            .values(comment_count=Notice.comment_count - 1)
        )
        await self.db.commit()
        logger.info(
            "Notice comment soft-deleted",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )

    async def report_comment(
        self, account: Account, plubbing_id: int, notice_id: int, comment_id: int,
        body: ReportBody,
    ) -> ReportResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        notice = await self._get_notice(plubbing.id, notice_id)
        comment = await self._get_comment(notice, comment_id)
        return await ReportService(self.db).create(
            account, ReportTarget.NOTICE_COMMENT, comment.id, body.report_type, body.reason,
        )
