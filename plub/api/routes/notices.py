"""Notice Routes - host announcements, likes and comments."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account
from plub.core.pagination import clamp_size
from plub.infrastructure.database import get_db
from plub.models.account import Account
from plub.schemas.common import PageResponse, success
from plub.schemas.notice import NoticeCommentRequest, NoticeIdResponse, NoticeRequest
from plub.schemas.report import ReportBody
from plub.services.notice_service import DEFAULT_NOTICE_PAGE_SIZE, NoticeService

router = APIRouter(prefix="/api/plubbings/{plubbing_id}/notices", tags=["notices"])


def get_notice_page_size(size: int | None = Query(None, ge=1)) -> int:
    return clamp_size(size, DEFAULT_NOTICE_PAGE_SIZE)


@router.post("")
async def create_notice(
    plubbing_id: int,
    body: NoticeRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    notice_id = await NoticeService(db).create(account, plubbing_id, body)
    return success(NoticeIdResponse(notice_id=notice_id))


@router.get("")
async def list_notices(
    plubbing_id: int,
    page: int = Query(0, ge=0),
    size: int = Depends(get_notice_page_size),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    result = await NoticeService(db).list_notices(account, plubbing_id, page, size)
    return success(PageResponse.of(result))


@router.get("/{notice_id}")
async def get_notice(
    plubbing_id: int,
    notice_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await NoticeService(db).get(account, plubbing_id, notice_id))


@router.put("/{notice_id}")
async def update_notice(
    plubbing_id: int,
    notice_id: int,
    body: NoticeRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await NoticeService(db).update(account, plubbing_id, notice_id, body))


@router.delete("/{notice_id}")
async def delete_notice(
    plubbing_id: int,
    notice_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    await NoticeService(db).delete(account, plubbing_id, notice_id)
    return success(NoticeIdResponse(notice_id=notice_id))


@router.put("/{notice_id}/like")
async def like_notice(
    plubbing_id: int,
    notice_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await NoticeService(db).like(account, plubbing_id, notice_id))


@router.get("/{notice_id}/comments")
async def list_comments(
    plubbing_id: int,
    notice_id: int,
    page: int = Query(0, ge=0),
    size: int = Depends(get_notice_page_size),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    result = await NoticeService(db).list_comments(account, plubbing_id, notice_id, page, size)
    return success(PageResponse.of(result))


@router.post("/{notice_id}/comments")
async def create_comment(
    plubbing_id: int,
    notice_id: int,
    body: NoticeCommentRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(
        await NoticeService(db).create_comment(account, plubbing_id, notice_id, body),
    )


@router.put("/{notice_id}/comments/{comment_id}")
async def update_comment(
    plubbing_id: int,
    notice_id: int,
    comment_id: int,
    body: NoticeCommentRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await NoticeService(db).update_comment(
        account, plubbing_id, notice_id, comment_id, body,
    ))


@router.delete("/{notice_id}/comments/{comment_id}")
async def delete_comment(
    plubbing_id: int,
    notice_id: int,
    comment_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    await NoticeService(db).delete_comment(account, plubbing_id, notice_id, comment_id)
    return success({"commentId": comment_id})


@router.post("/{notice_id}/comments/{comment_id}/report")
async def report_comment(
    plubbing_id: int,
    notice_id: int,
    comment_id: int,
    body: ReportBody,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await NoticeService(db).report_comment(
        account, plubbing_id, notice_id, comment_id, body,
    ))
