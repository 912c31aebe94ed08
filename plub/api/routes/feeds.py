"""Feed Routes - group board posts, pins, likes and threaded comments."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account, get_dispatcher, get_page_size
from plub.config import get_settings
from plub.core.notification import PushDispatcher
from plub.infrastructure.database import get_db
from plub.models.account import Account
from plub.schemas.common import PageResponse, success
from plub.schemas.feed import (
    CommentRequest, CommentUpdateRequest, DeletedCountResponse, FeedIdResponse,
    FeedRequest,
)
from plub.schemas.report import ReportBody
from plub.services.feed_service import FeedService

router = APIRouter(prefix="/api/plubbings/{plubbing_id}/feeds", tags=["feeds"])


def get_feed_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
) -> FeedService:
    return FeedService(db, dispatcher, get_settings().max_pinned_feeds)


@router.post("")
async def create_feed(
    plubbing_id: int,
    body: FeedRequest,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    feed_id = await feeds.create_feed(account, plubbing_id, body)
    return success(FeedIdResponse(feed_id=feed_id))


@router.get("")
async def list_feeds(
    plubbing_id: int,
    size: int = Depends(get_page_size),
    cursor_id: int | None = Query(None, alias="cursorId"),
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    page = await feeds.list_feeds(account, plubbing_id, size, cursor_id)
    return success(PageResponse.of(page))


@router.get("/pins")
async def list_pinned(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success({"feeds": await feeds.list_pinned(account, plubbing_id)})


@router.get("/my")
async def list_my_feeds(
    plubbing_id: int,
    size: int = Depends(get_page_size),
    cursor_id: int | None = Query(None, alias="cursorId"),
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    page = await feeds.list_my_feeds(account, plubbing_id, size, cursor_id)
    return success(PageResponse.of(page))


@router.get("/{feed_id}")
async def get_feed(
    plubbing_id: int,
    feed_id: int,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(await feeds.get_feed(account, plubbing_id, feed_id))


@router.put("/{feed_id}")
async def update_feed(
    plubbing_id: int,
    feed_id: int,
    body: FeedRequest,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(await feeds.update_feed(account, plubbing_id, feed_id, body))


@router.delete("/{feed_id}")
async def delete_feed(
    plubbing_id: int,
    feed_id: int,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    await feeds.delete_feed(account, plubbing_id, feed_id)
    return success(FeedIdResponse(feed_id=feed_id))


@router.put("/{feed_id}/pin")
async def pin_feed(
    plubbing_id: int,
    feed_id: int,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(await feeds.pin_feed(account, plubbing_id, feed_id))


@router.put("/{feed_id}/like")
async def like_feed(
    plubbing_id: int,
    feed_id: int,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(await feeds.like_feed(account, plubbing_id, feed_id))


@router.get("/{feed_id}/comments")
async def list_comments(
    plubbing_id: int,
    feed_id: int,
    size: int = Depends(get_page_size),
    cursor_id: int | None = Query(None, alias="cursorId"),
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    page = await feeds.list_comments(account, plubbing_id, feed_id, size, cursor_id)
    return success(PageResponse.of(page))


@router.post("/{feed_id}/comments")
async def create_comment(
    plubbing_id: int,
    feed_id: int,
    body: CommentRequest,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(await feeds.create_comment(account, plubbing_id, feed_id, body))


@router.put("/{feed_id}/comments/{comment_id}")
async def update_comment(
    plubbing_id: int,
    feed_id: int,
    comment_id: int,
    body: CommentUpdateRequest,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(
        await feeds.update_comment(account, plubbing_id, feed_id, comment_id, body),
    )


@router.delete("/{feed_id}/comments/{comment_id}")
async def delete_comment(
    plubbing_id: int,
    feed_id: int,
    comment_id: int,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    count = await feeds.delete_comment(account, plubbing_id, feed_id, comment_id)
    return success(DeletedCountResponse(deleted_count=count))


@router.post("/{feed_id}/comments/{comment_id}/report")
async def report_comment(
    plubbing_id: int,
    feed_id: int,
    comment_id: int,
    body: ReportBody,
    account: Account = Depends(get_current_account),
    feeds: FeedService = Depends(get_feed_service),
):
    return success(
        await feeds.report_comment(account, plubbing_id, feed_id, comment_id, body),
    )
