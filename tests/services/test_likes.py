"""Like Toggle - a like row inserted by a concurrent request between the
delete and the insert surfaces as DUPLICATE_REQUEST and leaves counters alone.

The race is reproduced by making the delete step match nothing while a like
row already exists, so the insert hits the (account, target) unique constraint.
"""

import pytest
from sqlalchemy import delete, func, select

import plub.services.likes as likes_module
from plub.core.errors import ErrorKind, PlubError
from plub.models.feed import Feed, FeedLike
from plub.models.todo import TodoLike, TodoTimeline
from plub.schemas.feed import FeedRequest
from plub.schemas.todo import TodoRequest
from plub.services.feed_service import FeedService
from plub.services.todo_service import TodoService


@pytest.fixture
def lost_delete(monkeypatch):
    """Delete step that never sees the existing like row."""
    monkeypatch.setattr(
        likes_module, "delete", lambda model: delete(model).where(model.id == 0),
    )


async def test_concurrent_feed_like_is_duplicate_request(
    test_db, plubbing, host, member, lost_delete,
):
    plubbing_id, member_id = plubbing.id, member.id
    service = FeedService(test_db)
    feed_id = await service.create_feed(
        host, plubbing_id, FeedRequest(title="Sunday run", content="5k"),
    )
    await service.like_feed(member, plubbing_id, feed_id)

    with pytest.raises(PlubError) as exc:
        await service.like_feed(member, plubbing_id, feed_id)
    assert exc.value.kind is ErrorKind.DUPLICATE_REQUEST

    assert await test_db.scalar(select(Feed.like_count).where(Feed.id == feed_id)) == 1
    likes = await test_db.scalar(
        select(func.count(FeedLike.id))
        .where(FeedLike.feed_id == feed_id)
        .where(FeedLike.account_id == member_id)
    )
    assert likes == 1


async def test_concurrent_timeline_like_is_duplicate_request(
    test_db, plubbing, host, member, today, lost_delete,
):
    plubbing_id = plubbing.id
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing_id, TodoRequest(content="run", date=today))
    timeline_id = (await service.get_todo(member, plubbing_id, todo_id)).timeline_id
    await service.like_timeline(host, plubbing_id, timeline_id)

    with pytest.raises(PlubError) as exc:
        await service.like_timeline(host, plubbing_id, timeline_id)
    assert exc.value.kind is ErrorKind.DUPLICATE_REQUEST

    count = await test_db.scalar(
        select(TodoTimeline.like_count).where(TodoTimeline.id == timeline_id),
    )
    assert count == 1
    likes = await test_db.scalar(
        select(func.count(TodoLike.id)).where(TodoLike.timeline_id == timeline_id),
    )
    assert likes == 1


async def test_first_like_still_inserts(test_db, plubbing, host, member, lost_delete):
    service = FeedService(test_db)
    feed_id = await service.create_feed(
        host, plubbing.id, FeedRequest(title="Sunday run", content="5k"),
    )
    liked = await service.like_feed(member, plubbing.id, feed_id)
    assert (liked.is_liked, liked.like_count) == (True, 1)
