"""Feed Service - pins, system feeds, threaded comment deletion and likes.

Invariants:
    - The pin cap is counted per plubbing over visible pinned feeds
    - SYSTEM feeds reject update and delete
    - Deleting a comment hides it and every visible descendant, and the feed
      comment_count drops by the number hidden
"""

import pytest
from sqlalchemy import select, update

from plub.core.domain_types import MembershipStatus, ViewType
from plub.core.errors import ErrorKind, PlubError
from plub.models.feed import Feed, FeedComment
from plub.models.plubbing import AccountPlubbing
from plub.schemas.feed import CommentRequest, CommentUpdateRequest, FeedRequest
from plub.services.feed_service import FeedService


def _feed(title: str = "Sunday run") -> FeedRequest:
    return FeedRequest(title=title, content="5k along the river")


async def _comment_count(db, feed_id: int) -> int:
    return await db.scalar(select(Feed.comment_count).where(Feed.id == feed_id))


async def test_member_creates_feed(test_db, plubbing, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(member, plubbing.id, _feed())

    card = await service.get_feed(member, plubbing.id, feed_id)
    assert card.title == "Sunday run"
    assert card.is_author is True
    assert card.is_host is False


async def test_outsider_cannot_create_feed(test_db, plubbing, outsider):
    with pytest.raises(PlubError) as exc:
        await FeedService(test_db).create_feed(outsider, plubbing.id, _feed())
    assert exc.value.kind is ErrorKind.NOT_MEMBER


async def test_pin_cap_allows_limit_and_rejects_one_more(test_db, plubbing, host):
    service = FeedService(test_db, max_pinned_feeds=3)
    feed_ids = [
        await service.create_feed(host, plubbing.id, _feed(f"post {i}")) for i in range(4)
    ]
    for feed_id in feed_ids[:3]:
        assert (await service.pin_feed(host, plubbing.id, feed_id)).pin is True

    with pytest.raises(PlubError) as exc:
        await service.pin_feed(host, plubbing.id, feed_ids[3])
    assert exc.value.kind is ErrorKind.MAX_FEED_PIN


async def test_twentieth_pin_succeeds_twenty_first_fails(test_db, plubbing, host):
    service = FeedService(test_db)
    feed_ids = [
        await service.create_feed(host, plubbing.id, _feed(f"post {i}")) for i in range(21)
    ]
    for feed_id in feed_ids[:20]:
        await service.pin_feed(host, plubbing.id, feed_id)

    with pytest.raises(PlubError) as exc:
        await service.pin_feed(host, plubbing.id, feed_ids[20])
    assert exc.value.kind is ErrorKind.MAX_FEED_PIN


async def test_pin_is_a_toggle(test_db, plubbing, host):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())

    assert (await service.pin_feed(host, plubbing.id, feed_id)).pin is True
    assert (await service.pin_feed(host, plubbing.id, feed_id)).pin is False
    pinned = await service.list_pinned(host, plubbing.id)
    assert pinned == []


async def test_only_host_pins(test_db, plubbing, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(member, plubbing.id, _feed())
    with pytest.raises(PlubError) as exc:
        await service.pin_feed(member, plubbing.id, feed_id)
    assert exc.value.kind is ErrorKind.NOT_HOST


async def test_pinned_feeds_leave_the_main_list(test_db, plubbing, host):
    service = FeedService(test_db)
    kept = await service.create_feed(host, plubbing.id, _feed("kept"))
    pinned = await service.create_feed(host, plubbing.id, _feed("pinned"))
    await service.pin_feed(host, plubbing.id, pinned)

    page = await service.list_feeds(host, plubbing.id, size=10)
    assert [c.feed_id for c in page.content] == [kept]
    assert page.total_elements == 1


async def test_system_feed_cannot_be_changed(test_db, plubbing, member):
    service = FeedService(test_db)
    feed = await service.create_system_feed(plubbing, member, 2)
    await test_db.commit()
    assert feed.view_type == ViewType.SYSTEM.value

    with pytest.raises(PlubError) as exc:
        await service.update_feed(member, plubbing.id, feed.id, _feed())
    assert exc.value.kind is ErrorKind.CANNOT_DELETE_FEED
    with pytest.raises(PlubError) as exc:
        await service.delete_feed(member, plubbing.id, feed.id)
    assert exc.value.kind is ErrorKind.CANNOT_DELETE_FEED


async def test_only_author_updates_feed(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(member, plubbing.id, _feed())
    with pytest.raises(PlubError) as exc:
        await service.update_feed(host, plubbing.id, feed_id, _feed("taken over"))
    assert exc.value.kind is ErrorKind.NOT_FEED_AUTHOR_ERROR


async def test_deleted_feed_rejects_reads(test_db, plubbing, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(member, plubbing.id, _feed())
    await service.delete_feed(member, plubbing.id, feed_id)

    with pytest.raises(PlubError) as exc:
        await service.get_feed(member, plubbing.id, feed_id)
    assert exc.value.kind is ErrorKind.DELETED_STATUS_FEED


async def test_like_twice_restores_state(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())

    first = await service.like_feed(member, plubbing.id, feed_id)
    assert (first.is_liked, first.like_count) == (True, 1)
    second = await service.like_feed(member, plubbing.id, feed_id)
    assert (second.is_liked, second.like_count) == (False, 0)


async def test_reply_joins_root_thread(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())

    root = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="root"))
    reply = await service.create_comment(
        host, plubbing.id, feed_id,
        CommentRequest(content="reply", parent_comment_id=root.comment_id),
    )
    nested = await service.create_comment(
        member, plubbing.id, feed_id,
        CommentRequest(content="nested", parent_comment_id=reply.comment_id),
    )

    assert root.comment_group_id == root.comment_id
    assert reply.comment_group_id == root.comment_id
    assert nested.comment_group_id == root.comment_id
    assert await _comment_count(test_db, feed_id) == 3


async def test_comment_pushes_feed_author(test_db, plubbing, host, member, dispatcher):
    service = FeedService(test_db, dispatcher)
    feed_id = await service.create_feed(host, plubbing.id, _feed())

    await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="nice"))
    await service.create_comment(host, plubbing.id, feed_id, CommentRequest(content="thanks"))

    assert len(dispatcher.messages) == 1
    message = dispatcher.messages[0]
    assert message.account_id == host.id
    assert message.title == plubbing.name
    assert "member" in message.body


async def test_delete_comment_hides_whole_subtree(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())

    root = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="root"))
    child = await service.create_comment(
        host, plubbing.id, feed_id,
        CommentRequest(content="child", parent_comment_id=root.comment_id),
    )
    await service.create_comment(
        member, plubbing.id, feed_id,
        CommentRequest(content="grandchild", parent_comment_id=child.comment_id),
    )
    other = await service.create_comment(host, plubbing.id, feed_id, CommentRequest(content="other"))

    hidden = await service.delete_comment(member, plubbing.id, feed_id, root.comment_id)

    assert hidden == 3
    assert await _comment_count(test_db, feed_id) == 1
    visible = await test_db.execute(
        select(FeedComment.id)
        .where(FeedComment.feed_id == feed_id)
        .where(FeedComment.visibility.is_(True))
    )
    assert visible.scalars().all() == [other.comment_id]


async def test_feed_author_may_delete_any_comment(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())
    comment = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="hi"))

    assert await service.delete_comment(host, plubbing.id, feed_id, comment.comment_id) == 1


async def test_stranger_cannot_delete_comment(test_db, plubbing, host, member, outsider):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())
    comment = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="hi"))

    with pytest.raises(PlubError) as exc:
        await service.delete_comment(outsider, plubbing.id, feed_id, comment.comment_id)
    assert exc.value.kind is ErrorKind.NOT_FEED_AUTHOR_ERROR


async def test_comment_list_orders_threads_newest_first(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())
    first = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="a"))
    second = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="b"))
    reply = await service.create_comment(
        host, plubbing.id, feed_id,
        CommentRequest(content="a-1", parent_comment_id=first.comment_id),
    )

    page = await service.list_comments(member, plubbing.id, feed_id, size=2)
    assert [c.comment_id for c in page.content] == [second.comment_id, first.comment_id]
    assert page.last is False

    rest = await service.list_comments(
        member, plubbing.id, feed_id, size=2, cursor_id=first.comment_id,
    )
    assert [c.comment_id for c in rest.content] == [reply.comment_id]
    assert rest.last is True


async def test_comment_edit_on_deleted_feed_is_rejected(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())
    comment = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="hi"))
    await service.delete_feed(host, plubbing.id, feed_id)

    with pytest.raises(PlubError) as exc:
        await service.update_comment(
            member, plubbing.id, feed_id, comment.comment_id, CommentUpdateRequest(content="edited"),
        )
    assert exc.value.kind is ErrorKind.DELETED_STATUS_FEED


async def test_former_member_cannot_edit_comment(test_db, plubbing, host, member):
    service = FeedService(test_db)
    feed_id = await service.create_feed(host, plubbing.id, _feed())
    comment = await service.create_comment(member, plubbing.id, feed_id, CommentRequest(content="hi"))
    await test_db.execute(
        update(AccountPlubbing)
        .where(AccountPlubbing.account_id == member.id)
        .where(AccountPlubbing.plubbing_id == plubbing.id)
        .values(status=MembershipStatus.EXIT.value)
    )
    await test_db.commit()

    with pytest.raises(PlubError) as exc:
        await service.update_comment(
            member, plubbing.id, feed_id, comment.comment_id, CommentUpdateRequest(content="edited"),
        )
    assert exc.value.kind is ErrorKind.NOT_MEMBER
