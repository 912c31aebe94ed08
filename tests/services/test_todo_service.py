"""Todo Service - timeline cap, state transitions, authorship and listings."""

import datetime

import pytest
from sqlalchemy import Select, func, select

from plub.core.domain_types import TodoState
from plub.core.errors import ErrorKind, PlubError
from plub.models.todo import Todo, TodoTimeline
from plub.schemas.todo import TodoProofRequest, TodoRequest
from plub.services.todo_service import TodoService


async def test_fifth_todo_fits_sixth_is_rejected(test_db, plubbing, member, today):
    service = TodoService(test_db)
    for i in range(5):
        await service.create(member, plubbing.id, TodoRequest(content=f"task {i}", date=today))

    with pytest.raises(PlubError) as exc:
        await service.create(member, plubbing.id, TodoRequest(content="one more", date=today))
    assert exc.value.kind is ErrorKind.TOO_MANY_TODO


async def test_cap_is_per_date(test_db, plubbing, member, today):
    service = TodoService(test_db, max_todos=1)
    await service.create(member, plubbing.id, TodoRequest(content="today", date=today))
    tomorrow = today + datetime.timedelta(days=1)
    assert await service.create(member, plubbing.id, TodoRequest(content="tomorrow", date=tomorrow))


async def test_outsider_cannot_create(test_db, plubbing, outsider, today):
    with pytest.raises(PlubError) as exc:
        await TodoService(test_db).create(outsider, plubbing.id, TodoRequest(content="x", date=today))
    assert exc.value.kind is ErrorKind.NOT_MEMBER


async def test_complete_then_proof(test_db, plubbing, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))

    with pytest.raises(PlubError) as exc:
        await service.proof(member, plubbing.id, todo_id, TodoProofRequest(proof_image="img.png"))
    assert exc.value.kind is ErrorKind.NOT_COMPLETE_TODO

    checked = await service.complete(member, plubbing.id, todo_id)
    assert checked.state == TodoState.CHECKED.value
    proofed = await service.proof(member, plubbing.id, todo_id, TodoProofRequest(proof_image="img.png"))
    assert proofed.state == TodoState.PROOFED.value
    assert proofed.proof_image == "img.png"


async def test_proof_is_final(test_db, plubbing, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))
    await service.complete(member, plubbing.id, todo_id)
    await service.proof(member, plubbing.id, todo_id, TodoProofRequest(proof_image="img.png"))

    with pytest.raises(PlubError) as exc:
        await service.cancel(member, plubbing.id, todo_id)
    assert exc.value.kind is ErrorKind.ALREADY_PROOF_TODO


async def test_cancel_reopens_checked_todo(test_db, plubbing, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))
    await service.complete(member, plubbing.id, todo_id)

    reopened = await service.cancel(member, plubbing.id, todo_id)
    assert reopened.state == TodoState.OPEN.value


async def test_checked_todo_cannot_be_edited(test_db, plubbing, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))
    await service.complete(member, plubbing.id, todo_id)

    with pytest.raises(PlubError) as exc:
        await service.update(member, plubbing.id, todo_id, TodoRequest(content="walk", date=today))
    assert exc.value.kind is ErrorKind.ALREADY_CHECKED_TODO


async def test_only_author_changes_todo(test_db, plubbing, host, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))

    with pytest.raises(PlubError) as exc:
        await service.complete(host, plubbing.id, todo_id)
    assert exc.value.kind is ErrorKind.NOT_TODO_AUTHOR
    with pytest.raises(PlubError) as exc:
        await service.delete(host, plubbing.id, todo_id)
    assert exc.value.kind is ErrorKind.NOT_TODO_AUTHOR


async def test_date_change_moves_todo_to_new_timeline(test_db, plubbing, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))
    before = await service.get_todo(member, plubbing.id, todo_id)

    later = today + datetime.timedelta(days=2)
    moved = await service.update(member, plubbing.id, todo_id, TodoRequest(content="long run", date=later))

    assert moved.date == later
    assert moved.content == "long run"
    assert moved.timeline_id != before.timeline_id


async def test_delete_removes_todo(test_db, plubbing, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))
    await service.delete(member, plubbing.id, todo_id)

    with pytest.raises(PlubError) as exc:
        await service.get_todo(member, plubbing.id, todo_id)
    assert exc.value.kind is ErrorKind.NOT_FOUND_TODO


async def test_any_member_likes_a_timeline(test_db, plubbing, host, member, today):
    service = TodoService(test_db)
    todo_id = await service.create(member, plubbing.id, TodoRequest(content="run", date=today))
    timeline_id = (await service.get_todo(member, plubbing.id, todo_id)).timeline_id

    liked = await service.like_timeline(host, plubbing.id, timeline_id)
    assert (liked.is_liked, liked.like_count) == (True, 1)
    unliked = await service.like_timeline(host, plubbing.id, timeline_id)
    assert (unliked.is_liked, unliked.like_count) == (False, 0)


async def test_by_date_placeholder_when_empty(test_db, plubbing, member, today):
    response = await TodoService(test_db).by_date(member, plubbing.id, today)
    assert response.timeline_id is None
    assert response.todo_list == []
    assert response.account_id == member.id


async def test_by_date_returns_own_timeline(test_db, plubbing, host, member, today):
    service = TodoService(test_db)
    await service.create(host, plubbing.id, TodoRequest(content="host task", date=today))
    await service.create(member, plubbing.id, TodoRequest(content="my task", date=today))

    response = await service.by_date(member, plubbing.id, today)
    assert [t.content for t in response.todo_list] == ["my task"]


async def test_calendar_lists_distinct_dates(test_db, plubbing, member, today):
    service = TodoService(test_db)
    second = today + datetime.timedelta(days=3)
    await service.create(member, plubbing.id, TodoRequest(content="a", date=today))
    await service.create(member, plubbing.id, TodoRequest(content="b", date=today))
    await service.create(member, plubbing.id, TodoRequest(content="c", date=second))
    await service.create(member, plubbing.id, TodoRequest(content="d", date=datetime.date(2026, 11, 2)))

    response = await service.calendar(member, plubbing.id, 2026, 10)
    assert response.dates == [today, second]


async def test_calendar_rejects_bad_month(test_db, plubbing, member):
    with pytest.raises(PlubError) as exc:
        await TodoService(test_db).calendar(member, plubbing.id, 2026, 13)
    assert exc.value.kind is ErrorKind.INVALID_INPUT_VALUE


@pytest.mark.parametrize("year", [0, 10000])
async def test_calendar_rejects_year_out_of_range(test_db, plubbing, member, year):
    with pytest.raises(PlubError) as exc:
        await TodoService(test_db).calendar(member, plubbing.id, year, 5)
    assert exc.value.kind is ErrorKind.INVALID_INPUT_VALUE


async def test_timelines_newest_date_first_with_cursor(test_db, plubbing, host, member, today):
    service = TodoService(test_db)
    yesterday = today - datetime.timedelta(days=1)
    await service.create(member, plubbing.id, TodoRequest(content="old", date=yesterday))
    await service.create(host, plubbing.id, TodoRequest(content="host", date=today))
    await service.create(member, plubbing.id, TodoRequest(content="new", date=today))

    first = await service.list_all(member, plubbing.id, size=2)
    assert [t.date for t in first.content] == [today, today]
    assert first.total_elements == 3
    assert first.last is False

    rest = await service.list_all(
        member, plubbing.id, size=2, cursor_id=first.content[-1].timeline_id,
    )
    assert [t.date for t in rest.content] == [yesterday]
    assert rest.last is True


async def test_list_mine_and_by_account(test_db, plubbing, host, member, today):
    service = TodoService(test_db)
    await service.create(host, plubbing.id, TodoRequest(content="host", date=today))
    await service.create(member, plubbing.id, TodoRequest(content="mine", date=today))

    mine = await service.list_mine(member, plubbing.id, size=10)
    assert [t.account_id for t in mine.content] == [member.id]
    hosts = await service.list_by_account(member, plubbing.id, host.id, size=10)
    assert [t.nickname for t in hosts.content] == ["host"]


async def test_list_by_account_requires_member_target(test_db, plubbing, member, outsider):
    with pytest.raises(PlubError) as exc:
        await TodoService(test_db).list_by_account(member, plubbing.id, outsider.id, size=10)
    assert exc.value.kind is ErrorKind.NOT_MEMBER


async def test_concurrent_timeline_creation_is_duplicate_request(
    test_db, plubbing, member, today, monkeypatch,
):
    plubbing_id, member_id = plubbing.id, member.id
    service = TodoService(test_db)
    await service.create(member, plubbing_id, TodoRequest(content="first", date=today))

    # Another request created the timeline after this one looked for it.
    execute = test_db.execute

    async def timeline_lookup_misses(statement, *args, **kwargs):
        entity = (
            statement.column_descriptions[0]["entity"] if isinstance(statement, Select) else None
        )
        if entity is TodoTimeline:
            statement = statement.where(TodoTimeline.id == 0)
        return await execute(statement, *args, **kwargs)

    monkeypatch.setattr(test_db, "execute", timeline_lookup_misses)

    with pytest.raises(PlubError) as exc:
        await service.create(member, plubbing_id, TodoRequest(content="second", date=today))
    assert exc.value.kind is ErrorKind.DUPLICATE_REQUEST

    monkeypatch.undo()
    timelines = await test_db.scalar(
        select(func.count(TodoTimeline.id))
        .where(TodoTimeline.account_id == member_id)
        .where(TodoTimeline.date == today)
    )
    todos = await test_db.scalar(select(func.count(Todo.id)).where(Todo.account_id == member_id))
    assert (timelines, todos) == (1, 1)
