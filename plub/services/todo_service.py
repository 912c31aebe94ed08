"""Todo Service - per-date to-do timelines of plubbing members.

Invariants:
    - Only ACTIVE members create todos; the (account, plubbing, date) timeline is
      created on first use
    - A timeline holds at most max_todos_per_timeline todos (TOO_MANY_TODO)
    - OPEN -> CHECKED -> PROOFED, CHECKED -> OPEN; a proof is final
    - Only the author changes a todo (NOT_TODO_AUTHOR)
    - Moving a todo to another date moves it to that date's timeline, under the same cap

Design Decisions:
    - Timeline lists use keyset pagination on (date desc, id desc); the cursor is a timeline id
    - Empty timelines are kept after their last todo is deleted; likes stay attached
"""

import calendar
import datetime
import logging

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.enforce_todo import (
    check_can_cancel, check_can_complete, check_can_proof, check_can_update,
    check_timeline_capacity, todo_state,
)
from plub.core.errors import ErrorKind, PlubError
from plub.core.pagination import Page, has_cursor, slice_page
from plub.models.account import Account
from plub.models.plubbing import Plubbing
from plub.models.todo import Todo, TodoLike, TodoTimeline
from plub.schemas.feed import LikeResponse
from plub.schemas.todo import (
    CalendarResponse, TimelineResponse, TimelineTodoListResponse, TodoProofRequest,
    TodoRequest, TodoResponse,
)
from plub.services.likes import liked_ids, toggle_like
from plub.services.membership import MembershipGuard

logger = logging.getLogger(__name__)

DEFAULT_MAX_TODOS = 5


def _todo_response(todo: Todo, viewer: Account) -> TodoResponse:
    return TodoResponse(
        todo_id=todo.id,
        timeline_id=todo.timeline_id,
        content=todo.content,
        date=todo.date,
        is_checked=todo.checked,
        is_proof=todo.proof,
        proof_image=todo.proof_image,
        state=todo_state(todo.checked, todo.proof).value,
        like_count=todo.like_count,
        is_author=todo.account_id == viewer.id,
    )


class TodoService:

    def __init__(self, db: AsyncSession, max_todos: int = DEFAULT_MAX_TODOS):
        self.db = db
        self.guard = MembershipGuard(db)
        self.max_todos = max_todos

    async def _member_plubbing(self, account: Account, plubbing_id: int) -> Plubbing:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_member(account, plubbing)
        return plubbing

    async def _get_todo(self, plubbing_id: int, todo_id: int) -> Todo:
        todo = await self.db.get(Todo, todo_id)
        if todo is None or todo.plubbing_id != plubbing_id:
            raise PlubError(ErrorKind.NOT_FOUND_TODO)
        return todo

    async def _get_own_todo(self, account: Account, plubbing_id: int, todo_id: int) -> Todo:
        todo = await self._get_todo(plubbing_id, todo_id)
        if todo.account_id != account.id:
            raise PlubError(ErrorKind.NOT_TODO_AUTHOR)
        return todo

    async def _get_timeline(self, plubbing_id: int, timeline_id: int) -> TodoTimeline:
        timeline = await self.db.get(TodoTimeline, timeline_id)
        if timeline is None or timeline.plubbing_id != plubbing_id:
            raise PlubError(ErrorKind.NOT_FOUND_TODO_TIMELINE)
        return timeline

    async def _timeline_for(
        self, account_id: int, plubbing_id: int, date: datetime.date,
    ) -> TodoTimeline:
        """Find or create the timeline of (account, plubbing, date)."""
        result = await self.db.execute(
            select(TodoTimeline)
            .where(TodoTimeline.account_id == account_id)
            .where(TodoTimeline.plubbing_id == plubbing_id)
            .where(TodoTimeline.date == date)
        )
        timeline = result.scalar_one_or_none()
        if timeline is not None:
            return timeline
        timeline = TodoTimeline(
            account_id=account_id, plubbing_id=plubbing_id, date=date, like_count=0,
        )
        self.db.add(timeline)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise PlubError(ErrorKind.DUPLICATE_REQUEST)
        return timeline

    async def _check_room(self, timeline: TodoTimeline) -> None:
        count = await self.db.scalar(
            select(func.count(Todo.id)).where(Todo.timeline_id == timeline.id),
        )
        check_timeline_capacity(count or 0, self.max_todos)

    async def _todos_of(self, timeline_ids: list[int]) -> dict[int, list[Todo]]:
        grouped: dict[int, list[Todo]] = {tid: [] for tid in timeline_ids}
        if not timeline_ids:
            return grouped
        result = await self.db.execute(
            select(Todo).where(Todo.timeline_id.in_(timeline_ids)).order_by(Todo.id)
        )
        for todo in result.scalars().all():
            grouped[todo.timeline_id].append(todo)
        return grouped

    # --- Todo mutations -------------------------------------------------

    async def create(self, account: Account, plubbing_id: int, request: TodoRequest) -> int:
        plubbing = await self._member_plubbing(account, plubbing_id)
        timeline = await self._timeline_for(account.id, plubbing.id, request.date)
        await self._check_room(timeline)

        todo = Todo(
            timeline_id=timeline.id,
            account_id=account.id,
            plubbing_id=plubbing.id,
            content=request.content,
            date=request.date,
            checked=False,
            proof=False,
            like_count=0,
        )
        self.db.add(todo)
        await self.db.commit()
        logger.info(
            "Todo created",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )
        return todo.id

    async def complete(self, account: Account, plubbing_id: int, todo_id: int) -> TodoResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        todo = await self._get_own_todo(account, plubbing.id, todo_id)
        check_can_complete(todo_state(todo.checked, todo.proof))
        todo.checked = True
        await self.db.commit()
        return _todo_response(todo, account)

    async def cancel(self, account: Account, plubbing_id: int, todo_id: int) -> TodoResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        todo = await self._get_own_todo(account, plubbing.id, todo_id)
        check_can_cancel(todo_state(todo.checked, todo.proof))
        todo.checked = False
        await self.db.commit()
        return _todo_response(todo, account)

    async def proof(
        self, account: Account, plubbing_id: int, todo_id: int, request: TodoProofRequest,
    ) -> TodoResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        todo = await self._get_own_todo(account, plubbing.id, todo_id)
        check_can_proof(todo_state(todo.checked, todo.proof))
        todo.proof = True
        todo.proof_image = request.proof_image
        await self.db.commit()
        logger.info(
            "Todo proofed",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )
        return _todo_response(todo, account)

    async def update(
        self, account: Account, plubbing_id: int, todo_id: int, request: TodoRequest,
    ) -> TodoResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        todo = await self._get_own_todo(account, plubbing.id, todo_id)
        check_can_update(todo_state(todo.checked, todo.proof))

        if request.date != todo.date:
            timeline = await self._timeline_for(account.id, plubbing.id, request.date)
            await self._check_room(timeline)
            todo.timeline_id = timeline.id
            todo.date = request.date
        todo.content = request.content
        await self.db.commit()
        return _todo_response(todo, account)

    async def delete(self, account: Account, plubbing_id: int, todo_id: int) -> None:
        plubbing = await self._member_plubbing(account, plubbing_id)
        todo = await self._get_own_todo(account, plubbing.id, todo_id)
        await self.db.execute(delete(Todo).where(Todo.id == todo.id))
        await self.db.commit()
        logger.info(
            "Todo deleted",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )

    async def like_timeline(
        self, account: Account, plubbing_id: int, timeline_id: int,
    ) -> LikeResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        timeline = await self._get_timeline(plubbing.id, timeline_id)
        liked, like_count = await toggle_like(
            self.db, TodoLike, TodoTimeline, "timeline_id", account.id, timeline.id,
        )
        await self.db.commit()
        return LikeResponse(target_id=timeline.id, is_liked=liked, like_count=like_count)

    # --- Queries --------------------------------------------------------

    async def get_todo(self, account: Account, plubbing_id: int, todo_id: int) -> TodoResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        todo = await self._get_todo(plubbing.id, todo_id)
        return _todo_response(todo, account)

    async def timeline_todos(
        self, account: Account, plubbing_id: int, timeline_id: int,
    ) -> TimelineTodoListResponse:
        plubbing = await self._member_plubbing(account, plubbing_id)
        timeline = await self._get_timeline(plubbing.id, timeline_id)
        todos = (await self._todos_of([timeline.id]))[timeline.id]
        return TimelineTodoListResponse(
            timeline_id=timeline.id,
            like_count=timeline.like_count,
            todo_list=[_todo_response(t, account) for t in todos],
        )

    async def by_date(
        self, account: Account, plubbing_id: int, date: datetime.date,
    ) -> TimelineResponse:
        """The caller's timeline on `date`; an empty placeholder when there is none."""
        plubbing = await self._member_plubbing(account, plubbing_id)
        result = await self.db.execute(
            select(TodoTimeline)
            .where(TodoTimeline.account_id == account.id)
            .where(TodoTimeline.plubbing_id == plubbing.id)
            .where(TodoTimeline.date == date)
        )
        timeline = result.scalar_one_or_none()
        if timeline is None:
            return TimelineResponse(
                date=date, account_id=account.id, nickname=account.nickname,
                profile_image=account.profile_image,
            )
        return (await self._timelines([timeline], account))[0]

    async def calendar(
        self, account: Account, plubbing_id: int, year: int, month: int,
    ) -> CalendarResponse:
        if not 1 <= month <= 12:
            raise PlubError(ErrorKind.INVALID_INPUT_VALUE, "month must be 1..12.")
        if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
            raise PlubError(
                ErrorKind.INVALID_INPUT_VALUE,
                f"year must be {datetime.MINYEAR}..{datetime.MAXYEAR}.",
            )
        plubbing = await self._member_plubbing(account, plubbing_id)
        first = datetime.date(year, month, 1)
        last = datetime.date(year, month, calendar.monthrange(year, month)[1])
        result = await self.db.execute(
            select(Todo.date)
            .where(Todo.account_id == account.id)
            .where(Todo.plubbing_id == plubbing.id)
            .where(Todo.date.between(first, last))
            .distinct()
            .order_by(Todo.date)
        )
        return CalendarResponse(year=year, month=month, dates=list(result.scalars().all()))

    async def _timelines(
        self, timelines: list[TodoTimeline], viewer: Account,
    ) -> list[TimelineResponse]:
        ids = [t.id for t in timelines]
        todos = await self._todos_of(ids)
        liked = await liked_ids(self.db, TodoLike, "timeline_id", viewer.id, ids)
        owner_ids = {t.account_id for t in timelines}
        owners = {}
        if owner_ids:
            result = await self.db.execute(select(Account).where(Account.id.in_(owner_ids)))
            owners = {a.id: a for a in result.scalars().all()}
        responses = []
        for timeline in timelines:
            owner = owners.get(timeline.account_id)
            responses.append(TimelineResponse(
                timeline_id=timeline.id,
                date=timeline.date,
                like_count=timeline.like_count,
                is_liked=timeline.id in liked,
                account_id=timeline.account_id,
                nickname=owner.nickname if owner else None,
                profile_image=owner.profile_image if owner else None,
                todo_list=[_todo_response(t, viewer) for t in todos[timeline.id]],
            ))
        return responses

    async def _timeline_page(
        self, viewer: Account, plubbing: Plubbing, size: int,
        cursor_id: int | None, account_id: int | None = None,
    ) -> Page[TimelineResponse]:
        has_todos = select(Todo.id).where(Todo.timeline_id == TodoTimeline.id).exists()
        conditions = [TodoTimeline.plubbing_id == plubbing.id, has_todos]
        if account_id is not None:
            conditions.append(TodoTimeline.account_id == account_id)
        total = await self.db.scalar(select(func.count(TodoTimeline.id)).where(*conditions))

        query = select(TodoTimeline).where(*conditions)
        if has_cursor(cursor_id):
            cursor = await self._get_timeline(plubbing.id, cursor_id)
            query = query.where(or_(
                TodoTimeline.date < cursor.date,
                and_(TodoTimeline.date == cursor.date, TodoTimeline.id < cursor.id),
            ))
        result = await self.db.execute(
            query.order_by(TodoTimeline.date.desc(), TodoTimeline.id.desc()).limit(size + 1)
        )
        responses = await self._timelines(list(result.scalars().all()), viewer)
        return slice_page(responses, size, total or 0)

    async def list_all(
        self, account: Account, plubbing_id: int, size: int, cursor_id: int | None = None,
    ) -> Page[TimelineResponse]:
        plubbing = await self._member_plubbing(account, plubbing_id)
        return await self._timeline_page(account, plubbing, size, cursor_id)

    async def list_mine(
        self, account: Account, plubbing_id: int, size: int, cursor_id: int | None = None,
    ) -> Page[TimelineResponse]:
        plubbing = await self._member_plubbing(account, plubbing_id)
        return await self._timeline_page(account, plubbing, size, cursor_id, account.id)

    async def list_by_account(
        self, account: Account, plubbing_id: int, account_id: int,
        size: int, cursor_id: int | None = None,
    ) -> Page[TimelineResponse]:
        plubbing = await self._member_plubbing(account, plubbing_id)
        if await self.guard.get_membership(account_id, plubbing.id) is None:
            raise PlubError(ErrorKind.NOT_MEMBER)
        return await self._timeline_page(account, plubbing, size, cursor_id, account_id)
