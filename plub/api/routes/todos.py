"""Todo Routes - to-do items and per-date timelines.

Design Decisions:
    - /timeline/my, /timeline/accounts/... and /timeline/year/... are registered
      before /timeline/{date} so the literal segments win
"""

import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account, get_page_size
from plub.config import get_settings
from plub.infrastructure.database import get_db
from plub.models.account import Account
from plub.schemas.common import PageResponse, success
from plub.schemas.todo import TodoIdResponse, TodoProofRequest, TodoRequest
from plub.services.todo_service import TodoService

router = APIRouter(prefix="/api/plubbings/{plubbing_id}", tags=["todos"])


def get_todo_service(db: AsyncSession = Depends(get_db)) -> TodoService:
    return TodoService(db, get_settings().max_todos_per_timeline)


@router.post("/todolist")
async def create_todo(
    plubbing_id: int,
    body: TodoRequest,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    todo_id = await todos.create(account, plubbing_id, body)
    return success(TodoIdResponse(todo_id=todo_id))


@router.get("/todolist/{todo_id}")
async def get_todo(
    plubbing_id: int,
    todo_id: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.get_todo(account, plubbing_id, todo_id))


@router.put("/todolist/{todo_id}")
async def update_todo(
    plubbing_id: int,
    todo_id: int,
    body: TodoRequest,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.update(account, plubbing_id, todo_id, body))


@router.delete("/todolist/{todo_id}")
async def delete_todo(
    plubbing_id: int,
    todo_id: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    await todos.delete(account, plubbing_id, todo_id)
    return success(TodoIdResponse(todo_id=todo_id))


@router.put("/todolist/{todo_id}/complete")
async def complete_todo(
    plubbing_id: int,
    todo_id: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.complete(account, plubbing_id, todo_id))


@router.put("/todolist/{todo_id}/cancel")
async def cancel_todo(
    plubbing_id: int,
    todo_id: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.cancel(account, plubbing_id, todo_id))


@router.post("/todolist/{todo_id}/proof")
async def proof_todo(
    plubbing_id: int,
    todo_id: int,
    body: TodoProofRequest,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.proof(account, plubbing_id, todo_id, body))


@router.get("/timeline")
async def list_timelines(
    plubbing_id: int,
    size: int = Depends(get_page_size),
    cursor_id: int | None = Query(None, alias="cursorId"),
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    page = await todos.list_all(account, plubbing_id, size, cursor_id)
    return success(PageResponse.of(page))


@router.get("/timeline/my")
async def list_my_timelines(
    plubbing_id: int,
    size: int = Depends(get_page_size),
    cursor_id: int | None = Query(None, alias="cursorId"),
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    page = await todos.list_mine(account, plubbing_id, size, cursor_id)
    return success(PageResponse.of(page))


@router.get("/timeline/accounts/{account_id}")
async def list_account_timelines(
    plubbing_id: int,
    account_id: int,
    size: int = Depends(get_page_size),
    cursor_id: int | None = Query(None, alias="cursorId"),
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    page = await todos.list_by_account(account, plubbing_id, account_id, size, cursor_id)
    return success(PageResponse.of(page))


@router.get("/timeline/year/{year}/month/{month}")
async def calendar(
    plubbing_id: int,
    year: int,
    month: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.calendar(account, plubbing_id, year, month))


@router.get("/timeline/{timeline_id}/todolist")
async def timeline_todos(
    plubbing_id: int,
    timeline_id: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.timeline_todos(account, plubbing_id, timeline_id))


@router.put("/timeline/{timeline_id}/like")
async def like_timeline(
    plubbing_id: int,
    timeline_id: int,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.like_timeline(account, plubbing_id, timeline_id))


@router.get("/timeline/{date}")
async def timeline_by_date(
    plubbing_id: int,
    date: datetime.date,
    account: Account = Depends(get_current_account),
    todos: TodoService = Depends(get_todo_service),
):
    return success(await todos.by_date(account, plubbing_id, date))
