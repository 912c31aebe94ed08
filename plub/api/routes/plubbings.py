"""Plubbing Routes - group lifecycle and discovery."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account, get_page_size
from plub.core.domain_types import SortType
from plub.infrastructure.database import get_db
from plub.models.account import Account
from plub.schemas.common import PageResponse, success
from plub.schemas.plubbing import (
    CreatePlubbingRequest, PlubbingIdResponse, UpdatePlubbingRequest,
)
from plub.services.plubbing_service import PlubbingService

router = APIRouter(prefix="/api/plubbings", tags=["plubbings"])


@router.post("")
async def create_plubbing(
    body: CreatePlubbingRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    plubbing_id = await PlubbingService(db).create(account, body)
    return success(PlubbingIdResponse(plubbing_id=plubbing_id))


@router.get("/my")
async def my_plubbings(
    is_host: bool | None = Query(None, alias="isHost"),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    plubbings = await PlubbingService(db).my_plubbings(account, is_host)
    return success({"plubbings": plubbings})


@router.get("/recommendation")
async def recommend(
    page: int = Query(0, ge=0),
    size: int = Depends(get_page_size),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    result = await PlubbingService(db).recommend(account, page, size)
    return success(PageResponse.of(result))


@router.get("/categories/{category_id}")
async def list_by_category(
    category_id: int,
    sort: SortType = Query(SortType.POPULAR),
    page: int = Query(0, ge=0),
    size: int = Depends(get_page_size),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    result = await PlubbingService(db).list_by_category(category_id, sort, page, size)
    return success(PageResponse.of(result))


@router.get("/{plubbing_id}/main")
async def main_page(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await PlubbingService(db).get_main(account, plubbing_id))


@router.put("/{plubbing_id}")
async def update_plubbing(
    plubbing_id: int,
    body: UpdatePlubbingRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await PlubbingService(db).update(account, plubbing_id, body))


@router.delete("/{plubbing_id}")
async def delete_plubbing(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    await PlubbingService(db).delete(account, plubbing_id)
    return success(PlubbingIdResponse(plubbing_id=plubbing_id))


@router.put("/{plubbing_id}/status")
async def toggle_status(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await PlubbingService(db).toggle_end(account, plubbing_id))
