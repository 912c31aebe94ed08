"""Category Routes - read-only category tree and cache version."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from plub.infrastructure.database import get_db
from plub.schemas.common import success
from plub.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("")
async def list_categories(db: AsyncSession = Depends(get_db)):
    return success({"categories": await CategoryService(db).list_categories()})


@router.get("/sub")
async def list_all_sub_categories(db: AsyncSession = Depends(get_db)):
    return success({"categories": await CategoryService(db).list_sub_categories()})


@router.get("/check/version")
async def check_version(db: AsyncSession = Depends(get_db)):
    return success(await CategoryService(db).get_version())


@router.get("/{category_id}/sub")
async def list_sub_categories(category_id: int, db: AsyncSession = Depends(get_db)):
    return success({
        "categories": await CategoryService(db).list_sub_categories(category_id),
    })
