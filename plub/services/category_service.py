"""Category Service - read-only category tree and its cache version."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.errors import ErrorKind, PlubError
from plub.models.category import Category, SubCategory
from plub.schemas.category import (
    CategoryResponse, CategoryVersionResponse, SubCategoryResponse,
)


class CategoryService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> list[CategoryResponse]:
        result = await self.db.execute(
            select(Category).order_by(Category.sort_order, Category.id),
        )
        return [
            CategoryResponse(id=c.id, name=c.name, icon=c.icon)
            for c in result.scalars().all()
        ]

    async def list_sub_categories(
        self, category_id: int | None = None,
    ) -> list[SubCategoryResponse]:
        query = (
            select(SubCategory, Category.name)
            .join(Category, Category.id == SubCategory.category_id)
            .order_by(Category.sort_order, SubCategory.sort_order, SubCategory.id)
        )
        if category_id is not None:
            if await self.db.get(Category, category_id) is None:
                raise PlubError(ErrorKind.NOT_FOUND_CATEGORY)
            query = query.where(SubCategory.category_id == category_id)
        result = await self.db.execute(query)
        return [
            SubCategoryResponse(
                id=sub.id, name=sub.name,
                category_name=category_name, parent_id=sub.category_id,
            )
            for sub, category_name in result.all()
        ]

    async def get_version(self) -> CategoryVersionResponse:
        """Latest modification of either table; clients refetch when it moves."""
        category_latest = await self.db.scalar(select(func.max(Category.modified_at)))
        sub_latest = await self.db.scalar(select(func.max(SubCategory.modified_at)))
        if category_latest is None or sub_latest is None:
            raise PlubError(ErrorKind.NOT_FOUND_CATEGORY)
        if category_latest < sub_latest:
            return CategoryVersionResponse(latest_date=sub_latest, latest_table="categorySub")
        return CategoryVersionResponse(latest_date=category_latest, latest_table="category")
