"""Category Schemas - category tree and cache version payloads."""

from datetime import datetime

from plub.schemas.common import CamelModel


class SubCategoryResponse(CamelModel):
    id: int
    name: str
    category_name: str
    parent_id: int


class CategoryResponse(CamelModel):
    id: int
    name: str
    icon: str | None = None


class CategoryVersionResponse(CamelModel):
    latest_date: datetime
    latest_table: str
