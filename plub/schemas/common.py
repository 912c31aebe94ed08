"""Common Schemas - camelCase base model, response envelope and page payload.

Invariants:
    - Every JSON field crosses the API boundary in camelCase; Python code uses snake_case
    - success() always yields {"statusCode", "message", "data"}
    - PageResponse mirrors core.pagination.Page: {totalElements, last, content}

Design Decisions:
    - alias_generator + populate_by_name: request bodies accept both spellings,
      services build responses with snake_case keyword arguments
"""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from plub.core.pagination import Page

T = TypeVar("T")
SUCCESS_CODE = 1000


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class PageResponse(CamelModel, Generic[T]):
    total_elements: int
    last: bool
    content: list[T]

    @classmethod
    def of(cls, page: Page, mapper: Callable[[Any], T] | None = None) -> "PageResponse[T]":
        items = page.content if mapper is None else [mapper(i) for i in page.content]
        return cls(total_elements=page.total_elements, last=page.last, content=items)


def success(
    data: Any = None, status_code: int = SUCCESS_CODE, message: str = "success",
) -> dict:
    """Wrap a payload in the uniform response envelope."""
    return {
        "statusCode": status_code,
        "message": message,
        "data": jsonable_encoder(data, by_alias=True),
    }
