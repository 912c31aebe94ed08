"""Todo Schemas - to-do items, timelines and the monthly calendar.

Invariants:
    - todo content is 1..15 characters
    - A TimelineResponse without timelineId is the placeholder for a date with no timeline
"""

import datetime

from pydantic import Field

from plub.schemas.common import CamelModel


class TodoRequest(CamelModel):
    content: str = Field(min_length=1, max_length=15)
    date: datetime.date


class TodoProofRequest(CamelModel):
    proof_image: str = Field(min_length=1, max_length=2000)


class TodoIdResponse(CamelModel):
    todo_id: int


class TodoResponse(CamelModel):
    todo_id: int
    timeline_id: int
    content: str
    date: datetime.date
    is_checked: bool
    is_proof: bool
    proof_image: str | None = None
    state: str
    like_count: int
    is_author: bool


class TimelineResponse(CamelModel):
    timeline_id: int | None = None
    date: datetime.date
    like_count: int = 0
    is_liked: bool = False
    account_id: int
    nickname: str | None = None
    profile_image: str | None = None
    todo_list: list[TodoResponse] = []


class TimelineTodoListResponse(CamelModel):
    timeline_id: int
    like_count: int
    todo_list: list[TodoResponse]


class CalendarResponse(CamelModel):
    year: int
    month: int
    dates: list[datetime.date]
