"""Plubbing Schemas - group creation, update and card payloads.

Invariants:
    - maxAccountNum is 4..20 inclusive
    - days is a non-empty list of MeetingDay; ALL excludes the other values
    - at most 5 recruit questions, each non-empty
"""

from pydantic import Field, field_validator

from plub.core.domain_types import MeetingDay, OnOff
from plub.schemas.common import CamelModel


def _normalize_days(days: list[MeetingDay]) -> list[MeetingDay]:
    if MeetingDay.ALL in days:
        return [MeetingDay.ALL]
    return list(dict.fromkeys(days))


class PlubbingPlace(CamelModel):
    address: str | None = Field(None, max_length=255)
    road_address: str | None = Field(None, max_length=255)
    place_name: str | None = Field(None, max_length=255)
    place_position_x: float | None = None
    place_position_y: float | None = None


class CreatePlubbingRequest(PlubbingPlace):
    sub_category_ids: list[int] = Field(min_length=1, max_length=5)
    title: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=100)
    goal: str = Field(min_length=1, max_length=255)
    introduce: str = Field(min_length=1, max_length=2000)
    main_image: str | None = Field(None, max_length=2000)
    time: str | None = Field(None, pattern=r"^\d{4}$")
    days: list[MeetingDay] = Field(min_length=1)
    on_off: OnOff
    max_account_num: int = Field(ge=4, le=20)
    questions: list[str] = Field(default_factory=list, max_length=5)

    @field_validator("days")
    @classmethod
    def normalize_days(cls, v: list[MeetingDay]) -> list[MeetingDay]:
        return _normalize_days(v)

    @field_validator("questions")
    @classmethod
    def strip_questions(cls, v: list[str]) -> list[str]:
        stripped = [q.strip() for q in v]
        if any(not q for q in stripped):
            raise ValueError("questions cannot be empty")
        return stripped


class UpdatePlubbingRequest(PlubbingPlace):
    name: str | None = Field(None, min_length=1, max_length=100)
    goal: str | None = Field(None, min_length=1, max_length=255)
    main_image: str | None = Field(None, max_length=2000)
    time: str | None = Field(None, pattern=r"^\d{4}$")
    days: list[MeetingDay] | None = Field(None, min_length=1)
    on_off: OnOff | None = None
    max_account_num: int | None = Field(None, ge=4, le=20)

    @field_validator("days")
    @classmethod
    def normalize_days(cls, v: list[MeetingDay] | None) -> list[MeetingDay] | None:
        return _normalize_days(v) if v is not None else v


class PlubbingIdResponse(CamelModel):
    plubbing_id: int


class PlubbingCardResponse(CamelModel):
    plubbing_id: int
    name: str
    goal: str
    main_image: str | None = None
    days: list[str]
    on_off: str
    time: str | None = None
    address: str | None = None
    road_address: str | None = None
    place_name: str | None = None
    place_position_x: float | None = None
    place_position_y: float | None = None
    max_account_num: int
    cur_account_num: int
    remain_account_num: int
    views: int
    status: str

    @classmethod
    def of(cls, plubbing) -> "PlubbingCardResponse":
        return cls(
            plubbing_id=plubbing.id,
            name=plubbing.name,
            goal=plubbing.goal,
            main_image=plubbing.main_image,
            days=list(plubbing.days or []),
            on_off=plubbing.on_off,
            time=plubbing.time,
            address=plubbing.address,
            road_address=plubbing.road_address,
            place_name=plubbing.place_name,
            place_position_x=plubbing.place_position_x,
            place_position_y=plubbing.place_position_y,
            max_account_num=plubbing.max_accounts,
            cur_account_num=plubbing.cur_account_num,
            remain_account_num=max(plubbing.max_accounts - plubbing.cur_account_num, 0),
            views=plubbing.views,
            status=plubbing.status,
        )


class MyPlubbingResponse(PlubbingCardResponse):
    is_host: bool = False


class MemberResponse(CamelModel):
    account_id: int
    nickname: str | None = None
    profile_image: str | None = None
    is_host: bool


class MainPageResponse(CamelModel):
    plubbing: PlubbingCardResponse
    is_host: bool
    members: list[MemberResponse]


class PlubbingStatusResponse(CamelModel):
    plubbing_id: int
    status: str
