"""Recruit Schemas - recruiting post, questions, applications and bookmarks."""

from datetime import datetime

from pydantic import Field

from plub.schemas.common import CamelModel
from plub.schemas.plubbing import MemberResponse, PlubbingCardResponse


class QuestionResponse(CamelModel):
    question_id: int
    question: str


class RecruitResponse(CamelModel):
    recruit_id: int
    title: str
    introduce: str
    status: str
    views: int
    plubbing: PlubbingCardResponse
    categories: list[str]
    host_nickname: str | None = None
    host_profile_image: str | None = None
    members: list[MemberResponse]
    is_host: bool
    is_bookmarked: bool
    is_applied: bool


class AnswerRequest(CamelModel):
    question_id: int
    answer: str = Field(min_length=1, max_length=500)


class ApplyRequest(CamelModel):
    answers: list[AnswerRequest] = Field(default_factory=list)


class AnswerResponse(CamelModel):
    question_id: int
    question: str
    answer: str


class ApplicantResponse(CamelModel):
    account_id: int
    nickname: str | None = None
    profile_image: str | None = None
    status: str
    applied_at: datetime
    answers: list[AnswerResponse]


class ApplicantStatusResponse(CamelModel):
    account_id: int
    status: str


class BookmarkResponse(CamelModel):
    recruit_id: int
    is_bookmarked: bool
