"""Notice Schemas - host announcements and their comments."""

from datetime import datetime

from pydantic import Field

from plub.schemas.common import CamelModel


class NoticeRequest(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1, max_length=2000)


class NoticeIdResponse(CamelModel):
    notice_id: int


class NoticeResponse(CamelModel):
    notice_id: int
    title: str
    content: str
    created_at: datetime
    account_id: int
    nickname: str | None = None
    like_count: int
    comment_count: int
    is_host: bool
    is_liked: bool = False


class NoticeCommentRequest(CamelModel):
    content: str = Field(min_length=1, max_length=300)


class NoticeCommentResponse(CamelModel):
    comment_id: int
    content: str
    created_at: datetime
    account_id: int
    nickname: str | None = None
    profile_image: str | None = None
    is_comment_author: bool
    is_notice_author: bool
