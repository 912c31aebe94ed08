"""Feed Schemas - feed cards, comments and toggle results.

Invariants:
    - feedType PHOTO and PHOTO_LINE require feedImage
    - comment content is 1..300 characters
"""

from datetime import datetime

from pydantic import Field, model_validator

from plub.core.domain_types import FeedType
from plub.schemas.common import CamelModel


class FeedRequest(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    content: str = Field("", max_length=2000)
    feed_type: FeedType = FeedType.LINE
    feed_image: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def require_image_for_photo(self) -> "FeedRequest":
        if self.feed_type is not FeedType.LINE and not self.feed_image:
            raise ValueError("feedImage is required for photo feeds")
        return self


class FeedIdResponse(CamelModel):
    feed_id: int


class FeedCardResponse(CamelModel):
    feed_id: int
    feed_type: str
    view_type: str
    title: str
    content: str
    feed_image: str | None = None
    created_at: datetime
    pin: bool
    pin_at: datetime | None = None
    account_id: int
    nickname: str | None = None
    profile_image: str | None = None
    like_count: int
    comment_count: int
    is_author: bool
    is_host: bool
    is_liked: bool = False


class LikeResponse(CamelModel):
    target_id: int
    is_liked: bool
    like_count: int


class PinResponse(CamelModel):
    feed_id: int
    pin: bool


class CommentRequest(CamelModel):
    content: str = Field(min_length=1, max_length=300)
    parent_comment_id: int | None = None


class CommentUpdateRequest(CamelModel):
    content: str = Field(min_length=1, max_length=300)


class CommentResponse(CamelModel):
    comment_id: int
    content: str
    parent_comment_id: int | None = None
    comment_group_id: int | None = None
    created_at: datetime
    account_id: int
    nickname: str | None = None
    profile_image: str | None = None
    is_comment_author: bool
    is_feed_author: bool


class DeletedCountResponse(CamelModel):
    deleted_count: int
