"""Account Schemas - profile payloads and revoke input."""

from datetime import date

from pydantic import Field, field_validator

from plub.schemas.common import CamelModel


class AccountResponse(CamelModel):
    account_id: int
    email: str | None = None
    nickname: str | None = None
    social_type: str
    birthday: date | None = None
    age: int | None = None
    gender: str | None = None
    introduce: str | None = None
    profile_image: str | None = None
    role: str

    @classmethod
    def of(cls, account) -> "AccountResponse":
        return cls(
            account_id=account.id,
            email=account.email,
            nickname=account.nickname,
            social_type=account.social_type,
            birthday=account.birthday,
            age=account.age,
            gender=account.gender,
            introduce=account.introduce,
            profile_image=account.profile_image,
            role=account.role,
        )


class ProfileUpdateRequest(CamelModel):
    nickname: str | None = Field(None, min_length=1, max_length=8)
    introduce: str | None = Field(None, max_length=100)
    profile_image: str | None = Field(None, max_length=2000)

    @field_validator("introduce")
    @classmethod
    def strip_introduce(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v


class NicknameCheckResponse(CamelModel):
    is_available: bool


class RevokeRequest(CamelModel):
    access_token: str | None = None
    authorization_code: str | None = None
