"""Auth Schemas - social login, signup and token payloads.

Invariants:
    - LoginRequest needs an accessToken, or an identityToken for APPLE
    - SignupRequest.nickname follows the nickname rule (checked again by the service)
"""

from datetime import date

from pydantic import Field, model_validator

from plub.core.domain_types import SocialType
from plub.schemas.common import CamelModel


class LoginRequest(CamelModel):
    social_type: SocialType
    access_token: str | None = None
    identity_token: str | None = None
    fcm_token: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def require_provider_token(self) -> "LoginRequest":
        token = (
            self.identity_token if self.social_type is SocialType.APPLE
            else self.access_token
        )
        if not token:
            raise ValueError("provider token is required for this social type")
        return self

    @property
    def provider_token(self) -> str:
        if self.social_type is SocialType.APPLE:
            return self.identity_token or ""
        return self.access_token or ""


class SignupRequest(CamelModel):
    nickname: str = Field(min_length=1, max_length=8)
    birthday: date | None = None
    age: int | None = Field(None, ge=0, le=150)
    gender: str | None = Field(None, pattern=r"^(M|F)$")
    introduce: str | None = Field(None, max_length=100)
    profile_image: str | None = Field(None, max_length=2000)
    category_list: list[int] = Field(default_factory=list)
    fcm_token: str | None = Field(None, max_length=500)


class ReissueRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str


class SignTokenResponse(CamelModel):
    sign_token: str
