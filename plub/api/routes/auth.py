"""Auth Routes - social login, signup, token reissue and logout.

Design Decisions:
    - Login answers 1000 with tokens for a known identity and 2001 with a sign
      token when the account has to be created first
    - Signup reads the sign token from the Authorization header
"""

from fastapi import APIRouter, Depends

from plub.api.deps import get_auth_service, get_bearer_token, get_current_account
from plub.models.account import Account
from plub.schemas.auth import (
    LoginRequest, ReissueRequest, SignTokenResponse, SignupRequest, TokenResponse,
)
from plub.schemas.common import success
from plub.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _tokens(pair) -> TokenResponse:
    return TokenResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/login")
async def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = await auth.login(body)
    if result.tokens is not None:
        return success(_tokens(result.tokens), status_code=result.status_code)
    return success(
        SignTokenResponse(sign_token=result.sign_token),
        status_code=result.status_code,
        message="signup required",
    )


@router.post("/signup")
async def signup(
    body: SignupRequest,
    sign_token: str | None = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
):
    return success(_tokens(await auth.signup(sign_token, body)))


@router.post("/reissue")
async def reissue(body: ReissueRequest, auth: AuthService = Depends(get_auth_service)):
    return success(_tokens(await auth.reissue(body.refresh_token)))


@router.post("/logout")
async def logout(
    account: Account = Depends(get_current_account),
    auth: AuthService = Depends(get_auth_service),
):
    await auth.logout(account)
    return success("logout success")
