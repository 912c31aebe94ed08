"""Account Routes - own profile, profile lookup, nickname check and withdrawal."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account, get_social_client
from plub.infrastructure.database import get_db
from plub.infrastructure.social_client import SocialClient
from plub.models.account import Account
from plub.schemas.account import (
    NicknameCheckResponse, ProfileUpdateRequest, RevokeRequest,
)
from plub.schemas.common import success
from plub.services.account_service import AccountService

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("/me")
async def get_me(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await AccountService(db).get_me(account))


@router.put("/me")
async def update_me(
    body: ProfileUpdateRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await AccountService(db).update_profile(account, body))


@router.post("/me/revoke")
async def revoke(
    body: RevokeRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    social_client: SocialClient = Depends(get_social_client),
):
    await AccountService(db, social_client).revoke(account, body)
    return success("revoke success")


@router.get("/check/nickname/{nickname}")
async def check_nickname(
    nickname: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    taken = await AccountService(db).is_nickname_taken(nickname)
    return success(NicknameCheckResponse(is_available=not taken))


@router.get("/{nickname}")
async def get_account(
    nickname: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await AccountService(db).get_by_nickname(nickname))
