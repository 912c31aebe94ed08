"""Account Service - profile reads and updates, nickname checks and withdrawal.

Invariants:
    - Nickname changes go through the rule check and the uniqueness check
    - Withdrawal keeps authored content but releases email and nickname,
      ends every membership, drops the refresh token and the FCM token
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import AccountStatus, MembershipStatus, SocialType
from plub.core.enforce_account import check_nickname_rule
from plub.core.errors import ErrorKind, PlubError
from plub.infrastructure.social_client import SocialClient
from plub.models.account import Account, RefreshToken
from plub.models.plubbing import AccountPlubbing, Plubbing
from plub.schemas.account import (
    AccountResponse, ProfileUpdateRequest, RevokeRequest,
)

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: AsyncSession, social_client: SocialClient | None = None):
        self.db = db
        self.social = social_client

    async def get_me(self, account: Account) -> AccountResponse:
        return AccountResponse.of(account)

    async def get_by_nickname(self, nickname: str) -> AccountResponse:
        result = await self.db.execute(
            select(Account).where(Account.nickname == nickname),
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise PlubError(ErrorKind.NOT_FOUND_ACCOUNT)
        return AccountResponse.of(account)

    async def is_nickname_taken(self, nickname: str) -> bool:
        """Rule violations raise; otherwise report whether the nickname is in use."""
        check_nickname_rule(nickname)
        result = await self.db.execute(
            select(Account.id).where(Account.nickname == nickname),
        )
        return result.first() is not None

    async def update_profile(
        self, account: Account, request: ProfileUpdateRequest,
    ) -> AccountResponse:
        if request.nickname is not None and request.nickname != account.nickname:
            if await self.is_nickname_taken(request.nickname):
                raise PlubError(ErrorKind.NICKNAME_DUPLICATION)
            account.nickname = request.nickname
        if request.introduce is not None:
            account.introduce = request.introduce
        if request.profile_image is not None:
            account.profile_image = request.profile_image
        await self.db.commit()
        logger.info("Profile updated", extra={"account_id": account.id})
        return AccountResponse.of(account)

    async def revoke(self, account: Account, request: RevokeRequest) -> None:
        if self.social is not None and account.email:
            provider_id = account.email.rsplit("@", 1)[0]
            await self.social.revoke(
                SocialType(account.social_type),
                provider_id,
                access_token=request.access_token,
                authorization_code=request.authorization_code,
            )

        await self.db.execute(
            delete(RefreshToken).where(RefreshToken.account_id == account.id),
        )
        active = await self.db.execute(
            select(AccountPlubbing.plubbing_id)
            .where(AccountPlubbing.account_id == account.id)
            .where(AccountPlubbing.status == MembershipStatus.ACTIVE.value)
        )
        plubbing_ids = list(active.scalars().all())
        if plubbing_ids:
            await self.db.execute(
                update(Plubbing)
                .where(Plubbing.id.in_(plubbing_ids))
                .values(cur_account_num=Plubbing.cur_account_num - 1)
            )
        await self.db.execute(
            update(AccountPlubbing)
            .where(AccountPlubbing.account_id == account.id)
            .values(status=MembershipStatus.EXIT.value)
        )
        account.status = AccountStatus.WITHDRAWN.value
        account.email = None
        account.nickname = None
        account.fcm_token = None
        await self.db.commit()
        logger.info("Account withdrawn", extra={"account_id": account.id})
