"""Membership Guard - plubbing lookup plus member / host authorization checks.

Invariants:
    - get_plubbing: missing -> NOT_FOUND_PLUBBING, DELETED or END -> DELETED_STATUS_PLUBBING
    - Only ACTIVE AccountPlubbing rows count as membership
    - The caller's account is always passed in explicitly; nothing is read from context
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import MembershipStatus, PlubbingStatus
from plub.core.errors import ErrorKind, PlubError
from plub.models.account import Account
from plub.models.plubbing import AccountPlubbing, Plubbing

logger = logging.getLogger(__name__)

_CLOSED_STATUSES = (PlubbingStatus.DELETED.value, PlubbingStatus.END.value)


class MembershipGuard:
    """Plubbing membership queries shared by every group-scoped service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_plubbing(
        self, plubbing_id: int, include_ended: bool = False,
    ) -> Plubbing:
        plubbing = await self.db.get(Plubbing, plubbing_id)
        if plubbing is None:
            raise PlubError(ErrorKind.NOT_FOUND_PLUBBING)
        if plubbing.status == PlubbingStatus.DELETED.value or (
            not include_ended and plubbing.status in _CLOSED_STATUSES
        ):
            raise PlubError(ErrorKind.DELETED_STATUS_PLUBBING)
        return plubbing

    async def get_membership(
        self, account_id: int, plubbing_id: int,
    ) -> AccountPlubbing | None:
        result = await self.db.execute(
            select(AccountPlubbing)
            .where(AccountPlubbing.account_id == account_id)
            .where(AccountPlubbing.plubbing_id == plubbing_id)
            .where(AccountPlubbing.status == MembershipStatus.ACTIVE.value)
        )
        return result.scalar_one_or_none()

    async def is_member(self, account: Account, plubbing: Plubbing) -> bool:
        return await self.get_membership(account.id, plubbing.id) is not None

    async def check_member(self, account: Account, plubbing: Plubbing) -> None:
        if not await self.is_member(account, plubbing):
            logger.warning(
                "Non-member access rejected",
                extra={"account_id": account.id, "plubbing_id": plubbing.id},
            )
            raise PlubError(ErrorKind.NOT_MEMBER)

    async def is_host(self, account: Account, plubbing: Plubbing) -> bool:
        membership = await self.get_membership(account.id, plubbing.id)
        return membership is not None and membership.is_host

    async def check_host(self, account: Account, plubbing: Plubbing) -> None:
        if not await self.is_host(account, plubbing):
            logger.warning(
                "Non-host action rejected",
                extra={"account_id": account.id, "plubbing_id": plubbing.id},
            )
            raise PlubError(ErrorKind.NOT_HOST)

    async def get_host(self, plubbing_id: int) -> Account | None:
        result = await self.db.execute(
            select(Account)
            .join(AccountPlubbing, AccountPlubbing.account_id == Account.id)
            .where(AccountPlubbing.plubbing_id == plubbing_id)
            .where(AccountPlubbing.is_host.is_(True))
        )
        return result.scalars().first()

    async def list_members(self, plubbing_id: int) -> list[tuple[Account, bool]]:
        """Active members with their host flag, host first."""
        result = await self.db.execute(
            select(Account, AccountPlubbing.is_host)
            .join(AccountPlubbing, AccountPlubbing.account_id == Account.id)
            .where(AccountPlubbing.plubbing_id == plubbing_id)
            .where(AccountPlubbing.status == MembershipStatus.ACTIVE.value)
            .order_by(AccountPlubbing.is_host.desc(), AccountPlubbing.id)
        )
        return [(account, bool(is_host)) for account, is_host in result.all()]
