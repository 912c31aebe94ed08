"""Test factories - accounts, memberships, plubbing requests and a recording dispatcher."""

from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import (
    AccountStatus, MeetingDay, MembershipStatus, OnOff, Role, SocialType,
)
from plub.models.account import Account
from plub.models.plubbing import AccountPlubbing, Plubbing
from plub.schemas.plubbing import CreatePlubbingRequest


class RecordingDispatcher:
    """Collects push messages for assertions."""

    def __init__(self):
        self.messages = []

    def dispatch(self, message) -> None:
        self.messages.append(message)


async def make_account(db: AsyncSession, nickname: str, **overrides) -> Account:
    fields = dict(
        email=f"{nickname}-id@{SocialType.GOOGLE.value}",
        nickname=nickname,
        social_type=SocialType.GOOGLE.value,
        role=Role.USER.value,
        status=AccountStatus.NORMAL.value,
        fcm_token=f"fcm-{nickname}",
    )
    fields.update(overrides)
    account = Account(**fields)
    db.add(account)
    await db.commit()
    return account


async def join(db: AsyncSession, account: Account, plubbing: Plubbing) -> None:
    """Make account an ACTIVE member, bypassing the recruit flow."""
    db.add(AccountPlubbing(
        account_id=account.id, plubbing_id=plubbing.id, is_host=False,
        status=MembershipStatus.ACTIVE.value,
    ))
    plubbing.cur_account_num += 1
    await db.commit()


def plubbing_request(sub_category_id: int, **overrides) -> CreatePlubbingRequest:
    fields = dict(
        sub_category_ids=[sub_category_id],
        title="Morning runners wanted",
        name="Runners",
        goal="Run 5k every week",
        introduce="We run along the river.",
        days=[MeetingDay.MON, MeetingDay.WED],
        on_off=OnOff.OFF,
        max_account_num=4,
        questions=["Why do you run?", "Favourite distance?"],
    )
    fields.update(overrides)
    return CreatePlubbingRequest(**fields)
