"""Plubbing Service - group lifecycle: create, read, update, delete, end/resume, discovery.

Invariants:
    - Creating a plubbing also creates the host membership, the recruit with its
      questions and the sub-category links, in one transaction
    - Only the host mutates the plubbing
    - Delete is soft: status DELETED, visibility False, memberships END, recruit END
    - End/resume toggles ACTIVE <-> END together with every membership

Design Decisions:
    - Discovery lists use offset pages; only ACTIVE, visible plubbings are listed
    - Recommendation falls back to most viewed when the account has no preferences
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import (
    MembershipStatus, PlubbingStatus, RecruitStatus, SortType,
)
from plub.core.errors import ErrorKind, PlubError
from plub.core.pagination import Page, slice_page
from plub.models.account import Account, AccountCategory
from plub.models.category import Category, PlubbingSubCategory, SubCategory
from plub.models.plubbing import AccountPlubbing, Plubbing
from plub.models.recruit import Recruit, RecruitQuestion
from plub.schemas.plubbing import (
    CreatePlubbingRequest, MainPageResponse, MemberResponse, MyPlubbingResponse,
    PlubbingCardResponse, PlubbingStatusResponse, UpdatePlubbingRequest,
)
from plub.services.membership import MembershipGuard

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"name", "goal", "days", "on_off"}


def _listed(query):
    return (
        query.where(Plubbing.status == PlubbingStatus.ACTIVE.value)
        .where(Plubbing.visibility.is_(True))
    )


class PlubbingService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.guard = MembershipGuard(db)

    async def create(self, account: Account, request: CreatePlubbingRequest) -> int:
        sub_category_ids = list(dict.fromkeys(request.sub_category_ids))
        found = await self.db.execute(
            select(SubCategory.id).where(SubCategory.id.in_(sub_category_ids)),
        )
        if len(found.all()) != len(sub_category_ids):
            raise PlubError(ErrorKind.NOT_FOUND_SUB_CATEGORY)

        plubbing = Plubbing(
            name=request.name,
            goal=request.goal,
            introduce=request.introduce,
            main_image=request.main_image,
            status=PlubbingStatus.ACTIVE.value,
            visibility=True,
            days=[d.value for d in request.days],
            on_off=request.on_off.value,
            time=request.time,
            address=request.address,
            road_address=request.road_address,
            place_name=request.place_name,
            place_position_x=request.place_position_x,
            place_position_y=request.place_position_y,
            max_accounts=request.max_account_num,
            cur_account_num=1,
            views=0,
        )
        self.db.add(plubbing)
        await self.db.flush()

        self.db.add(AccountPlubbing(
            account_id=account.id, plubbing_id=plubbing.id, is_host=True,
            status=MembershipStatus.ACTIVE.value,
        ))
        for sub_category_id in sub_category_ids:
            self.db.add(PlubbingSubCategory(
                plubbing_id=plubbing.id, sub_category_id=sub_category_id,
            ))
        recruit = Recruit(
            plubbing_id=plubbing.id, title=request.title,
            introduce=request.introduce, status=RecruitStatus.RUNNING.value,
        )
        self.db.add(recruit)
        await self.db.flush()
        for order, question in enumerate(request.questions):
            self.db.add(RecruitQuestion(
                recruit_id=recruit.id, question=question, sort_order=order,
            ))

        await self.db.commit()
        logger.info(
            "Plubbing created",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )
        return plubbing.id

    async def get_main(self, account: Account, plubbing_id: int) -> MainPageResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        membership = await self.guard.get_membership(account.id, plubbing.id)
        if membership is None:
            raise PlubError(ErrorKind.FORBIDDEN_ACCESS_PLUBBING)
        members = await self.guard.list_members(plubbing.id)
        return MainPageResponse(
            plubbing=PlubbingCardResponse.of(plubbing),
            is_host=membership.is_host,
            members=[
                MemberResponse(
                    account_id=member.id, nickname=member.nickname,
                    profile_image=member.profile_image, is_host=is_host,
                )
                for member, is_host in members
            ],
        )

    async def my_plubbings(
        self, account: Account, is_host: bool | None = None,
    ) -> list[MyPlubbingResponse]:
        query = (
            select(Plubbing, AccountPlubbing.is_host)
            .join(AccountPlubbing, AccountPlubbing.plubbing_id == Plubbing.id)
            .where(AccountPlubbing.account_id == account.id)
            .where(AccountPlubbing.status == MembershipStatus.ACTIVE.value)
            .where(Plubbing.status != PlubbingStatus.DELETED.value)
            .order_by(AccountPlubbing.id.desc())
        )
        if is_host is not None:
            query = query.where(AccountPlubbing.is_host.is_(is_host))
        result = await self.db.execute(query)
        return [
            MyPlubbingResponse(
                **PlubbingCardResponse.of(plubbing).model_dump(), is_host=host,
            )
            for plubbing, host in result.all()
        ]

    async def update(
        self, account: Account, plubbing_id: int, request: UpdatePlubbingRequest,
    ) -> PlubbingCardResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)

        changes = request.model_dump(exclude_unset=True)
        if "max_account_num" in changes:
            max_accounts = changes.pop("max_account_num")
            if max_accounts is not None:
                if max_accounts < plubbing.cur_account_num:
                    raise PlubError(
                        ErrorKind.INVALID_INPUT_VALUE,
                        "maxAccountNum is below the current member count.",
                    )
                plubbing.max_accounts = max_accounts
        if changes.get("days") is not None:
            changes["days"] = [d.value for d in request.days]
        if changes.get("on_off") is not None:
            changes["on_off"] = request.on_off.value
        for field, value in changes.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            setattr(plubbing, field, value)

        await self.db.commit()
        logger.info(
            "Plubbing updated",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )
        return PlubbingCardResponse.of(plubbing)

    async def delete(self, account: Account, plubbing_id: int) -> None:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)

        plubbing.status = PlubbingStatus.DELETED.value
        plubbing.visibility = False
        await self.db.execute(
            update(AccountPlubbing)
            .where(AccountPlubbing.plubbing_id == plubbing.id)
            .values(status=MembershipStatus.END.value)
        )
        await self.db.execute(
            update(Recruit)
            .where(Recruit.plubbing_id == plubbing.id)
            .values(status=RecruitStatus.END.value)
        )
        await self.db.commit()
        logger.info(
            "Plubbing deleted",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )

    async def toggle_end(self, account: Account, plubbing_id: int) -> PlubbingStatusResponse:
        """ACTIVE -> END and END -> ACTIVE, memberships following the plubbing."""
        plubbing = await self.guard.get_plubbing(plubbing_id, include_ended=True)
        host = await self.db.execute(
            select(AccountPlubbing.id)
            .where(AccountPlubbing.plubbing_id == plubbing.id)
            .where(AccountPlubbing.account_id == account.id)
            .where(AccountPlubbing.is_host.is_(True))
        )
        if host.first() is None:
            raise PlubError(ErrorKind.NOT_HOST)

        if plubbing.status == PlubbingStatus.END.value:
            plubbing.status = PlubbingStatus.ACTIVE.value
            old, new = MembershipStatus.END, MembershipStatus.ACTIVE
        elif plubbing.status == PlubbingStatus.ACTIVE.value:
            plubbing.status = PlubbingStatus.END.value
            old, new = MembershipStatus.ACTIVE, MembershipStatus.END
        else:
            raise PlubError(ErrorKind.DELETED_STATUS_PLUBBING)

        await self.db.execute(
            update(AccountPlubbing)
            .where(AccountPlubbing.plubbing_id == plubbing.id)
            .where(AccountPlubbing.status == old.value)
            .values(status=new.value)
        )
        await self.db.commit()
        logger.info(
            f"Plubbing status -> {plubbing.status}",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )
        return PlubbingStatusResponse(plubbing_id=plubbing.id, status=plubbing.status)

    async def _card_page(self, query, page: int, size: int) -> Page[PlubbingCardResponse]:
        total = await self.db.scalar(
            select(func.count()).select_from(query.order_by(None).subquery()),
        )
        result = await self.db.execute(query.offset(page * size).limit(size + 1))
        rows = [PlubbingCardResponse.of(p) for p in result.scalars().all()]
        return slice_page(rows, size, total or 0)

    async def recommend(
        self, account: Account, page: int, size: int,
    ) -> Page[PlubbingCardResponse]:
        preferred = select(AccountCategory.sub_category_id).where(
            AccountCategory.account_id == account.id,
        )
        has_preferences = await self.db.scalar(
            select(func.count()).select_from(preferred.subquery()),
        )
        if has_preferences:
            matching = select(PlubbingSubCategory.plubbing_id).where(
                PlubbingSubCategory.sub_category_id.in_(preferred),
            )
            query = _listed(select(Plubbing).where(Plubbing.id.in_(matching))).order_by(
                Plubbing.views.desc(), Plubbing.id.desc(),
            )
        else:
            query = _listed(select(Plubbing)).order_by(
                Plubbing.views.desc(), Plubbing.id.desc(),
            )
        return await self._card_page(query, page, size)

    async def list_by_category(
        self, category_id: int, sort: SortType, page: int, size: int,
    ) -> Page[PlubbingCardResponse]:
        if await self.db.get(Category, category_id) is None:
            raise PlubError(ErrorKind.NOT_FOUND_CATEGORY)
        matching = (
            select(PlubbingSubCategory.plubbing_id)
            .join(SubCategory, SubCategory.id == PlubbingSubCategory.sub_category_id)
            .where(SubCategory.category_id == category_id)
        )
        query = _listed(select(Plubbing).where(Plubbing.id.in_(matching)))
        if sort is SortType.POPULAR:
            query = query.order_by(Plubbing.views.desc(), Plubbing.id.desc())
        else:
            query = query.order_by(Plubbing.id.desc())
        return await self._card_page(query, page, size)
