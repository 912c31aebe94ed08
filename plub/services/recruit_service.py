"""Recruit Service - recruiting post, applications, host decisions and bookmarks.

Invariants:
    - Applying needs a RUNNING recruit, a non-host, non-member applicant and answers
      covering exactly the recruit's questions
    - Accepting fails with FULL_PLUBBING once cur_account_num reaches max_accounts
    - Accepting creates (or reactivates) the membership, bumps the member count
      atomically and posts a SYSTEM feed announcing the member
    - Only WAITING applications can be accepted or rejected
    - Recruiting closes automatically when the plubbing becomes full
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import ApplicantStatus, MembershipStatus, RecruitStatus
from plub.core.errors import ErrorKind, PlubError
from plub.core.notification import (
    NullDispatcher, PushDispatcher, application_result_push, applicant_push,
)
from plub.models.account import Account
from plub.models.category import PlubbingSubCategory, SubCategory
from plub.models.plubbing import AccountPlubbing, Plubbing
from plub.models.recruit import AppliedAccount, Bookmark, Recruit, RecruitQuestion
from plub.schemas.plubbing import MemberResponse, PlubbingCardResponse
from plub.schemas.recruit import (
    AnswerResponse, ApplicantResponse, ApplicantStatusResponse, ApplyRequest,
    BookmarkResponse, QuestionResponse, RecruitResponse,
)
from plub.services.feed_service import FeedService
from plub.services.membership import MembershipGuard

logger = logging.getLogger(__name__)


class RecruitService:

    def __init__(self, db: AsyncSession, dispatcher: PushDispatcher | None = None):
        self.db = db
        self.guard = MembershipGuard(db)
        self.dispatcher = dispatcher or NullDispatcher()

    async def _get_recruit(self, plubbing_id: int) -> Recruit:
        result = await self.db.execute(
            select(Recruit).where(Recruit.plubbing_id == plubbing_id),
        )
        recruit = result.scalar_one_or_none()
        if recruit is None:
            raise PlubError(ErrorKind.NOT_FOUND_RECRUIT)
        return recruit

    async def _questions(self, recruit_id: int) -> list[RecruitQuestion]:
        result = await self.db.execute(
            select(RecruitQuestion)
            .where(RecruitQuestion.recruit_id == recruit_id)
            .order_by(RecruitQuestion.sort_order, RecruitQuestion.id)
        )
        return list(result.scalars().all())

    async def get_recruit(self, account: Account, plubbing_id: int) -> RecruitResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        recruit = await self._get_recruit(plubbing.id)
        await self.db.execute(
            update(Recruit).where(Recruit.id == recruit.id).values(views=Recruit.views + 1),
        )
        await self.db.execute(
            update(Plubbing).where(Plubbing.id == plubbing.id).values(views=Plubbing.views + 1),
        )
        await self.db.commit()

        categories = await self.db.execute(
            select(SubCategory.name)
            .join(PlubbingSubCategory, PlubbingSubCategory.sub_category_id == SubCategory.id)
            .where(PlubbingSubCategory.plubbing_id == plubbing.id)
            .order_by(SubCategory.id)
        )
        members = await self.guard.list_members(plubbing.id)
        host = next((m for m, is_host in members if is_host), None)
        bookmarked = await self.db.execute(
            select(Bookmark.id)
            .where(Bookmark.account_id == account.id)
            .where(Bookmark.recruit_id == recruit.id)
        )
        applied = await self.db.execute(
            select(AppliedAccount.id)
            .where(AppliedAccount.account_id == account.id)
            .where(AppliedAccount.recruit_id == recruit.id)
        )
        return RecruitResponse(
            recruit_id=recruit.id,
            title=recruit.title,
            introduce=recruit.introduce,
            status=recruit.status,
            views=recruit.views,
            plubbing=PlubbingCardResponse.of(plubbing),
            categories=list(categories.scalars().all()),
            host_nickname=host.nickname if host else None,
            host_profile_image=host.profile_image if host else None,
            members=[
                MemberResponse(
                    account_id=m.id, nickname=m.nickname,
                    profile_image=m.profile_image, is_host=is_host,
                )
                for m, is_host in members
            ],
            is_host=host is not None and host.id == account.id,
            is_bookmarked=bookmarked.first() is not None,
            is_applied=applied.first() is not None,
        )

    async def get_questions(self, plubbing_id: int) -> list[QuestionResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        recruit = await self._get_recruit(plubbing.id)
        return [
            QuestionResponse(question_id=q.id, question=q.question)
            for q in await self._questions(recruit.id)
        ]

    async def apply(
        self, account: Account, plubbing_id: int, request: ApplyRequest,
    ) -> int:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        recruit = await self._get_recruit(plubbing.id)
        if recruit.status != RecruitStatus.RUNNING.value:
            raise PlubError(ErrorKind.RECRUIT_CLOSED)
        if await self.guard.is_host(account, plubbing):
            raise PlubError(ErrorKind.HOST_CANNOT_APPLY)
        if await self.guard.is_member(account, plubbing):
            raise PlubError(ErrorKind.ALREADY_APPLIED_RECRUIT)

        existing = await self.db.execute(
            select(AppliedAccount)
            .where(AppliedAccount.account_id == account.id)
            .where(AppliedAccount.recruit_id == recruit.id)
        )
        application = existing.scalar_one_or_none()
        if application is not None and application.status != ApplicantStatus.REJECTED.value:
            raise PlubError(ErrorKind.ALREADY_APPLIED_RECRUIT)

        question_ids = [q.id for q in await self._questions(recruit.id)]
        answered = [a.question_id for a in request.answers]
        if sorted(answered) != sorted(question_ids):
            raise PlubError(ErrorKind.INVALID_ANSWER)

        answers = [
            {"questionId": a.question_id, "answer": a.answer} for a in request.answers
        ]
        if application is None:
            application = AppliedAccount(
                account_id=account.id, recruit_id=recruit.id, answers=answers,
                status=ApplicantStatus.WAITING.value,
            )
            self.db.add(application)
        else:
            application.answers = answers
            application.status = ApplicantStatus.WAITING.value
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise PlubError(ErrorKind.ALREADY_APPLIED_RECRUIT)
        await self.db.commit()
        logger.info(
            "Application submitted",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )

        host = await self.guard.get_host(plubbing.id)
        if host is not None:
            self.dispatcher.dispatch(applicant_push(
                host.id, host.fcm_token, plubbing.name, account.nickname or "",
            ))
        return application.id

    async def list_applicants(
        self, account: Account, plubbing_id: int,
    ) -> list[ApplicantResponse]:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)
        recruit = await self._get_recruit(plubbing.id)
        questions = {q.id: q.question for q in await self._questions(recruit.id)}

        result = await self.db.execute(
            select(AppliedAccount, Account)
            .join(Account, Account.id == AppliedAccount.account_id)
            .where(AppliedAccount.recruit_id == recruit.id)
            .where(AppliedAccount.status == ApplicantStatus.WAITING.value)
            .order_by(AppliedAccount.id)
        )
        return [
            ApplicantResponse(
                account_id=applicant.id,
                nickname=applicant.nickname,
                profile_image=applicant.profile_image,
                status=application.status,
                applied_at=application.created_at,
                answers=[
                    AnswerResponse(
                        question_id=a["questionId"],
                        question=questions.get(a["questionId"], ""),
                        answer=a["answer"],
                    )
                    for a in application.answers
                ],
            )
            for application, applicant in result.all()
        ]

    async def _waiting_application(
        self, recruit: Recruit, applicant_id: int,
    ) -> AppliedAccount:
        result = await self.db.execute(
            select(AppliedAccount)
            .where(AppliedAccount.account_id == applicant_id)
            .where(AppliedAccount.recruit_id == recruit.id)
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise PlubError(ErrorKind.NOT_FOUND_APPLICANT)
        if application.status != ApplicantStatus.WAITING.value:
            raise PlubError(ErrorKind.ALREADY_PROCESSED_APPLICANT)
        return application

    async def accept(
        self, account: Account, plubbing_id: int, applicant_id: int,
    ) -> ApplicantStatusResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)
        recruit = await self._get_recruit(plubbing.id)
        application = await self._waiting_application(recruit, applicant_id)
        if plubbing.cur_account_num >= plubbing.max_accounts:
            raise PlubError(ErrorKind.FULL_PLUBBING)
        applicant = await self.db.get(Account, applicant_id)
        if applicant is None:
            raise PlubError(ErrorKind.NOT_FOUND_APPLICANT)

        application.status = ApplicantStatus.ACCEPTED.value
        existing = await self.db.execute(
            select(AccountPlubbing)
            .where(AccountPlubbing.account_id == applicant.id)
            .where(AccountPlubbing.plubbing_id == plubbing.id)
        )
        membership = existing.scalar_one_or_none()
        if membership is None:
            self.db.add(AccountPlubbing(
                account_id=applicant.id, plubbing_id=plubbing.id, is_host=False,
                status=MembershipStatus.ACTIVE.value,
            ))
        else:
            membership.status = MembershipStatus.ACTIVE.value
        await self.db.execute(
            update(Plubbing)
            .where(Plubbing.id == plubbing.id)
            .values(cur_account_num=Plubbing.cur_account_num + 1)
        )
        await self.db.refresh(plubbing)
        if plubbing.cur_account_num >= plubbing.max_accounts:
            recruit.status = RecruitStatus.END.value

        await FeedService(self.db).create_system_feed(
            plubbing, applicant, plubbing.cur_account_num,
        )
        await self.db.commit()
        logger.info(
            "Applicant accepted",
            extra={"account_id": applicant.id, "plubbing_id": plubbing.id},
        )
        self.dispatcher.dispatch(application_result_push(
            applicant.id, applicant.fcm_token, plubbing.name, accepted=True,
        ))
        return ApplicantStatusResponse(account_id=applicant.id, status=application.status)

    async def reject(
        self, account: Account, plubbing_id: int, applicant_id: int,
    ) -> ApplicantStatusResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)
        recruit = await self._get_recruit(plubbing.id)
        application = await self._waiting_application(recruit, applicant_id)

        application.status = ApplicantStatus.REJECTED.value
        await self.db.commit()
        logger.info(
            "Applicant rejected",
            extra={"account_id": applicant_id, "plubbing_id": plubbing.id},
        )
        applicant = await self.db.get(Account, applicant_id)
        if applicant is not None:
            self.dispatcher.dispatch(application_result_push(
                applicant.id, applicant.fcm_token, plubbing.name, accepted=False,
            ))
        return ApplicantStatusResponse(account_id=applicant_id, status=application.status)

    async def close(self, account: Account, plubbing_id: int) -> None:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        await self.guard.check_host(account, plubbing)
        recruit = await self._get_recruit(plubbing.id)
        recruit.status = RecruitStatus.END.value
        await self.db.commit()
        logger.info(
            "Recruiting closed",
            extra={"account_id": account.id, "plubbing_id": plubbing.id},
        )

    async def toggle_bookmark(self, account: Account, plubbing_id: int) -> BookmarkResponse:
        plubbing = await self.guard.get_plubbing(plubbing_id)
        recruit = await self._get_recruit(plubbing.id)
        removed = await self.db.execute(
            delete(Bookmark)
            .where(Bookmark.account_id == account.id)
            .where(Bookmark.recruit_id == recruit.id)
            .execution_options(synchronize_session="evaluate")
        )
        bookmarked = not removed.rowcount
        if bookmarked:
            self.db.add(Bookmark(account_id=account.id, recruit_id=recruit.id))
            try:
                await self.db.flush()
            except IntegrityError:
                await self.db.rollback()
                raise PlubError(ErrorKind.DUPLICATE_REQUEST)
        await self.db.commit()
        return BookmarkResponse(recruit_id=recruit.id, is_bookmarked=bookmarked)

    async def my_bookmarks(self, account: Account) -> list[PlubbingCardResponse]:
        result = await self.db.execute(
            select(Plubbing)
            .join(Recruit, Recruit.plubbing_id == Plubbing.id)
            .join(Bookmark, Bookmark.recruit_id == Recruit.id)
            .where(Bookmark.account_id == account.id)
            .where(Plubbing.visibility.is_(True))
            .order_by(Bookmark.id.desc())
        )
        return [PlubbingCardResponse.of(p) for p in result.scalars().all()]
