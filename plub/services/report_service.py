"""Report Service - files reports and applies threshold sanctions.

Invariants:
    - The target must exist (NOT_FOUND_REPORT_TARGET)
    - One report per (reporter, target type, target id) (DUPLICATE_REPORT)
    - ACCOUNT targets escalate NORMAL -> PAUSED -> BANNED; never de-escalate here
    - PLUBBING targets move to PAUSED at the plubbing threshold
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import (
    REPORT_TYPE_DESCRIPTIONS, AccountStatus, PlubbingStatus, ReportTarget, ReportType,
)
from plub.core.errors import ErrorKind, PlubError
from plub.core.notification import (
    NullDispatcher, PushDispatcher, plubbing_report_push, report_warning_push,
)
from plub.core.report_policy import account_sanction, plubbing_sanction
from plub.models.account import Account
from plub.models.feed import Feed, FeedComment
from plub.models.notice import Notice, NoticeComment
from plub.models.plubbing import Plubbing
from plub.models.recruit import Recruit
from plub.models.report import Report
from plub.schemas.report import ReportResponse, ReportTypeResponse
from plub.services.membership import MembershipGuard

logger = logging.getLogger(__name__)

_ACCOUNT_SEVERITY = {
    AccountStatus.NORMAL.value: 0,
    AccountStatus.PAUSED.value: 1,
    AccountStatus.BANNED.value: 2,
}


def list_report_types() -> list[ReportTypeResponse]:
    return [
        ReportTypeResponse(report_type=t, description=REPORT_TYPE_DESCRIPTIONS[t])
        for t in ReportType
    ]


class ReportService:

    def __init__(self, db: AsyncSession, dispatcher: PushDispatcher | None = None):
        self.db = db
        self.dispatcher = dispatcher or NullDispatcher()

    async def _target_plubbing_id(self, target: ReportTarget, target_id: int) -> int | None:
        """Resolve the target; returns the plubbing it belongs to, if any."""
        if target is ReportTarget.ACCOUNT:
            account = await self.db.get(Account, target_id)
            if account is None or account.status == AccountStatus.WITHDRAWN.value:
                raise PlubError(ErrorKind.NOT_FOUND_REPORT_TARGET)
            return None
        if target is ReportTarget.FEED_COMMENT:
            row = (await self.db.execute(
                select(Feed.plubbing_id)
                .join(FeedComment, FeedComment.feed_id == Feed.id)
                .where(FeedComment.id == target_id)
            )).first()
        elif target is ReportTarget.NOTICE_COMMENT:
            row = (await self.db.execute(
                select(Notice.plubbing_id)
                .join(NoticeComment, NoticeComment.notice_id == Notice.id)
                .where(NoticeComment.id == target_id)
            )).first()
        elif target is ReportTarget.PLUBBING:
            row = (await self.db.execute(
                select(Plubbing.id).where(Plubbing.id == target_id),
            )).first()
        else:
            model = {
                ReportTarget.RECRUIT: Recruit,
                ReportTarget.FEED: Feed,
                ReportTarget.NOTICE: Notice,
            }[target]
            row = (await self.db.execute(
                select(model.plubbing_id).where(model.id == target_id),
            )).first()
        if row is None:
            raise PlubError(ErrorKind.NOT_FOUND_REPORT_TARGET)
        return row[0]

    async def create(
        self,
        reporter: Account,
        target: ReportTarget,
        target_id: int,
        report_type: ReportType,
        reason: str | None = None,
    ) -> ReportResponse:
        plubbing_id = await self._target_plubbing_id(target, target_id)

        existing = await self.db.execute(
            select(Report.id)
            .where(Report.reporter_id == reporter.id)
            .where(Report.target_type == target.value)
            .where(Report.target_id == target_id)
        )
        if existing.first() is not None:
            raise PlubError(ErrorKind.DUPLICATE_REPORT)

        report = Report(
            reporter_id=reporter.id,
            target_type=target.value,
            target_id=target_id,
            report_type=report_type.value,
            reason=reason,
            plubbing_id=plubbing_id,
        )
        self.db.add(report)
        await self.db.flush()

        count = await self.db.scalar(
            select(func.count(Report.id))
            .where(Report.target_type == target.value)
            .where(Report.target_id == target_id)
        )
        if target is ReportTarget.ACCOUNT:
            await self._sanction_account(target_id, count)
        elif target is ReportTarget.PLUBBING:
            await self._sanction_plubbing(target_id, count)

        await self.db.commit()
        logger.info(
            f"Report filed on {target.value} {target_id}",
            extra={"account_id": reporter.id, "plubbing_id": plubbing_id},
        )
        return ReportResponse(
            report_id=report.id, report_target=target.value,
            target_id=target_id, report_type=report_type.value,
        )

    async def _sanction_account(self, account_id: int, count: int) -> None:
        account = await self.db.get(Account, account_id)
        sanction = account_sanction(count)
        if sanction.account_status is not None and (
            _ACCOUNT_SEVERITY[sanction.account_status.value]
            > _ACCOUNT_SEVERITY.get(account.status, 0)
        ):
            account.status = sanction.account_status.value
            logger.warning(
                f"Account status -> {account.status} after {count} reports",
                extra={"account_id": account.id},
            )
        if sanction.warn:
            self.dispatcher.dispatch(
                report_warning_push(account.id, account.fcm_token, count),
            )

    async def _sanction_plubbing(self, plubbing_id: int, count: int) -> None:
        plubbing = await self.db.get(Plubbing, plubbing_id)
        sanction = plubbing_sanction(count)
        if (
            sanction.plubbing_status is PlubbingStatus.PAUSED
            and plubbing.status == PlubbingStatus.ACTIVE.value
        ):
            plubbing.status = PlubbingStatus.PAUSED.value
            logger.warning(
                f"Plubbing paused after {count} reports",
                extra={"plubbing_id": plubbing.id},
            )
        if sanction.warn:
            host = await MembershipGuard(self.db).get_host(plubbing.id)
            if host is not None:
                self.dispatcher.dispatch(plubbing_report_push(
                    host.id, host.fcm_token, plubbing.name, count,
                ))
