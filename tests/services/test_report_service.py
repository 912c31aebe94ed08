"""Report Service - duplicate guard, target resolution and threshold sanctions."""

import pytest
from sqlalchemy import select

from plub.core.domain_types import AccountStatus, ReportTarget, ReportType
from plub.core.errors import ErrorKind, PlubError
from plub.models.account import Account
from plub.services.report_service import ReportService, list_report_types
from tests.services.factories import make_account


async def _reporters(db, count: int) -> list[Account]:
    return [await make_account(db, f"rep{i}") for i in range(count)]


async def test_duplicate_report_rejected(test_db, member, outsider):
    service = ReportService(test_db)
    await service.create(outsider, ReportTarget.ACCOUNT, member.id, ReportType.BAD_WORDS)
    with pytest.raises(PlubError) as exc:
        await service.create(outsider, ReportTarget.ACCOUNT, member.id, ReportType.ETC)
    assert exc.value.kind is ErrorKind.DUPLICATE_REPORT


async def test_missing_target_rejected(test_db, outsider):
    with pytest.raises(PlubError) as exc:
        await ReportService(test_db).create(outsider, ReportTarget.FEED, 999, ReportType.ETC)
    assert exc.value.kind is ErrorKind.NOT_FOUND_REPORT_TARGET


async def test_account_escalates_with_report_count(test_db, member, dispatcher):
    service = ReportService(test_db, dispatcher)
    reporters = await _reporters(test_db, 6)

    for reporter in reporters[:3]:
        await service.create(reporter, ReportTarget.ACCOUNT, member.id, ReportType.BAD_WORDS)
    status = await test_db.scalar(select(Account.status).where(Account.id == member.id))
    assert status == AccountStatus.PAUSED.value

    for reporter in reporters[3:]:
        await service.create(reporter, ReportTarget.ACCOUNT, member.id, ReportType.BAD_WORDS)
    status = await test_db.scalar(select(Account.status).where(Account.id == member.id))
    assert status == AccountStatus.BANNED.value

    # warnings only on reports 1, 3 and 6
    assert len(dispatcher.messages) == 3
    assert {m.account_id for m in dispatcher.messages} == {member.id}


async def test_plubbing_report_records_plubbing(test_db, plubbing, outsider):
    response = await ReportService(test_db).create(
        outsider, ReportTarget.PLUBBING, plubbing.id, ReportType.ADVERTISEMENT, "spam",
    )
    assert response.report_target == ReportTarget.PLUBBING.value
    assert response.target_id == plubbing.id


def test_every_report_type_is_described():
    assert {r.report_type for r in list_report_types()} == set(ReportType)
