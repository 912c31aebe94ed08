"""Report Routes - report types and filing."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account, get_dispatcher
from plub.core.notification import PushDispatcher
from plub.infrastructure.database import get_db
from plub.models.account import Account
from plub.schemas.common import success
from plub.schemas.report import CreateReportRequest
from plub.services.report_service import ReportService, list_report_types

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("")
async def report_types(account: Account = Depends(get_current_account)):
    return success({"reportTypes": list_report_types()})


@router.post("")
async def create_report(
    body: CreateReportRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    report = await ReportService(db, dispatcher).create(
        account, body.report_target, body.target_id, body.report_type, body.reason,
    )
    return success(report)
