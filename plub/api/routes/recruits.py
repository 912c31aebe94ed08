"""Recruit Routes - recruiting post, applications, host decisions and bookmarks."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from plub.api.deps import get_current_account, get_dispatcher
from plub.core.notification import PushDispatcher
from plub.infrastructure.database import get_db
from plub.models.account import Account
from plub.schemas.common import success
from plub.schemas.plubbing import PlubbingIdResponse
from plub.schemas.recruit import ApplyRequest
from plub.services.recruit_service import RecruitService

router = APIRouter(prefix="/api/plubbings/{plubbing_id}/recruit", tags=["recruits"])
bookmark_router = APIRouter(prefix="/api/recruits", tags=["recruits"])


@router.get("")
async def get_recruit(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await RecruitService(db).get_recruit(account, plubbing_id))


@router.get("/questions")
async def get_questions(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    questions = await RecruitService(db).get_questions(plubbing_id)
    return success({"questions": questions})


@router.post("/applicants")
async def apply(
    plubbing_id: int,
    body: ApplyRequest,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    await RecruitService(db, dispatcher).apply(account, plubbing_id, body)
    return success(PlubbingIdResponse(plubbing_id=plubbing_id))


@router.get("/applicants")
async def list_applicants(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    applicants = await RecruitService(db).list_applicants(account, plubbing_id)
    return success({"appliedAccounts": applicants})


@router.post("/applicants/{account_id}/approval")
async def accept_applicant(
    plubbing_id: int,
    account_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    result = await RecruitService(db, dispatcher).accept(account, plubbing_id, account_id)
    return success(result)


@router.post("/applicants/{account_id}/refuse")
async def reject_applicant(
    plubbing_id: int,
    account_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
):
    result = await RecruitService(db, dispatcher).reject(account, plubbing_id, account_id)
    return success(result)


@router.put("/done")
async def close_recruit(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    await RecruitService(db).close(account, plubbing_id)
    return success(PlubbingIdResponse(plubbing_id=plubbing_id))


@router.post("/bookmarks")
async def toggle_bookmark(
    plubbing_id: int,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success(await RecruitService(db).toggle_bookmark(account, plubbing_id))


@bookmark_router.get("/bookmarks/me")
async def my_bookmarks(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    return success({"plubbings": await RecruitService(db).my_bookmarks(account)})
