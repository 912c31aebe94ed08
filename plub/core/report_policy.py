"""Report Policy - thresholds that turn report counts into sanctions.

Invariants:
    - Accounts: warned at 1 report, PAUSED at 3, BANNED at 6
    - Plubbings: host warned at 6 reports, PAUSED at 18
    - A warning push goes out only when the count lands exactly on a threshold
    - Sanctions are decided only from the count; callers apply them
"""

from dataclasses import dataclass

from plub.core.domain_types import AccountStatus, PlubbingStatus

REPORT_ACCOUNT_WARNING_PUSH_COUNT = 1
REPORT_ACCOUNT_PAUSED_COUNT = 3
REPORT_ACCOUNT_BAN_COUNT = 6
REPORT_WARNING_PUSH_COUNT = 6
REPORT_PLUBBING_PAUSE_COUNT = 18


@dataclass(frozen=True)
class Sanction:
    warn: bool = False
    account_status: AccountStatus | None = None
    plubbing_status: PlubbingStatus | None = None


def account_sanction(report_count: int) -> Sanction:
    status = None
    if report_count >= REPORT_ACCOUNT_BAN_COUNT:
        status = AccountStatus.BANNED
    elif report_count >= REPORT_ACCOUNT_PAUSED_COUNT:
        status = AccountStatus.PAUSED
    warn = report_count in (
        REPORT_ACCOUNT_WARNING_PUSH_COUNT,
        REPORT_ACCOUNT_PAUSED_COUNT,
        REPORT_ACCOUNT_BAN_COUNT,
    )
    return Sanction(warn=warn, account_status=status)


def plubbing_sanction(report_count: int) -> Sanction:
    status = None
    if report_count >= REPORT_PLUBBING_PAUSE_COUNT:
        status = PlubbingStatus.PAUSED
    warn = report_count in (REPORT_WARNING_PUSH_COUNT, REPORT_PLUBBING_PAUSE_COUNT)
    return Sanction(warn=warn, plubbing_status=status)
