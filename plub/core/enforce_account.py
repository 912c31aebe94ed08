"""Account Rules - nickname format and account-status gates.

Invariants:
    - Nicknames are 1-8 characters of Latin letters, digits or Hangul
    - Only NORMAL accounts may act; PAUSED/BANNED are suspended, WITHDRAWN is gone
"""

import re

from plub.core.domain_types import AccountStatus
from plub.core.errors import ErrorKind, PlubError

NICKNAME_PATTERN = re.compile(r"^[0-9a-zA-Zㄱ-ㅎㅏ-ㅣ가-힣]{1,8}$")


def check_nickname_rule(nickname: str) -> None:
    if not NICKNAME_PATTERN.match(nickname):
        raise PlubError(ErrorKind.NICKNAME_RULE_ERROR)


def check_account_active(status: AccountStatus | str) -> None:
    status = AccountStatus(status)
    if status is AccountStatus.WITHDRAWN:
        raise PlubError(ErrorKind.FILTER_ACCESS_DENIED)
    if status is not AccountStatus.NORMAL:
        raise PlubError(ErrorKind.SUSPENDED_ACCOUNT)

