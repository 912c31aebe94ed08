"""Account Rules - tests for the nickname rule and account status gate."""

import pytest

from plub.core.domain_types import AccountStatus
from plub.core.enforce_account import check_account_active, check_nickname_rule
from plub.core.errors import ErrorKind, PlubError


@pytest.mark.parametrize("nickname", ["plub", "Runner01", "플럽", "a"])
def test_valid_nicknames(nickname):
    check_nickname_rule(nickname)


@pytest.mark.parametrize("nickname", ["", "toolongname", "with space", "emoji!"])
def test_invalid_nicknames(nickname):
    with pytest.raises(PlubError) as exc:
        check_nickname_rule(nickname)
    assert exc.value.kind is ErrorKind.NICKNAME_RULE_ERROR


def test_normal_account_is_active():
    check_account_active(AccountStatus.NORMAL)


@pytest.mark.parametrize("status", ["PAUSED", "BANNED"])
def test_suspended_accounts(status):
    with pytest.raises(PlubError) as exc:
        check_account_active(status)
    assert exc.value.kind is ErrorKind.SUSPENDED_ACCOUNT


def test_withdrawn_account_denied():
    with pytest.raises(PlubError) as exc:
        check_account_active(AccountStatus.WITHDRAWN)
    assert exc.value.kind is ErrorKind.FILTER_ACCESS_DENIED
