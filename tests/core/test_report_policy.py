"""Report Policy - tests for account and plubbing report thresholds."""

import pytest

from plub.core.domain_types import AccountStatus, PlubbingStatus
from plub.core.report_policy import account_sanction, plubbing_sanction


@pytest.mark.parametrize("count,status,warn", [
    (1, None, True),
    (2, None, False),
    (3, AccountStatus.PAUSED, True),
    (4, AccountStatus.PAUSED, False),
    (6, AccountStatus.BANNED, True),
    (7, AccountStatus.BANNED, False),
])
def test_account_sanction(count, status, warn):
    sanction = account_sanction(count)
    assert sanction.account_status is status
    assert sanction.warn is warn


@pytest.mark.parametrize("count,status,warn", [
    (5, None, False),
    (6, None, True),
    (17, None, False),
    (18, PlubbingStatus.PAUSED, True),
    (19, PlubbingStatus.PAUSED, False),
])
def test_plubbing_sanction(count, status, warn):
    sanction = plubbing_sanction(count)
    assert sanction.plubbing_status is status
    assert sanction.warn is warn
