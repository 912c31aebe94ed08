"""Feed Rules - tests for visibility, SYSTEM feeds, pin cap and authorship checks."""

import pytest

from plub.core.domain_types import ViewType
from plub.core.enforce_feed import (
    check_author, check_comment_deleter, check_comment_visible,
    check_feed_visible, check_not_system, check_pin_capacity,
)
from plub.core.errors import ErrorKind, PlubError


def test_hidden_feed_rejected():
    check_feed_visible(True)
    with pytest.raises(PlubError) as exc:
        check_feed_visible(False)
    assert exc.value.kind is ErrorKind.DELETED_STATUS_FEED


def test_hidden_comment_rejected():
    with pytest.raises(PlubError) as exc:
        check_comment_visible(False)
    assert exc.value.kind is ErrorKind.DELETED_STATUS_COMMENT


@pytest.mark.parametrize("view_type", [ViewType.SYSTEM, "SYSTEM"])
def test_system_feed_cannot_change(view_type):
    with pytest.raises(PlubError) as exc:
        check_not_system(view_type)
    assert exc.value.kind is ErrorKind.CANNOT_DELETE_FEED


def test_normal_feed_can_change():
    check_not_system(ViewType.NORMAL)


def test_pin_capacity_twentieth_ok_twenty_first_rejected():
    check_pin_capacity(19, 20)
    with pytest.raises(PlubError) as exc:
        check_pin_capacity(20, 20)
    assert exc.value.kind is ErrorKind.MAX_FEED_PIN


def test_author_check():
    check_author(1, 1)
    with pytest.raises(PlubError) as exc:
        check_author(1, 2)
    assert exc.value.kind is ErrorKind.NOT_FEED_AUTHOR_ERROR


def test_comment_deleter_is_comment_or_feed_author():
    check_comment_deleter(comment_author_id=1, feed_author_id=2, caller_id=1)
    check_comment_deleter(comment_author_id=1, feed_author_id=2, caller_id=2)
    with pytest.raises(PlubError):
        check_comment_deleter(comment_author_id=1, feed_author_id=2, caller_id=3)
