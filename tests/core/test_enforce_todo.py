"""Todo Rules - tests for the todo state machine and timeline cap.

Tests cover:
    - todo_state derivation from (checked, proof)
    - complete / cancel / proof / update transitions and their errors
    - check_timeline_capacity boundary (5th ok, 6th rejected)
"""

import pytest

from plub.core.domain_types import TodoState
from plub.core.enforce_todo import (
    check_can_cancel, check_can_complete, check_can_proof, check_can_update,
    check_timeline_capacity, todo_state,
)
from plub.core.errors import ErrorKind, PlubError


def test_todo_state_derivation():
    assert todo_state(False, False) is TodoState.OPEN
    assert todo_state(True, False) is TodoState.CHECKED
    assert todo_state(True, True) is TodoState.PROOFED


def test_complete_allowed_from_open_and_checked():
    check_can_complete(TodoState.OPEN)
    check_can_complete(TodoState.CHECKED)


def test_complete_rejected_after_proof():
    with pytest.raises(PlubError) as exc:
        check_can_complete(TodoState.PROOFED)
    assert exc.value.kind is ErrorKind.ALREADY_PROOF_TODO


def test_cancel_rejected_after_proof():
    with pytest.raises(PlubError) as exc:
        check_can_cancel(TodoState.PROOFED)
    assert exc.value.kind is ErrorKind.ALREADY_PROOF_TODO


def test_proof_requires_checked():
    check_can_proof(TodoState.CHECKED)
    with pytest.raises(PlubError) as exc:
        check_can_proof(TodoState.OPEN)
    assert exc.value.kind is ErrorKind.NOT_COMPLETE_TODO


def test_proof_is_final():
    with pytest.raises(PlubError) as exc:
        check_can_proof(TodoState.PROOFED)
    assert exc.value.kind is ErrorKind.ALREADY_PROOF_TODO


@pytest.mark.parametrize("state", [TodoState.CHECKED, TodoState.PROOFED])
def test_update_only_while_open(state):
    check_can_update(TodoState.OPEN)
    with pytest.raises(PlubError) as exc:
        check_can_update(state)
    assert exc.value.kind is ErrorKind.ALREADY_CHECKED_TODO


def test_timeline_capacity_boundary():
    check_timeline_capacity(4, 5)
    with pytest.raises(PlubError) as exc:
        check_timeline_capacity(5, 5)
    assert exc.value.kind is ErrorKind.TOO_MANY_TODO
