"""Todo Rules - pure state-machine checks for todo items.

Invariants:
    - State is derived from (checked, proof): OPEN (F, F), CHECKED (T, F), PROOFED (T, T)
    - Transitions: OPEN -> CHECKED -> PROOFED, and CHECKED -> OPEN (cancel)
    - A proof can never be undone; edits are allowed only while OPEN
    - A timeline holds at most `cap` todos
    - Every check raises PlubError or returns None (no IO)
"""

from plub.core.domain_types import TodoState
from plub.core.errors import ErrorKind, PlubError


def todo_state(checked: bool, proof: bool) -> TodoState:
    if proof:
        return TodoState.PROOFED
    if checked:
        return TodoState.CHECKED
    return TodoState.OPEN


def check_timeline_capacity(current_count: int, cap: int) -> None:
    """Reject adding one more todo to a timeline already holding `cap` items."""
    if current_count >= cap:
        raise PlubError(ErrorKind.TOO_MANY_TODO)


def check_can_complete(state: TodoState) -> None:
    if state is TodoState.PROOFED:
        raise PlubError(ErrorKind.ALREADY_PROOF_TODO)


def check_can_cancel(state: TodoState) -> None:
    if state is TodoState.PROOFED:
        raise PlubError(ErrorKind.ALREADY_PROOF_TODO)


def check_can_proof(state: TodoState) -> None:
    if state is TodoState.PROOFED:
        raise PlubError(ErrorKind.ALREADY_PROOF_TODO)
    if state is TodoState.OPEN:
        raise PlubError(ErrorKind.NOT_COMPLETE_TODO)


def check_can_update(state: TodoState) -> None:
    if state is not TodoState.OPEN:
        raise PlubError(ErrorKind.ALREADY_CHECKED_TODO)
