"""Notification Contracts - push messages produced by services.

Invariants:
    - Services build PushMessage values and hand them to a PushDispatcher
    - Dispatch is fire-and-forget: dispatch() never raises into the service
    - Core never imports the push client; the shell provides the dispatcher

Design Decisions:
    - Protocol over ABC: tests pass a plain list-collecting object
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class PushMessage:
    """A single push notification addressed to one account."""
    account_id: int
    fcm_token: str | None
    title: str
    body: str


class PushDispatcher(Protocol):
    """Contract for handing push messages off for delivery."""
    def dispatch(self, message: PushMessage) -> None: ...


class NullDispatcher:
    """Drops every message. Used where no delivery channel is wired."""

    def dispatch(self, message: PushMessage) -> None:
        return None


def comment_push(
    feed_author_id: int,
    feed_author_token: str | None,
    plubbing_name: str,
    commenter_nickname: str,
    feed_author_nickname: str,
    content: str,
) -> PushMessage:
    return PushMessage(
        account_id=feed_author_id,
        fcm_token=feed_author_token,
        title=plubbing_name,
        body=(
            f"{commenter_nickname} left a comment on "
            f"{feed_author_nickname}'s post\n : {content}"
        ),
    )


def applicant_push(
    host_id: int, host_token: str | None, plubbing_name: str, applicant_nickname: str,
) -> PushMessage:
    return PushMessage(
        account_id=host_id,
        fcm_token=host_token,
        title=plubbing_name,
        body=f"{applicant_nickname} applied to join {plubbing_name}.",
    )


def application_result_push(
    account_id: int, fcm_token: str | None, plubbing_name: str, accepted: bool,
) -> PushMessage:
    outcome = "accepted" if accepted else "declined"
    return PushMessage(
        account_id=account_id,
        fcm_token=fcm_token,
        title=plubbing_name,
        body=f"Your application to {plubbing_name} was {outcome}.",
    )


def report_warning_push(
    account_id: int, fcm_token: str | None, report_count: int,
) -> PushMessage:
    return PushMessage(
        account_id=account_id,
        fcm_token=fcm_token,
        title="Report notice",
        body=f"Your account has been reported {report_count} time(s).",
    )


def plubbing_report_push(
    host_id: int, host_token: str | None, plubbing_name: str, report_count: int,
) -> PushMessage:
    return PushMessage(
        account_id=host_id,
        fcm_token=host_token,
        title=plubbing_name,
        body=f"{plubbing_name} has been reported {report_count} time(s).",
    )
