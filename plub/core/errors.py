"""Error Model - one exception type tagged with an ErrorKind.

Invariants:
    - Every ErrorKind value is an (http_status, status_code, message) triple
    - status_code values are unique across kinds (clients switch on them)
    - to_response() produces the uniform envelope {statusCode, message, data}
    - No internal details leaked in user-facing messages

Design Decisions:
    - A single tagged enum replaces one exception class per domain: the global
      handler needs only the triple, never the class
    - Kinds are grouped by numeric range (2xxx auth, 3xxx account, 4xxx category,
      5xxx recruit, 6xxx plubbing, 7xxx todo, 8xxx feed/notice, 9xxx common)
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Tagged error kinds: (http_status, status_code, message)."""

    # Common
    COMMON_BAD_REQUEST = (400, 9000, "bad request.")
    INVALID_INPUT_VALUE = (400, 9010, "invalid input value.")
    METHOD_NOT_ALLOWED = (405, 9020, "method not allowed.")
    INTERNAL_SERVER_ERROR = (500, 9030, "server error.")
    HTTP_CLIENT_ERROR = (400, 9040, "http client error.")
    FILE_SIZE_EXCEEDED = (400, 9050, "file size exceeded.")
    DATABASE_ERROR = (503, 9060, "database error.")
    DUPLICATE_REQUEST = (409, 9070, "duplicate request.")

    # Auth
    FILTER_ACCESS_DENIED = (401, 2000, "access denied.")
    APPLE_LOGIN_ERROR = (400, 2020, "apple login error.")
    SIGNUP_TOKEN_ERROR = (400, 2030, "invalid sign up token error.")
    NOT_FOUND_REFRESH_TOKEN = (404, 2040, "not found refresh token.")
    SOCIAL_TYPE_ERROR = (400, 2050, "unsupported social type.")
    SOCIAL_LOGIN_ERROR = (400, 2060, "social login error.")
    ENCRYPTION_FAILURE = (400, 2100, "encryption failure.")
    DECRYPTION_FAILURE = (400, 2110, "decryption failed.")

    # Account
    NOT_FOUND_ACCOUNT = (404, 3000, "not found account.")
    NICKNAME_DUPLICATION = (400, 3010, "nickname is duplicated.")
    EMAIL_DUPLICATION = (400, 3020, "email is duplicated.")
    NICKNAME_RULE_ERROR = (400, 3030, "nickname rule error.")
    SUSPENDED_ACCOUNT = (403, 3040, "suspended account.")

    # Category
    NOT_FOUND_CATEGORY = (404, 4000, "not found category.")
    NOT_FOUND_SUB_CATEGORY = (404, 4010, "not found sub category.")

    # Recruit
    NOT_FOUND_RECRUIT = (404, 5000, "not found recruit.")
    ALREADY_APPLIED_RECRUIT = (400, 5010, "already applied recruit.")
    HOST_CANNOT_APPLY = (400, 5020, "host cannot apply to own recruit.")
    NOT_FOUND_APPLICANT = (404, 5030, "not found applicant.")
    ALREADY_PROCESSED_APPLICANT = (400, 5040, "already processed applicant.")
    RECRUIT_CLOSED = (400, 5050, "recruit is closed.")
    FULL_PLUBBING = (400, 5060, "plubbing is full.")
    INVALID_ANSWER = (400, 5070, "answers do not match recruit questions.")

    # Plubbing
    NOT_FOUND_PLUBBING = (404, 6010, "not found plubbing error.")
    FORBIDDEN_ACCESS_PLUBBING = (403, 6020, "this account is not joined this plubbing.")
    NOT_HOST = (403, 6030, "not host error.")
    DELETED_STATUS_PLUBBING = (404, 6040, "deleted/ended status error.")
    NOT_MEMBER = (403, 6100, "this account is not a member of this plubbing.")

    # Todo
    NOT_FOUND_TODO = (404, 7000, "not found todo.")
    NOT_FOUND_TODO_TIMELINE = (404, 7010, "not found todo timeline.")
    TOO_MANY_TODO = (400, 7020, "too many todo in timeline.")
    ALREADY_CHECKED_TODO = (400, 7030, "already checked todo.")
    ALREADY_PROOF_TODO = (400, 7040, "already proof todo.")
    NOT_COMPLETE_TODO = (400, 7050, "not complete todo.")
    NOT_TODO_AUTHOR = (403, 7060, "not todo author.")

    # Feed
    NOT_FOUND_FEED = (404, 8010, "not found feed.")
    NOT_FOUND_COMMENT = (404, 8020, "not found comment.")
    NOT_FEED_AUTHOR_ERROR = (403, 8030, "not feed author error.")
    DELETED_STATUS_FEED = (400, 8040, "deleted status feed.")
    DELETED_STATUS_COMMENT = (400, 8050, "deleted status comment.")
    CANNOT_DELETE_FEED = (400, 8060, "system feed cannot be changed.")
    MAX_FEED_PIN = (400, 8070, "max feed pin count exceeded.")

    # Notice
    NOT_FOUND_NOTICE = (404, 8510, "not found notice.")
    DELETED_STATUS_NOTICE = (400, 8520, "deleted status notice.")
    NOT_FOUND_NOTICE_COMMENT = (404, 8530, "not found notice comment.")
    DELETED_STATUS_NOTICE_COMMENT = (400, 8540, "deleted status notice comment.")
    NOT_NOTICE_AUTHOR = (403, 8550, "not notice author.")

    # Report
    NOT_FOUND_REPORT_TARGET = (404, 1110, "not found report target.")
    DUPLICATE_REPORT = (400, 1120, "already reported.")

    @property
    def http_status(self) -> int:
        return self.value[0]

    @property
    def status_code(self) -> int:
        return self.value[1]

    @property
    def message(self) -> str:
        return self.value[2]


class PlubError(Exception):
    """Base exception for every Plub failure mode."""

    def __init__(
        self,
        kind: ErrorKind,
        detail: str | None = None,
        data: Any = None,
    ):
        message = kind.message if not detail else f"{kind.message} {detail}"
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.data = data

    @property
    def http_status(self) -> int:
        return self.kind.http_status

    @property
    def code(self) -> int:
        return self.kind.status_code

    def to_response(self) -> dict:
        """Convert to the uniform response envelope."""
        return {
            "statusCode": self.code,
            "message": self.message,
            "data": self.data,
        }
