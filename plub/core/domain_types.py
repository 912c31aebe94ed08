"""Domain Types - enums and identity types shared across layers.

Invariants:
    - All valid states encoded as str Enums; DB columns store the enum value
    - AccountId, PlubbingId, FeedId, CommentId, TimelineId wrap integer primary keys

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# --- Identity Types -------------------------------------------------------

AccountId = NewType("AccountId", int)
PlubbingId = NewType("PlubbingId", int)
FeedId = NewType("FeedId", int)
CommentId = NewType("CommentId", int)
TimelineId = NewType("TimelineId", int)


# --- Account --------------------------------------------------------------

class SocialType(str, Enum):
    GOOGLE = "GOOGLE"
    KAKAO = "KAKAO"
    APPLE = "APPLE"
    NAVER = "NAVER"


class Role(str, Enum):
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"


class AccountStatus(str, Enum):
    """Account lifecycle. PAUSED and BANNED come from report thresholds."""
    NORMAL = "NORMAL"
    PAUSED = "PAUSED"
    BANNED = "BANNED"
    WITHDRAWN = "WITHDRAWN"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    SIGN = "sign"


# --- Plubbing -------------------------------------------------------------

class PlubbingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    END = "END"
    DELETED = "DELETED"
    PAUSED = "PAUSED"


class OnOff(str, Enum):
    ON = "ON"
    OFF = "OFF"


class MeetingDay(str, Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THR = "THR"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"
    ALL = "ALL"


class MembershipStatus(str, Enum):
    ACTIVE = "ACTIVE"
    END = "END"
    EXIT = "EXIT"


class RecruitStatus(str, Enum):
    RUNNING = "RUNNING"
    END = "END"


class ApplicantStatus(str, Enum):
    WAITING = "WAITING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class SortType(str, Enum):
    POPULAR = "popular"
    NEWEST = "newest"


# --- Feed -----------------------------------------------------------------

class ViewType(str, Enum):
    """SYSTEM feeds are generated announcements and never change."""
    NORMAL = "NORMAL"
    SYSTEM = "SYSTEM"


class FeedType(str, Enum):
    LINE = "LINE"
    PHOTO = "PHOTO"
    PHOTO_LINE = "PHOTO_LINE"


# --- Todo -----------------------------------------------------------------

class TodoState(str, Enum):
    """Derived from (checked, proof): OPEN -> CHECKED -> PROOFED."""
    OPEN = "OPEN"
    CHECKED = "CHECKED"
    PROOFED = "PROOFED"


# --- Report ---------------------------------------------------------------

class ReportTarget(str, Enum):
    ACCOUNT = "ACCOUNT"
    PLUBBING = "PLUBBING"
    RECRUIT = "RECRUIT"
    FEED = "FEED"
    FEED_COMMENT = "FEED_COMMENT"
    NOTICE = "NOTICE"
    NOTICE_COMMENT = "NOTICE_COMMENT"


class ReportType(str, Enum):
    BAD_WORDS = "BAD_WORDS"
    FALSE_FACT = "FALSE_FACT"
    BROADCASTING = "BROADCASTING"
    ADVERTISEMENT = "ADVERTISEMENT"
    INAPPROPRIATE_CONTENT = "INAPPROPRIATE_CONTENT"
    ETC = "ETC"


REPORT_TYPE_DESCRIPTIONS: dict[ReportType, str] = {
    ReportType.BAD_WORDS: "Abusive or offensive language",
    ReportType.FALSE_FACT: "Spreading false information",
    ReportType.BROADCASTING: "Unauthorized broadcasting or spam",
    ReportType.ADVERTISEMENT: "Advertising or promotion",
    ReportType.INAPPROPRIATE_CONTENT: "Sexual or violent content",
    ReportType.ETC: "Other",
}
