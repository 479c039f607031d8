"""
Data model for the JSON the backend hands us.

These are read-only projections: the backend owns the real entities and their
rules (capacity, waitlist position, clash detection). The client only parses
what it receives so that all modules share the same field names.

Every from_dict() is tolerant: missing keys get defaults, unknown keys are
kept in `raw` for display code that wants them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Union


ROLES = ("student", "organizer", "admin")
ANONYMOUS = "anonymous"
DEFAULT_ROLE = "student"

EVENT_STATUSES = ("draft", "published", "cancelled", "completed")
VISIBILITIES = ("university", "public", "inter_university")
REGISTRATION_STATUSES = ("registered", "attended", "cancelled", "waitlisted")


def _int_or_none(x: Any) -> Optional[int]:
    try:
        return int(x)
    except (TypeError, ValueError):
        return None


def _str(x: Any) -> str:
    return "" if x is None else str(x)


def as_list(payload: Any) -> list[Any]:
    """
    Normalize a list response or a paginated {"results": [...]} response.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return payload["results"]
    return []


def parse_datetime(value: Any) -> Optional[datetime]:
    text = _str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """
    'Mar 4, 2026'. Unparseable input is returned as-is.
    """
    dt = parse_datetime(value)
    if dt is None:
        return _str(value)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def format_time(value: Any) -> str:
    """
    '02:30 PM'. Unparseable input is returned as-is.
    """
    dt = parse_datetime(value)
    if dt is None:
        return _str(value)
    return dt.strftime("%I:%M %p")


def is_upcoming(value: Any, now: Optional[datetime] = None) -> bool:
    """
    True when the timestamp lies after `now`. Naive timestamps are read as UTC.
    """
    dt = parse_datetime(value)
    if dt is None:
        return False
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return dt > now


@dataclass
class Profile:
    user_type: str = DEFAULT_ROLE
    id: Optional[int] = None
    university: Optional[int] = None
    university_name: Optional[str] = None
    contact_number: Optional[str] = None
    department: Optional[str] = None
    is_verified: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Profile":
        d = data if isinstance(data, dict) else {}
        user_type = _str(d.get("user_type")).strip().lower()
        return cls(
            user_type=user_type if user_type in ROLES else DEFAULT_ROLE,
            id=_int_or_none(d.get("id")),
            university=_int_or_none(d.get("university")),
            university_name=d.get("university_name") or None,
            contact_number=d.get("contact_number") or None,
            department=d.get("department") or None,
            is_verified=bool(d.get("is_verified", False)),
            raw=dict(d),
        )


@dataclass
class User:
    """
    The logged-in identity, as returned by /profiles/me/.
    """

    id: Optional[int]
    username: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    profile: Profile = field(default_factory=Profile)

    @property
    def role(self) -> str:
        return self.profile.user_type

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.username

    @property
    def initials(self) -> str:
        parts = [p for p in self.display_name.split() if p]
        letters = "".join(p[0] for p in parts).upper()[:2]
        return letters or "U"

    @classmethod
    def from_me(cls, payload: Any, username: str = "") -> "User":
        d = payload if isinstance(payload, dict) else {}
        user = d.get("user") if isinstance(d.get("user"), dict) else {}
        return cls(
            id=_int_or_none(user.get("id")),
            username=_str(user.get("username")) or username,
            email=_str(user.get("email")),
            first_name=_str(user.get("first_name")),
            last_name=_str(user.get("last_name")),
            profile=Profile.from_dict(d.get("profile")),
        )

    @classmethod
    def from_profile(cls, profile: Any, username: str = "") -> "User":
        """
        Fallback identity built from a bare /profiles/ entry.
        """
        p = Profile.from_dict(profile)
        user_id = _int_or_none(p.raw.get("user"))
        return cls(
            id=user_id,
            username=username or (str(user_id) if user_id is not None else "user"),
            first_name=_str(p.raw.get("first_name")),
            last_name=_str(p.raw.get("last_name")),
            profile=p,
        )


@dataclass
class Event:
    id: int
    title: str
    description: str = ""
    date_time: str = ""
    category: Optional[int] = None
    category_name: str = ""
    host_university: Optional[int] = None
    university_name: str = ""
    venue_name: str = ""
    participant_limit: Optional[int] = None
    registered_count: int = 0
    visibility: str = "university"
    status: str = "draft"
    is_full: bool = False
    user_registration_status: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        d = data if isinstance(data, dict) else {}
        return cls(
            id=_int_or_none(d.get("id")) or 0,
            title=_str(d.get("title")),
            description=_str(d.get("description")),
            date_time=_str(d.get("date_time")),
            category=_int_or_none(d.get("category")),
            category_name=_str(d.get("category_name")),
            host_university=_int_or_none(d.get("host_university")),
            university_name=_str(d.get("university_name") or d.get("host_university_name")),
            venue_name=_str(d.get("venue_name")),
            participant_limit=_int_or_none(d.get("participant_limit")),
            registered_count=_int_or_none(d.get("registered_count")) or 0,
            visibility=_str(d.get("visibility")) or "university",
            status=_str(d.get("status")) or "draft",
            is_full=bool(d.get("is_full", False)),
            user_registration_status=d.get("user_registration_status") or None,
            raw=dict(d),
        )

    @property
    def occupancy(self) -> str:
        if self.participant_limit:
            return f"{self.registered_count}/{self.participant_limit}"
        return str(self.registered_count)


@dataclass
class Registration:
    id: Optional[int]
    status: str
    registered_at: str = ""
    event: Optional[Event] = None
    event_title: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Registration":
        d = data if isinstance(data, dict) else {}
        event = Event.from_dict(d["event"]) if isinstance(d.get("event"), dict) else None
        return cls(
            id=_int_or_none(d.get("id")),
            status=_str(d.get("status")) or "registered",
            registered_at=_str(d.get("registered_at")),
            event=event,
            event_title=_str(d.get("event_title")),
        )

    @property
    def title(self) -> str:
        if self.event and self.event.title:
            return self.event.title
        return self.event_title or "Unknown Event"


@dataclass
class ClashingEvent:
    """
    One entry of the `clashing_events` list carried by a 409 on registration.
    """

    id: Optional[int]
    title: str
    date_time: str = ""
    venue_name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ClashingEvent":
        d = data if isinstance(data, dict) else {}
        return cls(
            id=_int_or_none(d.get("id")),
            title=_str(d.get("title")),
            date_time=_str(d.get("date_time")),
            venue_name=_str(d.get("venue_name")),
        )


@dataclass
class University:
    id: Optional[int]
    name: str
    short_code: str = ""
    domain: str = ""
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "University":
        d = data if isinstance(data, dict) else {}
        return cls(
            id=_int_or_none(d.get("id")),
            name=_str(d.get("name")),
            short_code=_str(d.get("short_code")),
            domain=_str(d.get("domain")),
            is_active=bool(d.get("is_active", True)),
        )


@dataclass
class Category:
    id: Optional[int]
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> "Category":
        d = data if isinstance(data, dict) else {}
        return cls(id=_int_or_none(d.get("id")), name=_str(d.get("name")))


# Session state: exactly one of these at a time.


@dataclass(frozen=True)
class Unknown:
    """
    Initial state, before the stored token has been checked.
    """


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    user: User


SessionState = Union[Unknown, Anonymous, Authenticated]
