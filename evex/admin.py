"""
Admin area: platform overview, event moderation, users and universities.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from evex.model import EVENT_STATUSES, Event, University, as_list
from evex.page import Page
from evex.routes import DASHBOARDS


logger = logging.getLogger(__name__)

ADMIN = "admin"
HOME = DASHBOARDS[ADMIN]


def _dict(x: Any) -> dict[str, Any]:
    return x if isinstance(x, dict) else {}


class AdminOverviewPage(Page):
    role = ADMIN
    path = HOME

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.analytics = self.resource("analytics", self.api.admin.analytics, "Failed to load analytics.")

    @property
    def overview(self) -> dict[str, Any]:
        return _dict(_dict(self.analytics.value).get("overview"))

    def section(self, name: str) -> list[Any]:
        """
        One of university_stats, category_stats or popular_events.
        """
        return as_list(_dict(self.analytics.value).get(name))


class AdminEventsPage(Page):
    """
    University and status are server-side filters; the search box only
    narrows the list already fetched.
    """

    role = ADMIN
    path = HOME + "/events"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.university: Union[int, str] = "all"
        self.status = "all"
        self.search = ""
        self.events = self.resource(
            "events",
            lambda: [
                Event.from_dict(e)
                for e in as_list(self.api.admin.events({"university": self.university, "status": self.status}))
            ],
            "Failed to load events.",
        )
        self.universities = self.resource(
            "universities",
            lambda: [University.from_dict(u) for u in as_list(self.api.admin.universities())],
            "Failed to load universities.",
        )

    def set_filters(self, university: Union[int, str, None] = None, status: Optional[str] = None) -> None:
        if university is not None:
            self.university = university
        if status is not None:
            self.status = status
        logger.debug("Admin event filters: university=%s status=%s", self.university, self.status)
        self.events.load()

    def filtered(self) -> list[Event]:
        query = self.search.strip().lower()
        if not query:
            return list(self.events.value_or([]))
        return [
            ev
            for ev in self.events.value_or([])
            if any(query in s.lower() for s in (ev.title, ev.description, ev.university_name, ev.category_name))
        ]

    def counts(self) -> dict[str, int]:
        events = self.events.value_or([])
        out = {"total": len(events)}
        for status in ("published", "draft", "cancelled"):
            out[status] = sum(1 for e in events if e.status == status)
        return out

    def delete(self, event_id: int) -> bool:
        return self.mutate(
            lambda: self.api.admin.delete_event(event_id),
            "Event deleted.",
            "Failed to delete event",
        )

    def set_status(self, event_id: int, status: str) -> bool:
        if status not in EVENT_STATUSES:
            self.error = f"Unknown status: {status}"
            return False
        return self.mutate(
            lambda: self.api.admin.update_event(event_id, {"status": status}),
            f"Event marked {status}.",
            "Failed to update event status",
        )


class AdminUsersPage(Page):
    role = ADMIN
    path = HOME + "/users"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.users = self.resource("users", lambda: as_list(self.api.admin.users()), "Failed to load users.")
        self.search = ""
        self.role_filter = "all"
        self.domain = "all"

    @staticmethod
    def domain_of(user: dict[str, Any]) -> str:
        return _dict(user.get("profile")).get("university_domain") or ""

    def available_domains(self) -> list[str]:
        return sorted({d for d in (self.domain_of(u) for u in self.users.value_or([])) if d})

    def filtered(self) -> list[dict[str, Any]]:
        query = self.search.strip().lower()
        out = []
        for user in self.users.value_or([]):
            full = f"{user.get('first_name') or ''} {user.get('last_name') or ''}"
            if query and not any(query in str(s).lower() for s in (user.get("username") or "", user.get("email") or "", full)):
                continue
            if self.role_filter != "all" and user.get("user_type") != self.role_filter:
                continue
            if self.domain != "all" and self.domain_of(user) != self.domain:
                continue
            out.append(user)
        return out

    def counts(self) -> dict[str, int]:
        users = self.users.value_or([])
        out = {role: sum(1 for u in users if u.get("user_type") == role) for role in ("student", "organizer", "admin")}
        out["total"] = sum(out.values())
        return out

    def delete(self, user_id: int) -> bool:
        return self.mutate(
            lambda: self.api.admin.delete_user(user_id),
            "User deleted.",
            "Failed to delete user",
        )


class UniversitiesPage(Page):
    role = ADMIN
    path = HOME + "/universities"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.universities = self.resource(
            "universities",
            lambda: [University.from_dict(u) for u in as_list(self.api.admin.universities())],
            "Failed to load universities.",
        )
        self.search = ""

    @staticmethod
    def _form(name: str, short_code: str, domain: str, is_active: bool) -> dict[str, Any]:
        return {
            "name": (name or "").strip(),
            "short_code": (short_code or "").strip(),
            "domain": (domain or "").strip(),
            "is_active": bool(is_active),
        }

    def filtered(self) -> list[University]:
        query = self.search.strip().lower()
        return [
            u
            for u in self.universities.value_or([])
            if not query or any(query in s.lower() for s in (u.name, u.short_code, u.domain))
        ]

    def create(self, name: str, short_code: str, domain: str, is_active: bool = True) -> bool:
        data = self._form(name, short_code, domain, is_active)
        self.clear_banners()
        if not data["name"]:
            self.error = "University name is required."
            return False
        return self.mutate(
            lambda: self.api.admin.create_university(data),
            "University created.",
            "Failed to create university",
        )

    def update(self, university_id: int, name: str, short_code: str, domain: str, is_active: bool = True) -> bool:
        data = self._form(name, short_code, domain, is_active)
        return self.mutate(
            lambda: self.api.admin.update_university(university_id, data),
            "University updated.",
            "Failed to update university",
        )

    def delete(self, university_id: int) -> bool:
        return self.mutate(
            lambda: self.api.admin.delete_university(university_id),
            "University deleted.",
            "Failed to delete university",
        )
