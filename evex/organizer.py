"""
Organizer area: dashboard, own events, create / edit, attendance,
registrations and analytics.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from evex.model import Event, University, VISIBILITIES, as_list, is_upcoming, parse_datetime
from evex.page import Page
from evex.routes import DASHBOARDS


logger = logging.getLogger(__name__)

ORGANIZER = "organizer"
HOME = DASHBOARDS[ORGANIZER]
EVENTS_PATH = HOME + "/events"

REQUIRED_FIELDS = ("title", "description", "date", "time", "location", "capacity", "category")

NOTIFICATION_FILTERS = {
    "all": None,
    "registrations": "registration_confirmation",
    "cancellations": "event_cancelled",
}


def _lower(x: Any) -> str:
    return "" if x is None else str(x).lower()


def _dict(x: Any) -> dict[str, Any]:
    return x if isinstance(x, dict) else {}


class OrganizerDashboardPage(Page):
    role = ORGANIZER
    path = HOME

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.dashboard = self.resource(
            "dashboard", self.api.organizer.dashboard, "Unable to load dashboard data."
        )

    @property
    def overview(self) -> dict[str, Any]:
        return _dict(_dict(self.dashboard.value).get("overview"))

    @property
    def upcoming_events(self) -> list[Any]:
        return as_list(_dict(self.dashboard.value).get("upcoming_events"))


class OrganizerEventsPage(Page):
    role = ORGANIZER
    path = EVENTS_PATH

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.events = self.resource(
            "events",
            lambda: [Event.from_dict(e) for e in as_list(self.api.organizer.events())],
            "Failed to load events.",
        )
        self.search = ""
        self.status = "all"

    def filtered(self) -> list[Event]:
        query = self.search.strip().lower()
        return [
            ev
            for ev in self.events.value_or([])
            if (not query or query in ev.title.lower())
            and (self.status == "all" or ev.status == self.status)
        ]

    def stats(self) -> dict[str, int]:
        events = self.events.value_or([])
        return {
            "total": len(events),
            "published": sum(1 for e in events if e.status == "published"),
            "drafts": sum(1 for e in events if e.status == "draft"),
            "registrations": sum(e.registered_count for e in events),
        }


class CreateEventPage(Page):
    role = ORGANIZER
    path = HOME + "/create-event"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.universities = self.resource(
            "universities",
            lambda: [University.from_dict(u) for u in as_list(self.api.universities.list())],
            "Failed to load universities.",
        )

    def validate(self, form: dict[str, Any]) -> Optional[str]:
        missing = [f for f in REQUIRED_FIELDS if not str(form.get(f) or "").strip()]
        if missing:
            return f"Please fill in all required fields ({', '.join(missing)})."
        try:
            int(str(form["capacity"]).strip())
        except ValueError:
            return "Capacity must be a whole number."
        if form.get("visibility", "university") not in VISIBILITIES:
            return "Please choose a valid visibility."
        return None

    def payload(self, form: dict[str, Any], status: str) -> dict[str, Any]:
        visibility = form.get("visibility") or "university"
        data = {k: v for k, v in form.items() if k not in ("visibility", "allowed_universities")}
        data.update(
            capacity=int(str(form["capacity"]).strip()),
            status=status,
            visibility=visibility,
            allowed_universities=list(form.get("allowed_universities") or [])
            if visibility == "inter_university"
            else [],
        )
        return data

    def submit(self, form: dict[str, Any], status: str = "published") -> bool:
        self.clear_banners()
        problem = self.validate(form)
        if problem:
            self.error = problem
            return False

        published = status == "published"
        logger.info("Saving event %r as %s", form.get("title"), status)
        ok = self.mutate(
            lambda: self.api.organizer.create_event(self.payload(form, status)),
            "Event published successfully!" if published else "Draft saved successfully.",
            "Unable to save the event. Please try again.",
        )
        if ok and published:
            self.ctx.navigator.push(EVENTS_PATH)
        return ok


class EditEventPage(Page):
    role = ORGANIZER

    def __init__(self, ctx, event_id: int) -> None:
        super().__init__(ctx)
        self.event_id = event_id
        self.path = f"{EVENTS_PATH}/{event_id}/edit"
        self.event = self.resource(
            "event", lambda: self.api.organizer.event(event_id), "Failed to load event."
        )

    def form(self) -> dict[str, Any]:
        """
        The event as editable form fields.
        """
        ev = Event.from_dict(self.event.value)
        when = parse_datetime(ev.date_time)
        return {
            "title": ev.title,
            "description": ev.description,
            "date": when.strftime("%Y-%m-%d") if when else "",
            "time": when.strftime("%H:%M") if when else "",
            "location": ev.venue_name,
            "capacity": "" if ev.participant_limit is None else str(ev.participant_limit),
            "category": ev.category_name,
            "visibility": ev.visibility,
            "status": ev.status,
        }

    def save(self, form: dict[str, Any]) -> bool:
        self.clear_banners()
        try:
            capacity = int(str(form.get("capacity") or "").strip())
        except ValueError:
            self.error = "Capacity must be a whole number."
            return False

        data = dict(form, capacity=capacity)
        return self.mutate(
            lambda: self.api.organizer.update_event(self.event_id, data),
            "Event updated successfully!",
            "Failed to update event. Please try again.",
        )


class AttendancePage(Page):
    role = ORGANIZER

    def __init__(self, ctx, event_id: int) -> None:
        super().__init__(ctx)
        self.event_id = event_id
        self.path = f"{EVENTS_PATH}/{event_id}/attendance"
        self.attendance = self.resource(
            "attendance",
            lambda: as_list(self.api.organizer.attendance(event_id)),
            "Failed to load attendance.",
        )
        self.event = self.resource("event", self._load_event, "Failed to load event.")
        self.search = ""

    def _load_event(self) -> dict[str, Any]:
        ev = _dict(self.api.organizer.event(self.event_id))
        listing = _dict(self.api.organizer.registrations()).get("events")
        match = next((e for e in as_list(listing) if _dict(e).get("id") == self.event_id), {})
        return {
            "id": ev.get("id"),
            "title": ev.get("title", ""),
            "date_time": ev.get("date_time", ""),
            "registrations": as_list(match.get("registrations")),
        }

    def available_to_mark(self) -> list[dict[str, Any]]:
        """
        Registrants that still have no attendance record.
        """
        marked = {a.get("user_id") for a in self.attendance.value_or([]) if a.get("user_id") is not None}
        regs = _dict(self.event.value).get("registrations", [])
        out = []
        for reg in regs:
            user_id = _dict(reg.get("user")).get("id")
            if user_id is None or user_id in marked:
                continue
            if reg.get("status") in ("registered", "attended"):
                out.append(reg)
        return out

    def filtered(self) -> list[dict[str, Any]]:
        query = self.search.strip().lower()
        return [
            a
            for a in self.attendance.value_or([])
            if not query or query in _lower(a.get("user_name")) or query in _lower(a.get("user_email"))
        ]

    def mark(self, user_id: int, notes: str = "") -> bool:
        return self.mutate(
            lambda: self.api.organizer.mark_attendance(self.event_id, user_id, notes or None),
            "Attendance marked.",
            "Failed to mark attendance",
        )


def filter_registrations(registrations: list[dict[str, Any]], search: str) -> list[dict[str, Any]]:
    query = (search or "").strip().lower()
    if not query:
        return list(registrations)
    out = []
    for reg in registrations:
        user = _dict(reg.get("user"))
        hay = " ".join(
            str(x) for x in (user.get("name"), user.get("email"), user.get("university"), reg.get("status")) if x
        ).lower()
        if query in hay:
            out.append(reg)
    return out


class OrganizerRegistrationsPage(Page):
    role = ORGANIZER
    path = HOME + "/registrations"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.events = self.resource(
            "events",
            lambda: as_list(_dict(self.api.organizer.registrations()).get("events")),
            "Unable to load registrations.",
        )
        self.search = ""

    def totals(self) -> dict[str, int]:
        events = self.events.value_or([])
        return {
            "registrations": sum(len(as_list(e.get("registrations"))) for e in events),
            "attendees": sum(int(e.get("attended_count") or 0) for e in events),
            "waitlisted": sum(len(as_list(e.get("waitlist"))) for e in events),
            "upcoming": sum(1 for e in events if is_upcoming(e.get("date_time"))),
        }

    def rows(self, event: dict[str, Any]) -> list[dict[str, Any]]:
        return filter_registrations(as_list(event.get("registrations")), self.search)


class OrganizerAnalyticsPage(Page):
    role = ORGANIZER
    path = HOME + "/analytics"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.analytics = self.resource(
            "analytics", self.api.organizer.analytics, "Failed to load analytics."
        )
        self.filter = "all"

    @property
    def stats(self) -> dict[str, Any]:
        return _dict(_dict(self.analytics.value).get("stats"))

    @property
    def notifications(self) -> list[dict[str, Any]]:
        wanted = NOTIFICATION_FILTERS.get(self.filter)
        items = as_list(_dict(self.analytics.value).get("notifications"))
        if wanted is None:
            return items
        return [n for n in items if n.get("notification_type") == wanted]

    def set_filter(self, name: str) -> None:
        if name not in NOTIFICATION_FILTERS:
            raise ValueError(f"Unknown notification filter: {name}")
        self.filter = name
