"""
Student area: overview, my events (with a paginated list) and feedback.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from evex.model import Registration, as_list, is_upcoming
from evex.page import Page
from evex.routes import DASHBOARDS
from evex.transport import ApiError


logger = logging.getLogger(__name__)

STUDENT = "student"
PAGE_SIZE = 6
HOURS_PER_EVENT = 3


def registration_stats(regs: list[Registration]) -> dict[str, Any]:
    upcoming = sum(1 for r in regs if r.status == "registered" and r.event and is_upcoming(r.event.date_time))
    attended = sum(1 for r in regs if r.status == "attended")
    rate = round(attended / len(regs) * 100) if regs else 0
    return {
        "upcoming_events": upcoming,
        "events_attended": attended,
        "attendance_rate": f"{rate}%",
        "hours_engaged": attended * HOURS_PER_EVENT,
    }


class StudentOverviewPage(Page):
    role = STUDENT
    path = DASHBOARDS[STUDENT]

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.overview = self.resource("overview", self._load, "Unable to load dashboard data.")

    def _load(self) -> dict[str, Any]:
        try:
            data = self.api.users.overview()
        except ApiError as exc:
            # older backends have no overview endpoint; derive it from registrations
            logger.info("Overview unavailable (%s), using registrations", exc.message)
            regs = [Registration.from_dict(r) for r in as_list(self.api.users.registrations())]
            return {"recent_activities": [], "stats": registration_stats(regs)}

        data = data if isinstance(data, dict) else {}
        stats = data.get("stats") if isinstance(data.get("stats"), dict) else {}
        attended = stats.get("events_attended") or 0
        return {
            "recent_activities": data.get("recent_activities") or [],
            "stats": {
                "upcoming_events": stats.get("upcoming_events") or 0,
                "events_attended": attended,
                "attendance_rate": stats.get("attendance_rate") or "0%",
                "hours_engaged": attended * HOURS_PER_EVENT,
            },
        }


@dataclass
class MyEvent:
    """
    One row of "My Events": a registration flattened with its event.
    """

    id: int
    registration_id: Optional[int]
    title: str
    date_time: str
    description: str
    status: str
    category_name: str
    venue_name: str
    university_name: str
    registered_at: str

    @classmethod
    def from_registration(cls, reg: Registration) -> "MyEvent":
        ev = reg.event
        return cls(
            id=ev.id if ev else 0,
            registration_id=reg.id,
            title=reg.title,
            date_time=(ev.date_time if ev else "") or reg.registered_at,
            description=(ev.description if ev else "") or "No description available",
            status=reg.status,
            category_name=(ev.category_name if ev else "") or "General",
            venue_name=(ev.venue_name if ev else "") or "TBA",
            university_name=(ev.university_name if ev else "") or "Unknown",
            registered_at=reg.registered_at,
        )


class MyEventsPage(Page):
    role = STUDENT
    path = DASHBOARDS[STUDENT] + "/my-events"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.events = self.resource("events", self._load, "Failed to load your events.")
        self._search = ""
        self._status = "all"
        self._page = 1

    def _load(self) -> list[MyEvent]:
        regs = [Registration.from_dict(r) for r in as_list(self.api.users.registrations())]
        return [MyEvent.from_registration(r) for r in regs if r.status != "cancelled"]

    def refresh(self) -> None:
        super().refresh()
        self._page = 1

    @property
    def search(self) -> str:
        return self._search

    @search.setter
    def search(self, value: str) -> None:
        self._search = value or ""
        self._page = 1

    @property
    def status(self) -> str:
        return self._status

    @status.setter
    def status(self, value: str) -> None:
        self._status = value or "all"
        self._page = 1

    def filtered(self) -> list[MyEvent]:
        query = self._search.strip().lower()
        out: list[MyEvent] = []
        for ev in self.events.value_or([]):
            hay = f"{ev.title} {ev.description} {ev.category_name}".lower()
            if query and query not in hay:
                continue
            if self._status != "all" and ev.status != self._status:
                continue
            out.append(ev)
        return out

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.filtered()) / PAGE_SIZE))

    @property
    def page(self) -> int:
        return min(max(1, self._page), self.total_pages)

    @page.setter
    def page(self, value: int) -> None:
        self._page = min(max(1, value), self.total_pages)

    def page_items(self) -> list[MyEvent]:
        start = (self.page - 1) * PAGE_SIZE
        return self.filtered()[start : start + PAGE_SIZE]

    def counts(self) -> dict[str, int]:
        events = self.events.value_or([])
        return {
            "registered": sum(1 for e in events if e.status == "registered"),
            "attended": sum(1 for e in events if e.status == "attended"),
        }

    def cancel(self, event_id: int) -> bool:
        return self.mutate(
            lambda: self.api.events.cancel(event_id),
            "Registration cancelled.",
            "Failed to cancel registration. Please try again.",
        )


class FeedbackPage(Page):
    role = STUDENT
    path = DASHBOARDS[STUDENT] + "/feedback"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.attended = self.resource(
            "attended",
            lambda: as_list(self.api.feedback.attended_events()),
            "Failed to load attended events. Please try again.",
        )

    @property
    def pending(self) -> list[dict[str, Any]]:
        return [e for e in self.attended.value_or([]) if not e.get("has_feedback")]

    @property
    def submitted(self) -> list[dict[str, Any]]:
        return [e for e in self.attended.value_or([]) if e.get("has_feedback")]

    def submit(self, event_id: Optional[int], rating: int, comment: str = "") -> bool:
        self.clear_banners()
        if not event_id:
            self.error = "Please select an event"
            return False
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            self.error = "Please provide a rating"
            return False

        return self.mutate(
            lambda: self.api.feedback.create(event_id, rating, comment),
            "Feedback submitted successfully!",
            "Failed to submit feedback. Please try again.",
        )
