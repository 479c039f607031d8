"""
Public event browser: search, facet filters, register / cancel.

Filtering is client-side over the full list already fetched. Registration
conflicts (time clashes) are detected by the backend; a 409 carrying
`clashing_events` is turned into an explicit choice: dismiss, or register
anyway with force.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from evex.model import Category, ClashingEvent, Event, University, as_list
from evex.page import Page
from evex.routes import EVENTS, LOGIN
from evex.transport import ApiError


logger = logging.getLogger(__name__)

ALL = "all"
REGISTERED_MESSAGE = "You're in! Check the Student Dashboard for details."
REGISTER_FAILED = "Unable to register for this event."
CLASH_MESSAGE = "Time clash detected."


def filter_events(
    events: list[Event],
    search: str = "",
    category: Union[int, str] = ALL,
    university: Union[int, str] = ALL,
) -> list[Event]:
    query = (search or "").strip().lower()
    out: list[Event] = []
    for ev in events:
        if query and query not in ev.title.lower() and query not in ev.description.lower():
            continue
        if category != ALL and ev.category != category:
            continue
        if university != ALL and ev.host_university != university:
            continue
        out.append(ev)
    return out


class EventsPage(Page):
    path = EVENTS

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.events = self.resource(
            "events",
            lambda: [Event.from_dict(e) for e in as_list(self.api.events.list())],
            "Failed to load events. Please try again.",
        )
        self.categories = self.resource(
            "categories",
            lambda: [Category.from_dict(c) for c in as_list(self.api.categories.list())],
            "Failed to load categories.",
        )
        self.universities = self.resource(
            "universities",
            lambda: [University.from_dict(u) for u in as_list(self.api.universities.list())],
            "Failed to load universities.",
        )
        self.search = ""
        self.category: Union[int, str] = ALL
        self.university: Union[int, str] = ALL
        self.registering_id: Optional[int] = None
        self.clashes: list[ClashingEvent] = []
        self.pending_force: Optional[int] = None

    def filtered(self) -> list[Event]:
        return filter_events(self.events.value_or([]), self.search, self.category, self.university)

    def register_label(self, event: Event) -> str:
        if event.user_registration_status == "registered":
            return "Registered"
        if event.user_registration_status == "waitlisted":
            return "On Waitlist"
        if event.is_full:
            return "Join Waitlist"
        return "Register Now"

    def can_register(self, event: Event) -> bool:
        if self.registering_id == event.id:
            return False
        return event.user_registration_status not in ("registered", "waitlisted")

    def dismiss_clashes(self) -> None:
        self.clashes = []
        self.pending_force = None

    def _success_message(self, result: Any) -> str:
        if isinstance(result, dict) and result.get("status") == "added_to_waitlist":
            position = result.get("position")
            return f"Added to the waitlist (position {position})." if position else "Added to the waitlist."
        return REGISTERED_MESSAGE

    def _register(self, event_id: int, force: bool) -> bool:
        if self.registering_id is not None:
            return False

        self.registering_id = event_id
        self.clear_banners()
        self.dismiss_clashes()
        try:
            result = self.api.events.register(event_id, force=force)
        except ApiError as exc:
            payload = exc.payload if isinstance(exc.payload, dict) else {}
            clashing = payload.get("clashing_events")
            if not force and exc.status == 409 and isinstance(clashing, list):
                self.clashes = [ClashingEvent.from_dict(c) for c in clashing]
                self.pending_force = event_id
                self.error = exc.detail or CLASH_MESSAGE
            else:
                self.error = exc.detail or REGISTER_FAILED
            logger.info("Registration for event %s failed: %s", event_id, exc.message)
            return False
        finally:
            self.registering_id = None

        self.message = self._success_message(result)
        self.events.load()
        return True

    def register(self, event_id: int) -> bool:
        if not self.session.is_authenticated:
            self.ctx.navigator.push(f"{LOGIN}?next={EVENTS}")
            return False
        return self._register(event_id, force=False)

    def force_register(self) -> bool:
        """
        Register for the event that clashed, after the user confirmed.
        """
        if self.pending_force is None:
            return False
        return self._register(self.pending_force, force=True)

    def cancel(self, event_id: int) -> bool:
        return self.mutate(
            lambda: self.api.events.cancel(event_id),
            "Registration cancelled.",
            "Failed to cancel registration. Please try again.",
        )
