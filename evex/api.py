"""
Thin endpoint groups for the Evex REST backend.

Each method is exactly one HTTP call through ApiClient and returns the decoded
JSON as-is. Request/response shapes belong to the backend; callers parse them
with evex.model where they need typed access.
"""

from __future__ import annotations

from typing import Any, Optional

from evex.transport import ApiClient


def _clean(params: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Drop unset filters so they are not sent as empty query params.
    """
    if not params:
        return None
    out = {k: v for k, v in params.items() if v not in (None, "", "all")}
    return out or None


class _Group:
    def __init__(self, client: ApiClient) -> None:
        self.client = client


class AuthAPI(_Group):
    def login(self, username: str, password: str) -> Any:
        return self.client.post("/token/", {"username": username, "password": password}, authenticate=False)

    def register(self, **fields: Any) -> Any:
        return self.client.post("/register/", fields, authenticate=False)


class EventsAPI(_Group):
    def list(self, params: Optional[dict[str, Any]] = None) -> Any:
        return self.client.get("/events/", params=_clean(params))

    def get(self, event_id: int) -> Any:
        return self.client.get(f"/events/{event_id}/")

    def register(self, event_id: int, force: bool = False) -> Any:
        body = {"force": True} if force else None
        return self.client.post(f"/events/{event_id}/register/", body)

    def cancel(self, event_id: int) -> Any:
        return self.client.post(f"/events/{event_id}/cancel_registration/")


class UsersAPI(_Group):
    def me(self) -> Any:
        return self.client.get("/profiles/me/")

    def profiles(self) -> Any:
        return self.client.get("/profiles/")

    def update_me(self, data: dict[str, Any]) -> Any:
        return self.client.patch("/profiles/update_me/", data)

    def delete_me(self) -> Any:
        return self.client.delete("/profiles/delete_me/")

    def registrations(self) -> Any:
        return self.client.get("/registrations/")

    def attendance(self) -> Any:
        return self.client.get("/attendance/")

    def notifications(self) -> Any:
        return self.client.get("/notifications/")

    def mark_notifications_read(self) -> Any:
        return self.client.post("/notifications/mark_all_read/")

    def overview(self) -> Any:
        return self.client.get("/student/overview/")


class UniversitiesAPI(_Group):
    def list(self) -> Any:
        return self.client.get("/universities/")

    def get(self, university_id: int) -> Any:
        return self.client.get(f"/universities/{university_id}/")


class CategoriesAPI(_Group):
    def list(self) -> Any:
        return self.client.get("/categories/")


class VenuesAPI(_Group):
    def list(self) -> Any:
        return self.client.get("/venues/")


class OrganizerAPI(_Group):
    def dashboard(self) -> Any:
        return self.client.get("/organizer/dashboard/")

    def analytics(self) -> Any:
        return self.client.get("/organizer/analytics/")

    def events(self) -> Any:
        return self.client.get("/organizer/events/")

    def event(self, event_id: int) -> Any:
        return self.client.get(f"/organizer/events/{event_id}/")

    def update_event(self, event_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(f"/organizer/events/{event_id}/update/", data)

    def attendance(self, event_id: int) -> Any:
        return self.client.get(f"/organizer/events/{event_id}/attendance/")

    def mark_attendance(self, event_id: int, user_id: int, notes: Optional[str] = None) -> Any:
        return self.client.post(
            f"/organizer/events/{event_id}/mark-attendance/",
            {"user_id": user_id, "notes": notes},
        )

    def registrations(self) -> Any:
        return self.client.get("/organizer/registrations/")

    def create_event(self, data: dict[str, Any]) -> Any:
        return self.client.post("/organizer/create-event/", data)


class AdminAPI(_Group):
    def analytics(self) -> Any:
        return self.client.get("/analytics/")

    def events(self, params: Optional[dict[str, Any]] = None) -> Any:
        return self.client.get("/admin/events/", params=_clean(params))

    def event(self, event_id: int) -> Any:
        return self.client.get(f"/admin/events/{event_id}/")

    def update_event(self, event_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(f"/admin/events/{event_id}/", data)

    def delete_event(self, event_id: int) -> Any:
        return self.client.delete(f"/admin/events/{event_id}/")

    def users(self, params: Optional[dict[str, Any]] = None) -> Any:
        return self.client.get("/admin/users/", params=_clean(params))

    def user(self, user_id: int) -> Any:
        return self.client.get(f"/admin/users/{user_id}/")

    def update_user(self, user_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(f"/admin/users/{user_id}/", data)

    def delete_user(self, user_id: int) -> Any:
        return self.client.delete(f"/admin/users/{user_id}/")

    def universities(self, params: Optional[dict[str, Any]] = None) -> Any:
        return self.client.get("/admin/universities/", params=_clean(params))

    def university(self, university_id: int) -> Any:
        return self.client.get(f"/admin/universities/{university_id}/")

    def create_university(self, data: dict[str, Any]) -> Any:
        return self.client.post("/admin/universities/", data)

    def update_university(self, university_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(f"/admin/universities/{university_id}/", data)

    def delete_university(self, university_id: int) -> Any:
        return self.client.delete(f"/admin/universities/{university_id}/")


class FeedbackAPI(_Group):
    def list(self) -> Any:
        return self.client.get("/feedback/")

    def get(self, feedback_id: int) -> Any:
        return self.client.get(f"/feedback/{feedback_id}/")

    def create(self, event: int, rating: int, comment: Optional[str] = None) -> Any:
        data: dict[str, Any] = {"event": event, "rating": rating}
        if comment and comment.strip():
            data["comment"] = comment.strip()
        return self.client.post("/feedback/", data)

    def update(self, feedback_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(f"/feedback/{feedback_id}/", data)

    def delete(self, feedback_id: int) -> Any:
        return self.client.delete(f"/feedback/{feedback_id}/")

    def attended_events(self) -> Any:
        return self.client.get("/feedback/attended_events/")


class EvexAPI:
    """
    All endpoint groups bound to one client.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.auth = AuthAPI(client)
        self.events = EventsAPI(client)
        self.users = UsersAPI(client)
        self.universities = UniversitiesAPI(client)
        self.categories = CategoriesAPI(client)
        self.venues = VenuesAPI(client)
        self.organizer = OrganizerAPI(client)
        self.admin = AdminAPI(client)
        self.feedback = FeedbackAPI(client)
