"""
Account pages: login, sign-up and profile / settings.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from evex.model import Registration, University, User, as_list
from evex.page import Page
from evex.routes import DASHBOARDS, LOGIN, REGISTER, dashboard_for
from evex.transport import ApiError, NetworkError


logger = logging.getLogger(__name__)

SPECIAL_CHARS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

SIGNUP_ROLES = ("student", "organizer")
SIGNUP_REQUIRED = ("username", "email", "password", "confirm_password")


def password_strength(password: str) -> dict[str, bool]:
    """
    The sign-up checklist, in display order.
    """
    return {
        "length": len(password) >= 8,
        "uppercase": re.search(r"[A-Z]", password) is not None,
        "lowercase": re.search(r"[a-z]", password) is not None,
        "number": re.search(r"[0-9]", password) is not None,
        "special": any(ch in SPECIAL_CHARS for ch in password),
    }


def is_strong(password: str) -> bool:
    return all(password_strength(password).values())


class LoginPage(Page):
    path = LOGIN

    def submit(self, identifier: str, password: str) -> Optional[str]:
        """
        Log in and go to the role's dashboard. Returns the role, or None.
        """
        if self.busy:
            return None

        self.clear_banners()
        identifier = (identifier or "").strip()
        if not identifier or not password:
            self.error = "Please enter your username and password."
            return None

        self.busy = True
        try:
            role = self.session.login(identifier, password)
        except ApiError as exc:
            logger.info("Login failed for %s: %s", identifier, exc.message)
            detail = exc.payload.get("detail") if isinstance(exc.payload, dict) else None
            if isinstance(exc, NetworkError):
                detail = exc.message
            self.error = detail or "Invalid username or password"
            return None
        finally:
            self.busy = False

        self.ctx.navigator.push(dashboard_for(role))
        return role


class SignUpPage(Page):
    path = REGISTER

    def validate(self, form: dict[str, Any]) -> Optional[str]:
        missing = [f for f in SIGNUP_REQUIRED if not str(form.get(f) or "").strip()]
        if missing:
            return f"Please fill in all required fields ({', '.join(missing)})."
        if form["password"] != form["confirm_password"]:
            return "Passwords do not match"
        if not is_strong(form["password"]):
            return "Please create a stronger password"
        if form.get("user_type", "student") not in SIGNUP_ROLES:
            return "Please choose student or organizer"
        return None

    def submit(self, form: dict[str, Any]) -> bool:
        self.clear_banners()
        problem = self.validate(form)
        if problem:
            self.error = problem
            return False

        fields = {
            "username": form["username"].strip(),
            "email": form["email"].strip(),
            "password": form["password"],
            "first_name": (form.get("first_name") or "").strip(),
            "last_name": (form.get("last_name") or "").strip(),
            "user_type": form.get("user_type", "student"),
            "contact_number": (form.get("contact_number") or "").strip(),
            "department": (form.get("department") or "").strip(),
        }
        ok = self.mutate(
            lambda: self.api.auth.register(**fields),
            "Registration successful! Please login with your credentials.",
            "Registration failed. Please try again.",
        )
        if ok:
            self.ctx.navigator.push(LOGIN)
        return ok


class ProfilePage(Page):
    """
    Profile editing shared by the student profile and organizer settings.
    """

    role = "student"
    path = DASHBOARDS["student"] + "/profile"

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.me = self.resource("me", self._load_me, "Failed to load profile.")
        self.universities = self.resource(
            "universities",
            lambda: [University.from_dict(u) for u in as_list(self.api.universities.list())],
            "Failed to load universities.",
        )
        self.stats = self.resource("stats", self._load_stats, "Failed to load stats.")

    def _load_me(self) -> User:
        return User.from_me(self.api.users.me())

    def _load_stats(self) -> dict[str, Any]:
        regs = [Registration.from_dict(r) for r in as_list(self.api.users.registrations())]
        return {
            "events_registered": sum(1 for r in regs if r.status == "registered"),
            "events_attended": sum(1 for r in regs if r.status == "attended"),
            "total_events": len(regs),
        }

    def save(
        self,
        first_name: str = "",
        last_name: str = "",
        contact_number: str = "",
        department: str = "",
        university: Optional[int] = None,
    ) -> bool:
        data = {
            "first_name": (first_name or "").strip(),
            "last_name": (last_name or "").strip(),
            "contact_number": (contact_number or "").strip() or None,
            "department": (department or "").strip() or None,
            "university": university or None,
        }
        return self.mutate(
            lambda: self.api.users.update_me(data),
            "Profile updated successfully!",
            "Error updating profile. Please try again.",
        )

    def delete_account(self) -> bool:
        if self.busy:
            return False
        self.clear_banners()
        self.busy = True
        try:
            self.api.users.delete_me()
        except ApiError as exc:
            logger.warning("Account deletion failed: %s", exc.message)
            self.error = exc.detail or "Failed to delete account. Please try again."
            return False
        finally:
            self.busy = False

        self.message = "Your account has been successfully deleted."
        self.session.logout()
        self.ctx.navigator.push(LOGIN)
        return True


class StudentProfilePage(ProfilePage):
    pass


class OrganizerSettingsPage(ProfilePage):
    role = "organizer"
    path = DASHBOARDS["organizer"] + "/settings"

    def _load_stats(self) -> dict[str, Any]:
        data = self.api.organizer.dashboard()
        overview = data.get("overview") if isinstance(data, dict) else None
        overview = overview if isinstance(overview, dict) else {}
        return {
            "total_events": overview.get("total_events", 0),
            "published_events": overview.get("published_events", 0),
            "total_registrations": overview.get("total_registrations", 0),
        }
