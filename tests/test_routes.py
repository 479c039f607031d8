"""
Unit tests for the routing policy.

- Dashboard areas are owned by one role; other roles are sent to /dashboard,
  which then dispatches to their own area
- Anonymous sessions are sent to /login, Unknown ones wait (Pending)
- /login and /register bounce authenticated users to their dashboard
"""

import unittest

from evex.model import Anonymous, Authenticated, Profile, Unknown, User
from evex.routes import (
    DASHBOARD,
    LOGIN,
    Allow,
    Navigator,
    Pending,
    Redirect,
    area_of,
    dashboard_for,
    guard,
    resolve,
)


def authed(role: str) -> Authenticated:
    return Authenticated(User(id=1, username="u", profile=Profile(user_type=role)))


class TestGuard(unittest.TestCase):
    def test_student_is_kept_out_of_organizer_area(self) -> None:
        state = authed("student")
        self.assertEqual(resolve(state, "/dashboard/organizer/events"), Redirect(DASHBOARD))

    def test_student_may_visit_student_area(self) -> None:
        state = authed("student")
        self.assertEqual(resolve(state, "/dashboard/student/my-events"), Allow())

    def test_anonymous_goes_to_login(self) -> None:
        self.assertEqual(guard(Anonymous(), "admin"), Redirect(LOGIN))
        self.assertEqual(resolve(Anonymous(), "/dashboard/admin/users"), Redirect(LOGIN))

    def test_unknown_is_pending(self) -> None:
        self.assertEqual(resolve(Unknown(), "/dashboard/student"), Pending())
        self.assertEqual(resolve(Unknown(), DASHBOARD), Pending())

    def test_public_paths_always_allowed(self) -> None:
        for state in (Unknown(), Anonymous(), authed("admin")):
            self.assertEqual(resolve(state, "/events"), Allow())
            self.assertEqual(resolve(state, "/"), Allow())

    def test_auth_routes_bounce_when_logged_in(self) -> None:
        self.assertEqual(resolve(authed("organizer"), "/login"), Redirect(DASHBOARD))
        self.assertEqual(resolve(Anonymous(), "/register"), Allow())
        self.assertEqual(resolve(Anonymous(), "/login?next=/events"), Allow())

    def test_dashboard_dispatches_by_role(self) -> None:
        self.assertEqual(resolve(authed("admin"), DASHBOARD), Redirect("/dashboard/admin"))
        self.assertEqual(resolve(authed("organizer"), "/dashboard/"), Redirect("/dashboard/organizer"))

    def test_unknown_dashboard_subpath_needs_session(self) -> None:
        self.assertEqual(resolve(Anonymous(), "/dashboard/settings"), Redirect(LOGIN))
        self.assertEqual(resolve(authed("student"), "/dashboard/settings"), Redirect("/dashboard/student"))


class TestHelpers(unittest.TestCase):
    def test_area_of(self) -> None:
        self.assertEqual(area_of("/dashboard/organizer/events/4/edit"), "organizer")
        self.assertEqual(area_of("/dashboard/admin?tab=users"), "admin")
        self.assertIsNone(area_of("/dashboard/administrator"))
        self.assertIsNone(area_of("/events"))

    def test_dashboard_for_unknown_role(self) -> None:
        self.assertEqual(dashboard_for("organizer"), "/dashboard/organizer")
        self.assertEqual(dashboard_for(None), "/dashboard/student")


class TestNavigator(unittest.TestCase):
    def test_follow_lands_on_own_dashboard(self) -> None:
        nav = Navigator()
        decision, landed = nav.follow(authed("student"), "/dashboard/admin")
        self.assertEqual(decision, Allow())
        self.assertEqual(landed, "/dashboard/student")
        self.assertEqual(nav.current, "/dashboard/student")

    def test_follow_pending_stays_on_target(self) -> None:
        nav = Navigator()
        decision, landed = nav.follow(Unknown(), "/dashboard/student")
        self.assertEqual(decision, Pending())
        self.assertEqual(landed, "/dashboard/student")

    def test_back(self) -> None:
        nav = Navigator()
        nav.push("/events")
        nav.push("/login")
        self.assertEqual(nav.back(), "/events")
        self.assertEqual(nav.back(), "/")
        self.assertEqual(nav.back(), "/")


if __name__ == "__main__":
    unittest.main()
