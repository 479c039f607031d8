"""
Smoke tests for the interactive menu, driven by scripted answers.
"""

import io
import tempfile
import unittest
from unittest import mock

from rich.console import Console

from evex import interactive
from evex.browse import EventsPage
from evex.interactive import SESSION_EXPIRED, run_interactive
from evex.model import Event
from evex.storage import ACCESS_TOKEN, REFRESH_TOKEN
from tests.fakes import FakeHTTP, make_context, me_payload

class InteractiveTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.http = FakeHTTP()
        self.ctx = make_context(self._tmp.name, self.http)
        self.out = io.StringIO()

    def run_with(self, answers: list[str]) -> str:
        console = Console(file=self.out, width=160, force_terminal=False)
        with mock.patch("evex.interactive.console", console), mock.patch(
            "evex.interactive._prompt", side_effect=answers
        ):
            run_interactive(self.ctx)
        return self.out.getvalue()

    def student(self) -> None:
        self.ctx.tokens.set(ACCESS_TOKEN, "a")
        self.ctx.tokens.set(REFRESH_TOKEN, "r")
        self.http.add("GET", "/profiles/me/", body=me_payload("student"))

class TestInteractive(InteractiveTestCase):
    def test_anonymous_exit(self) -> None:
        out = self.run_with(["0"])
        self.assertIn("Not signed in", out)
        self.assertIn("Bye.", out)

    def test_clash_then_register_anyway(self) -> None:
        self.student()
        self.http.add("GET", "/events/", body=[{"id": 1, "title": "AI Hackathon"}])
        self.http.add(
            "POST",
            "/events/1/register/",
            status=409,
            body={"error": "Time clash detected", "clashing_events": [{"id": 9, "title": "Robotics Workshop"}]},
        )
        self.http.add("POST", "/events/1/register/", status=201, body={"status": "registered"})

        out = self.run_with(["1", "r", "1", "y", "", "0"])

        self.assertIn("Robotics Workshop", out)
        self.assertIn("You're in!", out)
        self.assertEqual(self.http.last("POST", "/events/1/register/")["json"], {"force": True})

    def test_declining_a_clash_does_not_force(self) -> None:
        self.student()
        self.http.add("GET", "/events/", body=[{"id": 1, "title": "AI Hackathon"}])
        self.http.add(
            "POST",
            "/events/1/register/",
            status=409,
            body={"error": "Time clash detected", "clashing_events": [{"id": 9, "title": "Robotics Workshop"}]},
        )

        self.run_with(["1", "r", "1", "n", "", "0"])

        self.assertEqual(self.http.paths("POST"), ["/events/1/register/"])

    def test_session_expiry_is_announced(self) -> None:
        self.student()
        self.http.add("GET", "/registrations/", status=401, body={"detail": "expired"})
        self.http.add("POST", "/token/refresh/", status=401, body={"detail": "expired"})

        out = self.run_with(["3", "0"])

        self.assertIn(SESSION_EXPIRED, out)
        self.assertIsNone(self.ctx.tokens.get(ACCESS_TOKEN))
        # back on the public menu after the forced logout
        self.assertIn("Not signed in", out)


class TestServerTextIsShownVerbatim(InteractiveTestCase):
    def render(self, fn, *args) -> str:
        console = Console(file=self.out, width=160, force_terminal=False)
        with mock.patch("evex.interactive.console", console):
            fn(*args)
        return self.out.getvalue()

    def test_error_banner_with_closing_tag(self) -> None:
        page = EventsPage(self.ctx)
        page.error = "rating: value must be in [1, 5] not [/]"

        out = self.render(interactive._banners, page)

        self.assertIn("rating: value must be in [1, 5] not [/]", out)

    def test_bracketed_event_title(self) -> None:
        event = Event.from_dict({"id": 1, "title": "Hackathon [day 1]", "date_time": "2026-01-01T10:00:00Z"})

        out = self.render(interactive._events_table, "Events", [event])

        self.assertIn("Hackathon [day 1]", out)

    def test_clash_table_and_server_message(self) -> None:
        self.student()
        self.http.add("GET", "/events/", body=[{"id": 1, "title": "AI Hackathon"}])
        self.http.add(
            "POST",
            "/events/1/register/",
            status=409,
            body={"message": "Clashes with [bold]2[/] events", "clashing_events": [{"id": 9, "title": "Lab [B]"}]},
        )

        out = self.run_with(["1", "r", "1", "n", "", "0"])

        self.assertIn("Clashes with [bold]2[/] events", out)
        self.assertIn("Lab [B]", out)

if __name__ == "__main__":
    unittest.main()
