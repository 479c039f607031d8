"""
Tests for CLI entry points.

These tests focus on:
- argument validation (usage errors exit with 2)
- exit codes: 0 on success, 1 on user or API errors
- the login / register flows end-to-end against a fake backend
  (tokens live in a temporary directory, never in the user's home)
"""

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from evex.cli import main
from evex.storage import ACCESS_TOKEN
from tests.fakes import FakeHTTP, make_context, me_payload


class CLITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.http = FakeHTTP()
        self.ctx = make_context(self._tmp.name, self.http)

    def run_cli(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main(list(argv), ctx=self.ctx)
        return ctx.exception.code, out.getvalue()

    def logged_in(self) -> None:
        self.ctx.tokens.set(ACCESS_TOKEN, "a")
        self.http.add("GET", "/profiles/me/", body=me_payload("student"))


class TestUsage(CLITestCase):
    def test_command_is_required(self) -> None:
        with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main([], ctx=self.ctx)
        self.assertEqual(ctx.exception.code, 2)

    def test_event_id_must_be_int(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["register", "abc"], ctx=self.ctx)
        self.assertEqual(ctx.exception.code, 2)


class TestAuthCommands(CLITestCase):
    def test_login_with_prompted_password(self) -> None:
        self.http.add("POST", "/token/", body={"access": "jwt1", "refresh": "jwt2"})
        self.http.add("GET", "/profiles/me/", body=me_payload("student"))

        with mock.patch("evex.cli.getpass.getpass", return_value="Secret123!") as prompt:
            code, out = self.run_cli("login", "alice")

        prompt.assert_called_once()
        self.assertEqual(code, 0)
        self.assertIn("Logged in as Alice Smith (student)", out)
        self.assertEqual(self.ctx.tokens.get(ACCESS_TOKEN), "jwt1")

    def test_login_failure(self) -> None:
        self.http.add("POST", "/token/", status=401, body={"detail": "No active account found"})
        code, out = self.run_cli("login", "alice", "--password", "bad")
        self.assertEqual(code, 1)
        self.assertIn("No active account found", out)

    def test_whoami_anonymous(self) -> None:
        code, out = self.run_cli("whoami")
        self.assertEqual(code, 1)
        self.assertIn("Not logged in.", out)

    def test_whoami(self) -> None:
        self.logged_in()
        code, out = self.run_cli("whoami")
        self.assertEqual(code, 0)
        self.assertIn("alice | Alice Smith | alice@uni.edu | student", out)

    def test_logout_twice(self) -> None:
        self.logged_in()
        self.assertEqual(self.run_cli("logout")[0], 0)
        self.assertEqual(self.run_cli("logout")[0], 0)
        self.assertIsNone(self.ctx.tokens.get(ACCESS_TOKEN))


class TestEventCommands(CLITestCase):
    def test_events_listing(self) -> None:
        self.http.add(
            "GET",
            "/events/",
            body=[
                {"id": 1, "title": "AI Hackathon", "date_time": "2026-03-04T14:30:00Z", "venue_name": "Hall A"},
                {"id": 2, "title": "Career Fair", "date_time": "2026-03-05T10:00:00Z"},
            ],
        )
        code, out = self.run_cli("events", "--search", "hack")
        self.assertEqual(code, 0)
        self.assertIn("1 | AI Hackathon | Mar 4, 2026 02:30 PM | Hall A", out)
        self.assertNotIn("Career Fair", out)

    def test_events_backend_down(self) -> None:
        self.http.fail("GET", "/events/")
        code, out = self.run_cli("events")
        self.assertEqual(code, 1)
        self.assertIn("Network error", out)

    def test_register_requires_login(self) -> None:
        code, out = self.run_cli("register", "1")
        self.assertEqual(code, 1)
        self.assertIn("Not logged in", out)

    def test_register_clash_then_force(self) -> None:
        self.logged_in()
        clash = {
            "error": "Time clash detected",
            "clashing_events": [{"id": 9, "title": "Robotics Workshop", "date_time": "2026-03-04T14:00:00Z"}],
        }
        self.http.add("POST", "/events/1/register/", status=409, body=clash)

        code, out = self.run_cli("register", "1")
        self.assertEqual(code, 1)
        self.assertIn("Robotics Workshop", out)
        self.assertIn("--force", out)

        self.http.add("POST", "/events/1/register/", status=201, body={"status": "registered"})
        code, out = self.run_cli("register", "1", "--force")
        self.assertEqual(code, 0)
        self.assertEqual(self.http.last("POST", "/events/1/register/")["json"], {"force": True})
        self.assertIn("You're in!", out)

    def test_cancel(self) -> None:
        self.logged_in()
        self.http.add("POST", "/events/4/cancel_registration/", body={})
        code, out = self.run_cli("cancel", "4")
        self.assertEqual(code, 0)
        self.assertIn("Registration cancelled.", out)


class TestStudentCommands(CLITestCase):
    def test_my_events(self) -> None:
        self.logged_in()
        self.http.add(
            "GET",
            "/registrations/",
            body=[{"id": 1, "status": "attended", "event": {"id": 3, "title": "Gala", "date_time": "2026-01-10T18:00:00Z"}}],
        )
        code, out = self.run_cli("my-events", "--status", "attended")
        self.assertEqual(code, 0)
        self.assertIn("3 | Gala | Jan 10, 2026 | General | attended", out)
        self.assertIn("Page 1/1", out)

    def test_feedback_validation(self) -> None:
        self.logged_in()
        self.http.add("GET", "/feedback/attended_events/", body=[])
        code, out = self.run_cli("feedback", "3", "9")
        self.assertEqual(code, 1)
        self.assertIn("Please provide a rating", out)

    def test_feedback_wrong_role(self) -> None:
        self.ctx.tokens.set(ACCESS_TOKEN, "a")
        self.http.add("GET", "/profiles/me/", body=me_payload("organizer"))
        code, out = self.run_cli("feedback", "3", "5")
        self.assertEqual(code, 1)
        self.assertIn("Not available for role 'organizer'", out)


if __name__ == "__main__":
    unittest.main()
