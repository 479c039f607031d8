"""
Unit tests for the session holder and its wiring in the app context.

Session contract:
- Unknown until load(); Anonymous without a stored token
- login() stores both tokens, loads the identity and returns its role
- logout() is idempotent and leaves storage empty
- auth expiry (failed refresh) clears tokens, notifies listeners, goes to /login
"""

import tempfile
import unittest

from evex.model import Anonymous, Authenticated, Unknown
from evex.routes import LOGIN
from evex.storage import ACCESS_TOKEN, REFRESH_TOKEN
from evex.transport import ApiError, AuthExpired
from tests.fakes import FakeHTTP, make_context, me_payload, sign_in


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.http = FakeHTTP()
        self.ctx = make_context(self._tmp.name, self.http)
        self.session = self.ctx.session
        self.tokens = self.ctx.tokens


class TestLogin(SessionTestCase):
    def test_login_example(self) -> None:
        self.http.add("POST", "/token/", body={"access": "jwt1", "refresh": "jwt2"})
        self.http.add("GET", "/profiles/me/", body=me_payload("student"))

        role = self.session.login("alice", "Secret123!")

        self.assertEqual(role, "student")
        self.assertEqual(self.tokens.get(ACCESS_TOKEN), "jwt1")
        self.assertEqual(self.tokens.get(REFRESH_TOKEN), "jwt2")
        self.assertEqual(self.http.last("POST", "/token/")["json"], {"username": "alice", "password": "Secret123!"})
        self.assertEqual(self.http.last("GET", "/profiles/me/")["headers"]["Authorization"], "Bearer jwt1")
        self.assertIsInstance(self.session.state, Authenticated)
        self.assertEqual(self.session.user.username, "alice")

    def test_bad_credentials_leave_session_untouched(self) -> None:
        self.http.add("POST", "/token/", status=401, body={"detail": "No active account found"})

        with self.assertRaises(ApiError) as ctx:
            self.session.login("alice", "wrong")

        self.assertEqual(ctx.exception.detail, "No active account found")
        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))
        self.assertNotIn("/token/refresh/", self.http.paths())

    def test_missing_tokens_in_response(self) -> None:
        self.http.add("POST", "/token/", body={"access": "only"})

        with self.assertRaises(ApiError):
            self.session.login("alice", "Secret123!")
        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))

    def test_identity_failure_clears_tokens(self) -> None:
        self.http.add("POST", "/token/", body={"access": "jwt1", "refresh": "jwt2"})
        self.http.add("GET", "/profiles/me/", status=500, body={"error": "boom"})
        self.http.add("GET", "/profiles/", body=[])

        with self.assertRaises(ApiError):
            self.session.login("alice", "Secret123!")

        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))
        self.assertIsInstance(self.session.state, Anonymous)

    def test_profile_list_fallback(self) -> None:
        self.http.add("POST", "/token/", body={"access": "jwt1", "refresh": "jwt2"})
        self.http.add("GET", "/profiles/me/", status=404, body={"detail": "Not found."})
        self.http.add("GET", "/profiles/", body=[{"id": 3, "user": 7, "user_type": "organizer"}])

        role = self.session.login("bob", "Secret123!")

        self.assertEqual(role, "organizer")
        self.assertEqual(self.session.user.id, 7)
        self.assertEqual(self.session.user.username, "bob")


class TestLoad(SessionTestCase):
    def test_starts_unknown(self) -> None:
        self.assertIsInstance(self.session.state, Unknown)
        self.assertIsNone(self.session.role)

    def test_no_token_is_anonymous_without_http(self) -> None:
        self.assertIsInstance(self.session.load(), Anonymous)
        self.assertEqual(self.session.role, "anonymous")
        self.assertEqual(self.http.calls, [])

    def test_stored_token_is_resolved(self) -> None:
        self.tokens.set(ACCESS_TOKEN, "a")
        self.tokens.set(REFRESH_TOKEN, "r")
        self.http.add("GET", "/profiles/me/", body=me_payload("admin", username="root"))

        state = self.session.load()

        self.assertIsInstance(state, Authenticated)
        self.assertEqual(self.session.role, "admin")

    def test_unknown_user_type_defaults_to_student(self) -> None:
        self.tokens.set(ACCESS_TOKEN, "a")
        payload = me_payload()
        payload["profile"]["user_type"] = "superhero"
        self.http.add("GET", "/profiles/me/", body=payload)

        self.session.load()
        self.assertEqual(self.session.role, "student")

    def test_failed_check_clears_tokens(self) -> None:
        self.tokens.set(ACCESS_TOKEN, "a")
        self.http.add("GET", "/profiles/me/", status=500, body={"error": "down"})
        self.http.add("GET", "/profiles/", status=500, body={"error": "down"})

        self.assertIsInstance(self.session.load(), Anonymous)
        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))


class TestLogout(SessionTestCase):
    def test_logout_clears_storage(self) -> None:
        sign_in(self.ctx)
        self.session.logout()
        self.assertIsInstance(self.session.state, Anonymous)
        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))
        self.assertIsNone(self.tokens.get(REFRESH_TOKEN))

    def test_logout_when_anonymous_is_noop(self) -> None:
        self.session.load()
        self.session.logout()
        self.session.logout()
        self.assertIsInstance(self.session.state, Anonymous)
        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))
        self.assertEqual(self.http.calls, [])


class TestAuthExpiry(SessionTestCase):
    def test_failed_refresh_logs_out(self) -> None:
        sign_in(self.ctx)
        notified: list[bool] = []
        self.tokens.subscribe(lambda: notified.append(self.session.is_authenticated))
        self.http.add("GET", "/registrations/", status=401, body={"detail": "expired"})
        self.http.add("POST", "/token/refresh/", status=401, body={"detail": "expired"})

        with self.assertRaises(AuthExpired):
            self.ctx.api.users.registrations()

        self.assertIsNone(self.tokens.get(ACCESS_TOKEN))
        self.assertIsNone(self.tokens.get(REFRESH_TOKEN))
        self.assertIsInstance(self.session.state, Anonymous)
        self.assertEqual(self.ctx.navigator.current, LOGIN)
        # listeners see the state after the logout
        self.assertEqual(notified, [False])

    def test_expiry_during_load_is_not_retried_with_profiles(self) -> None:
        self.tokens.set(ACCESS_TOKEN, "a")
        self.tokens.set(REFRESH_TOKEN, "r")
        self.http.add("GET", "/profiles/me/", status=401, body={"detail": "expired"})
        self.http.add("POST", "/token/refresh/", status=401, body={"detail": "expired"})

        self.assertIsInstance(self.session.load(), Anonymous)
        self.assertNotIn("/profiles/", self.http.paths())


if __name__ == "__main__":
    unittest.main()
