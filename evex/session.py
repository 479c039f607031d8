"""
Session holder: who is logged in, and with which role.

State machine:

    Unknown --load()--> Anonymous | Authenticated(user)
    Anonymous --login()--> Authenticated(user)
    Authenticated --logout() / auth expiry--> Anonymous

Every transition writes or clears exactly the two stored tokens.
"""

from __future__ import annotations

import logging
from typing import Optional

from evex.api import EvexAPI
from evex.model import ANONYMOUS, Anonymous, Authenticated, SessionState, Unknown, User, as_list
from evex.routes import LOGIN, Navigator
from evex.storage import ACCESS_TOKEN, REFRESH_TOKEN, TokenStore
from evex.transport import ApiError, AuthExpired


logger = logging.getLogger(__name__)

__all__ = ["Session", "SessionState", "Unknown", "Anonymous", "Authenticated"]


class Session:
    def __init__(self, tokens: TokenStore, api: EvexAPI, navigator: Navigator) -> None:
        self.tokens = tokens
        self.api = api
        self.navigator = navigator
        self.state: SessionState = Unknown()

    @property
    def user(self) -> Optional[User]:
        return self.state.user if isinstance(self.state, Authenticated) else None

    @property
    def role(self) -> Optional[str]:
        """
        'student' / 'organizer' / 'admin', 'anonymous', or None while Unknown.
        """
        if isinstance(self.state, Authenticated):
            return self.state.user.role
        if isinstance(self.state, Anonymous):
            return ANONYMOUS
        return None

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self.state, Authenticated)

    def _who_am_i(self, username: str = "") -> User:
        """
        Fetch the current identity. Falls back to the profile list when
        /profiles/me/ is unavailable; an expired session is not retried.
        """
        try:
            return User.from_me(self.api.users.me(), username=username)
        except AuthExpired:
            raise
        except ApiError as exc:
            logger.info("/profiles/me/ failed (%s), falling back to /profiles/", exc.message)

        profiles = self.api.users.profiles()
        items = as_list(profiles) if not isinstance(profiles, dict) or "results" in profiles else [profiles]
        if not items:
            raise ApiError(None, profiles, "Profile not found")
        return User.from_profile(items[0], username=username)

    def load(self) -> SessionState:
        """
        Resolve the initial state from storage plus one "who am I" call.
        """
        if not self.tokens.get(ACCESS_TOKEN):
            self.state = Anonymous()
            return self.state

        try:
            user = self._who_am_i()
        except ApiError as exc:
            logger.warning("Auth check failed: %s", exc.message)
            self.tokens.clear()
            self.state = Anonymous()
            return self.state

        self.state = Authenticated(user)
        return self.state

    def login(self, identifier: str, password: str) -> str:
        """
        Exchange credentials for tokens, load the identity, return its role.

        Concurrent logins are not de-duplicated; the last one to write the
        token file wins.
        """
        payload = self.api.auth.login(identifier, password)
        access = payload.get("access") if isinstance(payload, dict) else None
        refresh = payload.get("refresh") if isinstance(payload, dict) else None
        if not access or not refresh:
            raise ApiError(None, payload, "Login response did not include tokens")

        self.tokens.set(ACCESS_TOKEN, access)
        self.tokens.set(REFRESH_TOKEN, refresh)

        try:
            user = self._who_am_i(username=identifier)
        except ApiError:
            self.tokens.clear()
            self.state = Anonymous()
            raise

        self.state = Authenticated(user)
        logger.info("Logged in as %s (%s)", user.username, user.role)
        return user.role

    def logout(self) -> None:
        self.tokens.clear()
        self.state = Anonymous()

    def handle_auth_expired(self) -> None:
        """
        Called by the transport when a token refresh fails.
        """
        logger.warning("Session expired, logging out")
        self.tokens.clear()
        self.state = Anonymous()
        self.tokens.dispatch_change()
        self.navigator.push(LOGIN)
