"""
Routing policy: which screen a given session may see.

The guards are pure functions of the session state. They run once per
navigation; nothing re-checks them while a screen is open.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from evex.model import DEFAULT_ROLE, ROLES, Anonymous, Authenticated, SessionState, Unknown


HOME = "/"
EVENTS = "/events"
LOGIN = "/login"
REGISTER = "/register"
DASHBOARD = "/dashboard"
DASHBOARDS = {role: f"{DASHBOARD}/{role}" for role in ROLES}

AUTH_ROUTES = (LOGIN, REGISTER)
MAX_REDIRECTS = 5


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Pending:
    """
    Session still loading: show a placeholder, decide later.
    """


@dataclass(frozen=True)
class Redirect:
    path: str


Decision = Union[Allow, Pending, Redirect]


def dashboard_for(role: Optional[str]) -> str:
    return DASHBOARDS.get(role or "", DASHBOARDS[DEFAULT_ROLE])


def _strip_query(path: str) -> str:
    return path.split("?", 1)[0].rstrip("/") or HOME


def area_of(path: str) -> Optional[str]:
    """
    Role that owns a dashboard path, e.g. '/dashboard/organizer/events' -> 'organizer'.
    """
    clean = _strip_query(path)
    for role, prefix in DASHBOARDS.items():
        if clean == prefix or clean.startswith(prefix + "/"):
            return role
    return None


def guard(state: SessionState, expected_role: str) -> Decision:
    if isinstance(state, Unknown):
        return Pending()
    if isinstance(state, Anonymous):
        return Redirect(LOGIN)
    if isinstance(state, Authenticated):
        if state.user.role != expected_role:
            return Redirect(DASHBOARD)
        return Allow()
    raise TypeError(f"Unexpected session state: {state!r}")


def dispatch_dashboard(state: SessionState) -> Decision:
    """
    The /dashboard router: send the user to their role's landing page.
    """
    if isinstance(state, Unknown):
        return Pending()
    if isinstance(state, Anonymous):
        return Redirect(LOGIN)
    if isinstance(state, Authenticated):
        return Redirect(dashboard_for(state.user.role))
    raise TypeError(f"Unexpected session state: {state!r}")


def resolve(state: SessionState, path: str) -> Decision:
    """
    Full policy for one navigation target.
    """
    clean = _strip_query(path)

    if clean in AUTH_ROUTES:
        return Redirect(DASHBOARD) if isinstance(state, Authenticated) else Allow()

    if clean == DASHBOARD:
        return dispatch_dashboard(state)

    role = area_of(clean)
    if role is not None:
        return guard(state, role)

    if clean.startswith(DASHBOARD + "/"):
        # unknown dashboard sub-path: still needs a session
        return dispatch_dashboard(state)

    return Allow()


class Navigator:
    """
    Stand-in for the browser location: the current path plus history.
    """

    def __init__(self, start: str = HOME) -> None:
        self.current = start
        self.history: list[str] = [start]

    def push(self, path: str) -> None:
        self.current = path
        self.history.append(path)

    def back(self) -> str:
        if len(self.history) > 1:
            self.history.pop()
            self.current = self.history[-1]
        return self.current

    def follow(self, state: SessionState, path: str) -> tuple[Decision, str]:
        """
        Navigate to `path`, following redirects until a screen is allowed
        (or the session is still loading).
        """
        target = path
        for _ in range(MAX_REDIRECTS):
            decision = resolve(state, target)
            if isinstance(decision, Redirect):
                target = decision.path
                continue
            self.push(target)
            return decision, target
        raise RuntimeError(f"Too many redirects starting at {path}")
