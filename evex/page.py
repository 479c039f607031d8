"""
Base class for feature pages.

A page is one (fetch-on-mount, render, mutate, re-fetch) unit:

- mount() runs the route guard and then loads the page's resources
- actions are single HTTP calls; on success the page re-fetches everything,
  on failure the server's message ends up in `error`
- `busy` disables further actions while one call is outstanding

Pages keep no state beyond their own lifetime and never share a cache.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from evex.context import AppContext
from evex.fetching import Resource
from evex.routes import Allow, Pending
from evex.transport import ApiError


logger = logging.getLogger(__name__)


class Page:
    # role owning the page's dashboard area; None for public pages
    role: Optional[str] = None
    path: str = "/"

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx
        self.message: Optional[str] = None
        self.error: Optional[str] = None
        self.busy = False
        self.resources: dict[str, Resource] = {}

    @property
    def api(self):
        return self.ctx.api

    @property
    def session(self):
        return self.ctx.session

    def resource(self, name: str, loader: Callable[[], Any], default_error: str) -> Resource:
        res = Resource(loader, default_error)
        self.resources[name] = res
        return res

    def mount(self) -> bool:
        """
        Guard, then fetch. Returns False when the page was redirected away
        or the session is still unresolved.
        """
        decision, landed = self.ctx.navigator.follow(self.session.state, self.path)
        if isinstance(decision, Pending):
            return False
        if landed.split("?", 1)[0] != self.path.split("?", 1)[0]:
            logger.debug("%s redirected to %s", self.path, landed)
            return False
        if not isinstance(decision, Allow):
            return False
        self.refresh()
        return True

    def refresh(self) -> None:
        for res in self.resources.values():
            res.load()

    def clear_banners(self) -> None:
        self.message = None
        self.error = None

    def mutate(self, action: Callable[[], Any], success: str, failure: str) -> bool:
        """
        Run one mutating call. Returns True on success.
        """
        if self.busy:
            return False

        self.busy = True
        self.clear_banners()
        try:
            action()
        except ApiError as exc:
            logger.warning("%s: %s", failure, exc.message)
            self.error = exc.detail or failure
            return False
        finally:
            self.busy = False

        self.message = success
        self.refresh()
        return True
