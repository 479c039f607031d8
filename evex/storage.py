"""
Persistent storage for the session tokens.

This module manages a small JSON file (by default ~/.evex/session.json):

    {"access_token": "...", "refresh_token": "..."}

Design rationale:
- the two tokens are the only client state that survives between runs
- everything else (user, profile, events) is re-fetched from the backend

The store also lets other parts of the process subscribe to changes, so a
forced logout can be noticed by whoever is currently drawing the screen.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional


logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access_token"
REFRESH_TOKEN = "refresh_token"
TOKEN_KEYS = (ACCESS_TOKEN, REFRESH_TOKEN)


class TokenStore:
    """
    File-backed holder for the access/refresh token pair.

    Reads go to the file every time, so two stores pointing at the same path
    see each other's writes (last write wins, there is no locking).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._listeners: list[Callable[[], None]] = []

    def _load(self) -> dict[str, str]:
        # First run: file does not exist yet -> no tokens
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable token file %s", self.path)
            return {}

        if not isinstance(data, dict):
            return {}

        out: dict[str, str] = {}
        for key in TOKEN_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value:
                out[key] = value
        return out

    def _save(self, data: dict[str, str]) -> None:
        if not data:
            self.path.unlink(missing_ok=True)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        if key not in TOKEN_KEYS:
            raise KeyError(key)
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def clear(self) -> None:
        """
        Remove both tokens. Safe to call when nothing is stored.
        """
        if self._load():
            self._save({})

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """
        Register a change listener. Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch_change(self) -> None:
        for listener in list(self._listeners):
            listener()
