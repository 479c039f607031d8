"""
Runtime configuration.

Settings come from the environment (optionally seeded from a local .env file):

    EVEX_API_URL     base URL of the REST backend (default http://localhost:8000/api)
    EVEX_TOKEN_FILE  where the access/refresh token pair is kept
    EVEX_TIMEOUT     per-request timeout in seconds
    EVEX_LOG_LEVEL   logging level name (DEBUG, INFO, ...)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT = 30.0
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _default_token_path() -> Path:
    """
    Return the default location of the token file (~/.evex/session.json).

    A function instead of a constant so tests can point HOME elsewhere.
    """
    return Path.home() / ".evex" / "session.json"


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    token_file: Optional[Path] = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.api_url = self.api_url.rstrip("/")
        if self.token_file is None:
            self.token_file = _default_token_path()
        self.token_file = Path(self.token_file).expanduser()


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT
    return value if value > 0 else DEFAULT_TIMEOUT


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the process environment (after loading .env),
    or from an explicit mapping when one is given.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    token_file = env.get("EVEX_TOKEN_FILE")
    return Settings(
        api_url=env.get("EVEX_API_URL") or DEFAULT_API_URL,
        token_file=Path(token_file) if token_file else None,
        timeout=_parse_timeout(env.get("EVEX_TIMEOUT")),
        log_level=(env.get("EVEX_LOG_LEVEL") or "WARNING").upper(),
    )


def configure_logging(level: str = "WARNING") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
