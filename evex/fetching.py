"""
Shared data fetching: one call, one tagged result.

Instead of a loading/error/data triple on every page, a Resource holds exactly
one of Loading, Failed or Ready.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from evex.transport import ApiError


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Failed:
    message: str
    status: Optional[int] = None


@dataclass(frozen=True)
class Ready(Generic[T]):
    value: T


Result = Union[Loading, Failed, Ready[T]]


def fetch(loader: Callable[[], T], default_error: str = "Failed to load data.") -> Result:
    try:
        return Ready(loader())
    except ApiError as exc:
        logger.warning("%s (%s)", default_error, exc.message)
        return Failed(exc.detail or default_error, exc.status)


class Resource(Generic[T]):
    def __init__(self, loader: Callable[[], T], default_error: str = "Failed to load data.") -> None:
        self.loader = loader
        self.default_error = default_error
        self.state: Result = Loading()

    def load(self) -> Result:
        self.state = Loading()
        self.state = fetch(self.loader, self.default_error)
        return self.state

    @property
    def loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def value(self) -> Optional[T]:
        return self.state.value if isinstance(self.state, Ready) else None

    @property
    def error(self) -> Optional[str]:
        return self.state.message if isinstance(self.state, Failed) else None

    def value_or(self, default: Any) -> Any:
        value = self.value
        return default if value is None else value
