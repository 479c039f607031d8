"""
HTTP client wrapper around requests.

Responsibilities:
- attach the stored access token as a bearer header
- decode bodies (JSON when the server says so, text otherwise)
- turn every non-2xx response into an ApiError carrying the payload verbatim
- recover from exactly one expired access token per request by calling
  /token/refresh/ and re-issuing the request once

What it does NOT do: clear tokens, change session state, or navigate.
When a refresh fails it calls the injected `on_auth_expired` callback and
raises AuthExpired; the session decides what that means.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests
from bs4 import BeautifulSoup

from evex.storage import ACCESS_TOKEN, REFRESH_TOKEN, TokenStore


logger = logging.getLogger(__name__)

REFRESH_PATH = "/token/refresh/"
DEFAULT_ERROR = "Something went wrong"
NETWORK_ERROR = "Network error. Please try again."
MAX_MESSAGE_LEN = 200


def _html_text(body: str) -> str:
    soup = BeautifulSoup(body, "html.parser")
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return soup.get_text(" ", strip=True)


def _shorten(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > MAX_MESSAGE_LEN:
        text = text[: MAX_MESSAGE_LEN - 1].rstrip() + "…"
    return text


def error_message(payload: Any, default: str = DEFAULT_ERROR) -> str:
    """
    Pick a human-readable message out of an error payload.

    Order: message, error, detail, then the first DRF field error
    ({"rating": ["Ensure this value is less than or equal to 5."]}).
    """
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        for key, value in payload.items():
            if isinstance(value, list) and value and isinstance(value[0], str):
                return value[0] if key == "non_field_errors" else f"{key}: {value[0]}"
            if isinstance(value, str) and value.strip() and key not in ("status", "code"):
                return f"{key}: {value.strip()}"
        return default

    if isinstance(payload, str) and payload.strip():
        text = payload.strip()
        if text.lstrip().lower().startswith(("<!doctype", "<html")):
            text = _html_text(text)
        return _shorten(text) or default

    return default


class ApiError(Exception):
    """
    A failed call. `status` is the HTTP status (None when no response came
    back), `payload` is the decoded body exactly as the server sent it.

    `detail` is the server-provided message ("" when there is none), so
    callers can substitute their own fallback; `message` is never empty.
    """

    def __init__(self, status: Optional[int], payload: Any = None, message: Optional[str] = None) -> None:
        self.status = status
        self.payload = payload
        self.detail = message or error_message(payload, default="")
        self.message = self.detail or DEFAULT_ERROR
        super().__init__(self.message)


class AuthExpired(ApiError):
    """
    The access token expired and could not be refreshed.
    """


class NetworkError(ApiError):
    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__(None, None, NETWORK_ERROR)
        self.cause = cause


def decode_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("Content-Type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class ApiClient:
    def __init__(
        self,
        base_url: str,
        tokens: TokenStore,
        on_auth_expired: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.tokens = tokens
        self.on_auth_expired = on_auth_expired
        self.http = session if session is not None else requests.Session()
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> requests.Response:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s", method, path)
        try:
            return self.http.request(
                method,
                self.url(path),
                json=json,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(exc) from exc

    def _refresh(self) -> Optional[str]:
        """
        Exchange the stored refresh token for a new access token.

        Goes straight to the HTTP session (never through request()), so the
        refresh call itself is never refreshed or retried.
        Returns the new access token, or None if the refresh failed.
        """
        refresh_token = self.tokens.get(REFRESH_TOKEN)
        if not refresh_token:
            return None

        logger.info("Access token rejected, refreshing")
        try:
            response = self.http.post(
                self.url(REFRESH_PATH),
                json={"refresh": refresh_token},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Token refresh failed: %s", exc)
            return None

        data = decode_body(response)
        access = data.get("access") if isinstance(data, dict) else None
        if not response.ok or not isinstance(access, str) or not access:
            logger.warning("Token refresh rejected (status %s)", response.status_code)
            return None

        self.tokens.set(ACCESS_TOKEN, access)
        # rotated refresh tokens come back alongside the access token
        rotated = data.get("refresh")
        if isinstance(rotated, str) and rotated:
            self.tokens.set(REFRESH_TOKEN, rotated)
        return access

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        authenticate: bool = True,
    ) -> Any:
        token = self.tokens.get(ACCESS_TOKEN) if authenticate else None
        response = self._send(method, path, json=json, params=params, token=token)

        if response.status_code == 401 and authenticate and self.tokens.get(REFRESH_TOKEN):
            new_token = self._refresh()
            if new_token is None:
                if self.on_auth_expired is not None:
                    self.on_auth_expired()
                raise AuthExpired(401, decode_body(response), "Session expired. Please log in again.")
            # single retry; a second 401 falls through to the error below
            response = self._send(method, path, json=json, params=params, token=new_token)

        payload = decode_body(response)
        if not response.ok:
            logger.debug("%s %s -> %s", method, path, response.status_code)
            raise ApiError(response.status_code, payload)
        return payload

    def get(self, path: str, params: Optional[dict[str, Any]] = None, **kwargs: Any) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("PATCH", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)
