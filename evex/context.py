"""
Application context: one object carrying everything a page needs.

Pages never reach for globals; they get an AppContext and use its api,
session and navigator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from evex.api import EvexAPI
from evex.config import Settings, load_settings
from evex.routes import Navigator
from evex.session import Session
from evex.storage import TokenStore
from evex.transport import ApiClient


@dataclass
class AppContext:
    settings: Settings
    tokens: TokenStore
    client: ApiClient
    api: EvexAPI
    session: Session
    navigator: Navigator


def build_context(settings: Optional[Settings] = None, http: Optional[requests.Session] = None) -> AppContext:
    """
    Wire storage, transport, endpoints, session and navigator together.

    The transport reports auth expiry to the session through a callback;
    it never clears tokens or navigates on its own.
    """
    settings = settings or load_settings()
    tokens = TokenStore(settings.token_file)
    client = ApiClient(settings.api_url, tokens, session=http, timeout=settings.timeout)
    api = EvexAPI(client)
    navigator = Navigator()
    session = Session(tokens, api, navigator)
    client.on_auth_expired = session.handle_auth_expired
    return AppContext(
        settings=settings,
        tokens=tokens,
        client=client,
        api=api,
        session=session,
        navigator=navigator,
    )
