"""Desktop authorization flow for Last.fm.

The user approves the application in a browser; meanwhile we poll
``auth.getSession`` with the request token until the approval lands.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from scrobbly.domain.ports import AuthorizedSession

from .client import LastFmAPIError, LastFmTransport
from .schema import SessionResponse, TokenResponse

if TYPE_CHECKING:
    from scrobbly.domain.ports import LinkOpener

log = getLogger(__name__)

# Error codes returned by auth.getSession while the user has not yet approved.
_PENDING_CODES: Final[frozenset[int]] = frozenset({14})


class AuthorizationTimeoutError(TimeoutError):
    """Raised when the user did not approve access in time."""


def authorization_url(auth_url: str, *, api_key: str, token: str) -> str:
    query = httpx.QueryParams({"api_key": api_key, "token": token})
    return f"{auth_url}?{query}"


@dataclass(slots=True)
class LastFmAuthFlow:
    transport: LastFmTransport
    links: LinkOpener
    poll_interval_seconds: float = 3.0
    timeout_seconds: float = 300.0
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def authenticate(self) -> AuthorizedSession:
        payload, _ = await self.transport.call("auth.getToken", {}, http_method="POST", signed=True)
        token = TokenResponse.model_validate(payload).token

        config = self.transport.config
        url = authorization_url(config.auth_url, api_key=config.api_key, token=token)
        log.info(f"Waiting for Last.fm authorization at {url}")
        await self.links.open_link(url)

        waited = 0.0
        while True:
            try:
                payload, _ = await self.transport.call(
                    "auth.getSession", {"token": token}, http_method="POST", signed=True
                )
            except LastFmAPIError as exc:
                if exc.code not in _PENDING_CODES:
                    raise
                if waited >= self.timeout_seconds:
                    raise AuthorizationTimeoutError(
                        "Last.fm authorization was not granted in time"
                    ) from exc
                await self.sleep(self.poll_interval_seconds)
                waited += self.poll_interval_seconds
                continue

            session = SessionResponse.model_validate(payload).session
            return AuthorizedSession(username=session.name, session_token=session.key)
