"""Public interface for the Last.fm adapter."""

from __future__ import annotations

from .auth import AuthorizationTimeoutError, LastFmAuthFlow, authorization_url
from .client import (
    LastFmAPIError,
    LastFmClient,
    LastFmClientFactory,
    LastFmTransport,
    build_lastfm_client_factory,
    scrobble_params,
    sign_params,
)

__all__ = [
    "AuthorizationTimeoutError",
    "LastFmAPIError",
    "LastFmAuthFlow",
    "LastFmClient",
    "LastFmClientFactory",
    "LastFmTransport",
    "authorization_url",
    "build_lastfm_client_factory",
    "scrobble_params",
    "sign_params",
]
