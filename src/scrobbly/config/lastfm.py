"""Last.fm configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from scrobbly import __version__

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook

LASTFM_BASE_URL = "https://ws.audioscrobbler.com/2.0/"
LASTFM_AUTH_URL = "https://www.last.fm/api/auth/"
LASTFM_TIMEOUT_SECONDS = 10.0
LASTFM_USER_AGENT = f"scrobbly/{__version__}"


def cache_tag_lookups_only(payload: object) -> bool:
    # Only tag lookups are user-independent; counts and history must stay fresh.
    return isinstance(payload, dict) and "toptags" in payload


@dataclass(frozen=True)
class LastFmConfig:
    """Holds Last.fm API credentials and HTTP behaviour."""

    api_key: str
    api_secret: str = field(repr=False)
    resilience: ResilienceConfig = field(default_factory=lambda: default_lastfm_resilience())
    auth_url: str = LASTFM_AUTH_URL


def default_lastfm_resilience(
    *, cache_predicate: ShouldCacheHook = cache_tag_lookups_only
) -> ResilienceConfig:
    return ResilienceConfig(
        name="lastfm",
        base_url=LASTFM_BASE_URL,
        timeout_seconds=LASTFM_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        cache=CacheConfig(should_cache=cache_predicate),
        default_headers={"User-Agent": LASTFM_USER_AGENT},
    )


def get_lastfm_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook = cache_tag_lookups_only,
) -> LastFmConfig:
    values = require_env_vars(("LASTFM_API_KEY", "LASTFM_API_SECRET"))
    return LastFmConfig(
        api_key=values["LASTFM_API_KEY"],
        api_secret=values["LASTFM_API_SECRET"],
        resilience=resilience or default_lastfm_resilience(cache_predicate=cache_predicate),
    )
