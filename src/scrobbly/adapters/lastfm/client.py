"""HTTP client for the Last.fm API."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final, Literal

import httpx
from pydantic import BaseModel, ValidationError

from scrobbly.adapters.http_resilience import ResilienceConfig, ResilientClient
from scrobbly.config.lastfm import LASTFM_BASE_URL, LastFmConfig, get_lastfm_config
from scrobbly.domain.ports import (
    ApiResponse,
    EntityInfo,
    RecentActivity,
    RemoteClient,
    RemoteClientFactory,
    ScrobbleBatchAck,
)
from scrobbly.domain.types import SCROBBLE_BATCH_SIZE

from .schema import (
    AlbumInfoResponse,
    ArtistInfoResponse,
    ErrorResponse,
    RecentTracksSummaryResponse,
    ScrobbleResponse,
    TopTagsResponse,
    TrackInfoResponse,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scrobbly.domain.types import ScrobbleRecord

log = getLogger(__name__)

_SIGNING_SKIP: Final[frozenset[str]] = frozenset({"format", "callback"})

type HttpMethod = Literal["GET", "POST"]


def datetime_to_epoch_seconds(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.astimezone(UTC).timestamp())


def sign_params(params: Mapping[str, str], api_secret: str) -> str:
    """Compute ``api_sig``: md5 over sorted ``key+value`` pairs followed by the secret."""

    items = sorted((k, v) for k, v in params.items() if k not in _SIGNING_SKIP)
    raw = "".join(k + v for k, v in items) + api_secret
    return hashlib.md5(raw.encode("utf-8")).hexdigest()  # noqa: S324


def scrobble_params(batch: Sequence[ScrobbleRecord]) -> dict[str, str]:
    params: dict[str, str] = {}
    for index, record in enumerate(batch):
        params[f"artist[{index}]"] = record.artist
        params[f"track[{index}]"] = record.track
        params[f"timestamp[{index}]"] = str(datetime_to_epoch_seconds(record.timestamp))
        if record.album:
            params[f"album[{index}]"] = record.album
        if record.album_artist:
            params[f"albumArtist[{index}]"] = record.album_artist
    return params


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class LastFmAPIError(RuntimeError):
    """Raised when the Last.fm API returns an application-level error."""

    def __init__(
        self, message: str, *, code: int | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


@dataclass(slots=True)
class LastFmTransport:
    """Shared HTTP plumbing: request signing, error payloads and the pooled client."""

    config: LastFmConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _http: ResilientClient | None = field(default=None, init=False, repr=False)

    @property
    def http(self) -> ResilientClient:
        if self._http is None:
            self._http = self.client_factory(self.config.resilience)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def call(
        self,
        method: str,
        params: Mapping[str, str | int],
        *,
        http_method: HttpMethod = "GET",
        signed: bool = False,
        session_key: str | None = None,
    ) -> tuple[object, int]:
        """Perform one API call and return ``(payload, status_code)``.

        Raises ``LastFmAPIError`` for error payloads and ``httpx.HTTPError`` for
        transport failures.
        """

        query: dict[str, str] = {k: str(v) for k, v in params.items()}
        query["method"] = method
        query["api_key"] = self.config.api_key
        if session_key is not None:
            query["sk"] = session_key
        if signed:
            query["api_sig"] = sign_params(query, self.config.api_secret)
        query["format"] = "json"

        base_url = self.config.resilience.base_url or LASTFM_BASE_URL
        if http_method == "POST":
            response = await self.http.post(base_url, data=query)
        else:
            response = await self.http.get(base_url, params=httpx.QueryParams(query))

        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise LastFmAPIError(
                "Unexpected Last.fm response payload", status_code=response.status_code
            ) from None

        if isinstance(payload, dict) and "error" in payload:
            error_payload = ErrorResponse.model_validate(payload)
            log.error(f"Last.fm API error {error_payload.error}: {error_payload.message}")
            raise LastFmAPIError(
                error_payload.message,
                code=error_payload.error,
                status_code=response.status_code,
            )

        response.raise_for_status()
        return payload, response.status_code


@dataclass(slots=True)
class LastFmClient:
    """``RemoteClient`` backed by the Last.fm web API, optionally bound to a session key."""

    transport: LastFmTransport
    session_key: str | None = field(default=None, repr=False)

    async def _request[TModel: BaseModel](
        self,
        method: str,
        params: Mapping[str, str | int],
        model: type[TModel],
        *,
        http_method: HttpMethod = "GET",
        authenticated: bool = False,
    ) -> ApiResponse[TModel]:
        if authenticated and self.session_key is None:
            return ApiResponse.failure("Not authenticated")
        try:
            payload, status = await self.transport.call(
                method,
                params,
                http_method=http_method,
                signed=authenticated,
                session_key=self.session_key if authenticated else None,
            )
            return ApiResponse.success(model.model_validate(payload), status_code=status)
        except LastFmAPIError as exc:
            return ApiResponse.failure(str(exc), status_code=exc.status_code)
        except httpx.HTTPStatusError as exc:
            log.error(f"Last.fm request {method} failed: {exc}")
            return ApiResponse.failure(
                f"HTTP {exc.response.status_code}", status_code=exc.response.status_code
            )
        except httpx.HTTPError as exc:
            log.error(f"Last.fm request {method} failed: {exc}")
            return ApiResponse.failure(str(exc) or type(exc).__name__)
        except ValidationError:
            log.exception(f"Unexpected Last.fm payload for {method}")
            return ApiResponse.failure("Unexpected Last.fm response payload")

    async def scrobble(self, batch: Sequence[ScrobbleRecord]) -> ApiResponse[ScrobbleBatchAck]:
        if len(batch) > SCROBBLE_BATCH_SIZE:
            return ApiResponse.failure(
                f"At most {SCROBBLE_BATCH_SIZE} scrobbles can be sent per request"
            )
        response = await self._request(
            "track.scrobble",
            scrobble_params(batch),
            ScrobbleResponse,
            http_method="POST",
            authenticated=True,
        )
        if not response.is_success or response.data is None:
            return ApiResponse.failure(response.error_message, status_code=response.status_code)
        attr = response.data.scrobbles.attr
        return ApiResponse.success(
            ScrobbleBatchAck(accepted=attr.accepted, ignored=attr.ignored),
            status_code=response.status_code,
        )

    async def get_recent_activity(
        self, user: str, *, from_time: datetime, to_time: datetime
    ) -> ApiResponse[RecentActivity]:
        response = await self._request(
            "user.getrecenttracks",
            {
                "user": user,
                "limit": 1,
                "page": 1,
                "from": datetime_to_epoch_seconds(from_time),
                "to": datetime_to_epoch_seconds(to_time),
            },
            RecentTracksSummaryResponse,
        )
        if not response.is_success or response.data is None:
            return ApiResponse.failure(response.error_message, status_code=response.status_code)
        return ApiResponse.success(
            RecentActivity(total_count=response.data.recenttracks.attr.total),
            status_code=response.status_code,
        )

    async def get_track_info(
        self, artist: str, track: str, *, username: str | None = None
    ) -> ApiResponse[EntityInfo]:
        params: dict[str, str | int] = {"artist": artist, "track": track}
        if username:
            params["username"] = username
        response = await self._request("track.getInfo", params, TrackInfoResponse)
        if not response.is_success or response.data is None:
            return ApiResponse.failure(response.error_message, status_code=response.status_code)
        payload = response.data.track
        return ApiResponse.success(
            EntityInfo(
                name=payload.name,
                user_play_count=payload.user_play_count,
                user_loved=payload.user_loved,
            ),
            status_code=response.status_code,
        )

    async def get_artist_info(
        self, artist: str, *, username: str | None = None
    ) -> ApiResponse[EntityInfo]:
        params: dict[str, str | int] = {"artist": artist}
        if username:
            params["username"] = username
        response = await self._request("artist.getInfo", params, ArtistInfoResponse)
        if not response.is_success or response.data is None:
            return ApiResponse.failure(response.error_message, status_code=response.status_code)
        payload = response.data.artist
        play_count = payload.stats.user_play_count if payload.stats else None
        return ApiResponse.success(
            EntityInfo(name=payload.name, user_play_count=play_count),
            status_code=response.status_code,
        )

    async def get_album_info(
        self, artist: str, album: str, *, username: str | None = None
    ) -> ApiResponse[EntityInfo]:
        params: dict[str, str | int] = {"artist": artist, "album": album}
        if username:
            params["username"] = username
        response = await self._request("album.getInfo", params, AlbumInfoResponse)
        if not response.is_success or response.data is None:
            return ApiResponse.failure(response.error_message, status_code=response.status_code)
        payload = response.data.album
        return ApiResponse.success(
            EntityInfo(name=payload.name, user_play_count=payload.user_play_count),
            status_code=response.status_code,
        )

    async def _top_tags(self, method: str, params: dict[str, str | int]) -> ApiResponse[list[str]]:
        response = await self._request(method, params, TopTagsResponse)
        if not response.is_success or response.data is None:
            return ApiResponse.failure(response.error_message, status_code=response.status_code)
        return ApiResponse.success(list(response.data.names), status_code=response.status_code)

    async def get_artist_tags(self, artist: str) -> ApiResponse[list[str]]:
        return await self._top_tags("artist.getTopTags", {"artist": artist})

    async def get_track_tags(self, artist: str, track: str) -> ApiResponse[list[str]]:
        return await self._top_tags("track.getTopTags", {"artist": artist, "track": track})

    async def get_album_tags(self, artist: str, album: str) -> ApiResponse[list[str]]:
        return await self._top_tags("album.getTopTags", {"artist": artist, "album": album})

    async def set_love_state(self, artist: str, track: str, *, loved: bool) -> ApiResponse[None]:
        response = await self._request(
            "track.love" if loved else "track.unlove",
            {"artist": artist, "track": track},
            _EmptyResponse,
            http_method="POST",
            authenticated=True,
        )
        return _discard(response)

    async def update_now_playing(
        self, artist: str, track: str, *, album: str | None = None
    ) -> ApiResponse[None]:
        params: dict[str, str | int] = {"artist": artist, "track": track}
        if album:
            params["album"] = album
        response = await self._request(
            "track.updateNowPlaying",
            params,
            _EmptyResponse,
            http_method="POST",
            authenticated=True,
        )
        return _discard(response)


class _EmptyResponse(BaseModel):
    """Write calls whose payload carries nothing we need."""


def _discard(response: ApiResponse[_EmptyResponse]) -> ApiResponse[None]:
    if response.is_success:
        return ApiResponse(is_success=True, status_code=response.status_code)
    return ApiResponse.failure(response.error_message, status_code=response.status_code)


@dataclass(slots=True)
class LastFmClientFactory:
    """Builds ``LastFmClient`` handles that share one HTTP connection pool."""

    transport: LastFmTransport

    def __call__(self, session_token: str | None = None) -> LastFmClient:
        return LastFmClient(transport=self.transport, session_key=session_token)

    async def aclose(self) -> None:
        await self.transport.aclose()


def build_lastfm_client_factory(
    config: LastFmConfig | None = None,
    *,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> LastFmClientFactory:
    effective_config = config or get_lastfm_config()
    transport = LastFmTransport(
        config=effective_config,
        client_factory=client_factory or _default_client_factory,
    )
    return LastFmClientFactory(transport=transport)


if TYPE_CHECKING:
    _client_check: RemoteClient = LastFmClient(transport=LastFmTransport(get_lastfm_config()))
    _factory_check: RemoteClientFactory = build_lastfm_client_factory()
