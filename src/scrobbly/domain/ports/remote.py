"""Ports for the remote scrobbling service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from scrobbly.domain.types import ScrobbleRecord


@dataclass(frozen=True, slots=True)
class ApiResponse[T]:
    """Uniform envelope returned by every remote call."""

    is_success: bool
    data: T | None = None
    error_message: str | None = None
    status_code: int | None = None

    @classmethod
    def success(cls, data: T, *, status_code: int | None = 200) -> ApiResponse[T]:
        return cls(is_success=True, data=data, status_code=status_code)

    @classmethod
    def failure(
        cls, message: str | None, *, status_code: int | None = None
    ) -> ApiResponse[T]:
        return cls(is_success=False, error_message=message, status_code=status_code)


@dataclass(frozen=True, slots=True)
class ScrobbleBatchAck:
    accepted: int
    ignored: int


@dataclass(frozen=True, slots=True)
class RecentActivity:
    total_count: int


@dataclass(frozen=True, slots=True)
class EntityInfo:
    """User-scoped facts about an artist, album or track."""

    name: str
    user_play_count: int | None = None
    user_loved: bool | None = None


@runtime_checkable
class RemoteClient(Protocol):
    """Client handle for the remote service, optionally bound to a session."""

    async def scrobble(
        self, batch: Sequence[ScrobbleRecord]
    ) -> ApiResponse[ScrobbleBatchAck]: ...

    async def get_recent_activity(
        self, user: str, *, from_time: datetime, to_time: datetime
    ) -> ApiResponse[RecentActivity]: ...

    async def get_track_info(
        self, artist: str, track: str, *, username: str | None = None
    ) -> ApiResponse[EntityInfo]: ...

    async def get_artist_info(
        self, artist: str, *, username: str | None = None
    ) -> ApiResponse[EntityInfo]: ...

    async def get_album_info(
        self, artist: str, album: str, *, username: str | None = None
    ) -> ApiResponse[EntityInfo]: ...

    async def get_artist_tags(self, artist: str) -> ApiResponse[list[str]]: ...

    async def get_track_tags(self, artist: str, track: str) -> ApiResponse[list[str]]: ...

    async def get_album_tags(self, artist: str, album: str) -> ApiResponse[list[str]]: ...

    async def set_love_state(
        self, artist: str, track: str, *, loved: bool
    ) -> ApiResponse[None]: ...

    async def update_now_playing(
        self, artist: str, track: str, *, album: str | None = None
    ) -> ApiResponse[None]: ...


@runtime_checkable
class RemoteClientFactory(Protocol):
    """Builds a client; ``session_token`` of ``None`` yields an unbound client."""

    def __call__(self, session_token: str | None = None) -> RemoteClient: ...


__all__ = [
    "ApiResponse",
    "EntityInfo",
    "RecentActivity",
    "RemoteClient",
    "RemoteClientFactory",
    "ScrobbleBatchAck",
]
