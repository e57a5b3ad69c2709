"""Pydantic models describing the Last.fm API payloads."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _as_list(value: object) -> object:
    # Last.fm collapses single-element collections into a bare object.
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [cast(Mapping[str, object], value)]
    return value


class LastFmBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ErrorResponse(LastFmBaseModel):
    error: int
    message: str


class TokenResponse(LastFmBaseModel):
    token: str


class SessionPayload(LastFmBaseModel):
    name: str
    key: str


class SessionResponse(LastFmBaseModel):
    session: SessionPayload


class ScrobbleAttr(LastFmBaseModel):
    accepted: int = 0
    ignored: int = 0

    @field_validator("accepted", "ignored", mode="before")
    @classmethod
    def _parse_int(cls, value: int | str) -> int:
        return int(value)


class Scrobbles(LastFmBaseModel):
    attr: ScrobbleAttr = Field(alias="@attr")


class ScrobbleResponse(LastFmBaseModel):
    scrobbles: Scrobbles


class ResponseAttr(LastFmBaseModel):
    user: str
    total_pages: int = Field(alias="totalPages")
    page: int
    per_page: int = Field(alias="perPage")
    total: int

    @field_validator("total_pages", "page", "per_page", "total", mode="before")
    @classmethod
    def _parse_int(cls, value: int | str) -> int:
        return int(value)


class RecentTracksSummary(LastFmBaseModel):
    attr: ResponseAttr = Field(alias="@attr")


class RecentTracksSummaryResponse(LastFmBaseModel):
    recenttracks: RecentTracksSummary


class EntityInfoPayload(LastFmBaseModel):
    name: str
    user_play_count: int | None = Field(default=None, alias="userplaycount")
    user_loved: bool | None = Field(default=None, alias="userloved")

    _normalize_play_count = field_validator("user_play_count", mode="before")(_blank_to_none)

    @field_validator("user_loved", mode="before")
    @classmethod
    def _parse_loved(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped == "1" if stripped else None
        return value


class ArtistStats(LastFmBaseModel):
    user_play_count: int | None = Field(default=None, alias="userplaycount")

    _normalize_play_count = field_validator("user_play_count", mode="before")(_blank_to_none)


class ArtistInfoPayload(LastFmBaseModel):
    name: str
    stats: ArtistStats | None = None


class TrackInfoResponse(LastFmBaseModel):
    track: EntityInfoPayload


class AlbumInfoResponse(LastFmBaseModel):
    album: EntityInfoPayload


class ArtistInfoResponse(LastFmBaseModel):
    artist: ArtistInfoPayload


class TagPayload(LastFmBaseModel):
    name: str
    count: int | None = None
    url: str | None = None


class TopTags(LastFmBaseModel):
    tag: list[TagPayload] = Field(default_factory=list)

    _normalize_tag = field_validator("tag", mode="before")(_as_list)


class TopTagsResponse(LastFmBaseModel):
    toptags: TopTags

    @property
    def names(self) -> Sequence[str]:
        return [tag.name for tag in self.toptags.tag]


__all__ = [
    "AlbumInfoResponse",
    "ArtistInfoResponse",
    "EntityInfoPayload",
    "ErrorResponse",
    "RecentTracksSummaryResponse",
    "ScrobbleResponse",
    "SessionResponse",
    "TokenResponse",
    "TopTagsResponse",
    "TrackInfoResponse",
]
