"""Love state, play counts, tags, now playing and profile links."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from urllib.parse import quote

from .types import NOT_AUTHENTICATED, UNKNOWN_ERROR, QueryResult

if TYPE_CHECKING:
    from .ports import ApiResponse, EntityInfo, LinkOpener, RemoteClient
    from .session import SessionManager

LASTFM_MUSIC_BASE_URL: Final[str] = "https://www.last.fm/music/"
LASTFM_TAG_BASE_URL: Final[str] = "https://www.last.fm/tag/"
MISSING_ALBUM_SEGMENT: Final[str] = "_"

INVALID_ARTIST = "Invalid artist name"
INVALID_ARTIST_OR_TRACK = "Invalid artist or track name"
INVALID_ARTIST_OR_ALBUM = "Invalid artist or album name"


def _escape(segment: str) -> str:
    return quote(segment, safe="")


def artist_url(artist: str) -> str:
    return f"{LASTFM_MUSIC_BASE_URL}{_escape(artist)}"


def album_url(artist: str, album: str) -> str:
    return f"{LASTFM_MUSIC_BASE_URL}{_escape(artist)}/{_escape(album)}"


def track_url(artist: str, track: str, album: str | None = None) -> str:
    album_segment = album or MISSING_ALBUM_SEGMENT
    return (
        f"{LASTFM_MUSIC_BASE_URL}{_escape(artist)}/{_escape(album_segment)}/{_escape(track)}"
    )


def tag_url(tag: str) -> str:
    return f"{LASTFM_TAG_BASE_URL}{_escape(tag)}"


def _error_of(response: ApiResponse[object]) -> str:
    return response.error_message or UNKNOWN_ERROR


class MetadataQueries:
    """Auxiliary lookups; every failure comes back as a message, never an exception."""

    def __init__(self, session: SessionManager, links: LinkOpener) -> None:
        self._session = session
        self._links = links

    def _bound(self) -> tuple[RemoteClient, str] | None:
        client = self._session.client
        username = self._session.account_id
        if not self._session.is_authenticated or client is None or username is None:
            return None
        return client, username

    async def set_love_state(
        self, artist: str, track: str, album: str | None = None, *, loved: bool
    ) -> str | None:
        client = self._session.client
        if not self._session.is_authenticated or client is None:
            return NOT_AUTHENTICATED
        if not artist or not track:
            return INVALID_ARTIST_OR_TRACK

        response = await client.set_love_state(artist, track, loved=loved)
        return None if response.is_success else _error_of(response)

    async def get_love_state(
        self, artist: str, track: str, album: str | None = None
    ) -> QueryResult[bool]:
        bound = self._bound()
        if bound is None:
            return QueryResult(NOT_AUTHENTICATED, False)
        if not artist or not track:
            return QueryResult(INVALID_ARTIST_OR_TRACK, False)

        client, username = bound
        response = await client.get_track_info(artist, track, username=username)
        if response.is_success and response.data is not None:
            return QueryResult(None, bool(response.data.user_loved))
        return QueryResult(_error_of(response), False)

    async def get_artist_play_count(self, artist: str) -> QueryResult[int]:
        bound = self._bound()
        if bound is None:
            return QueryResult(NOT_AUTHENTICATED, 0)
        if not artist:
            return QueryResult(INVALID_ARTIST, 0)

        client, username = bound
        return _play_count(await client.get_artist_info(artist, username=username))

    async def get_track_play_count(self, artist: str, track: str) -> QueryResult[int]:
        bound = self._bound()
        if bound is None:
            return QueryResult(NOT_AUTHENTICATED, 0)
        if not artist or not track:
            return QueryResult(INVALID_ARTIST_OR_TRACK, 0)

        client, username = bound
        return _play_count(await client.get_track_info(artist, track, username=username))

    async def get_album_play_count(self, artist: str, album: str) -> QueryResult[int]:
        bound = self._bound()
        if bound is None:
            return QueryResult(NOT_AUTHENTICATED, 0)
        if not artist or not album:
            return QueryResult(INVALID_ARTIST_OR_ALBUM, 0)

        client, username = bound
        return _play_count(await client.get_album_info(artist, album, username=username))

    async def get_artist_tags(self, artist: str) -> QueryResult[list[str]]:
        if not artist:
            return QueryResult(INVALID_ARTIST, [])
        return _tags(await self._session.public_client().get_artist_tags(artist))

    async def get_track_tags(self, artist: str, track: str) -> QueryResult[list[str]]:
        if not artist or not track:
            return QueryResult(INVALID_ARTIST_OR_TRACK, [])
        return _tags(await self._session.public_client().get_track_tags(artist, track))

    async def get_album_tags(self, artist: str, album: str) -> QueryResult[list[str]]:
        if not artist or not album:
            return QueryResult(INVALID_ARTIST_OR_ALBUM, [])
        return _tags(await self._session.public_client().get_album_tags(artist, album))

    async def update_now_playing(
        self, artist: str, track: str, album: str | None = None
    ) -> str | None:
        client = self._session.client
        if not self._session.is_authenticated or client is None:
            return NOT_AUTHENTICATED
        if not artist or not track:
            return INVALID_ARTIST_OR_TRACK

        response = await client.update_now_playing(artist, track, album=album or None)
        return None if response.is_success else _error_of(response)

    async def open_artist_link(self, artist: str) -> None:
        if not artist:
            return
        await self._links.open_link(artist_url(artist))

    async def open_album_link(self, album: str, artist: str) -> None:
        if not artist or not album:
            return
        await self._links.open_link(album_url(artist, album))

    async def open_track_link(self, track: str, artist: str, album: str | None = None) -> None:
        if not artist or not track:
            return
        await self._links.open_link(track_url(artist, track, album))

    async def open_tag_link(self, tag: str) -> None:
        if not tag:
            return
        await self._links.open_link(tag_url(tag))


def _play_count(response: ApiResponse[EntityInfo]) -> QueryResult[int]:
    if response.is_success and response.data is not None:
        return QueryResult(None, response.data.user_play_count or 0)
    return QueryResult(_error_of(response), 0)


def _tags(response: ApiResponse[list[str]]) -> QueryResult[list[str]]:
    if response.is_success and response.data is not None:
        return QueryResult(None, list(response.data))
    return QueryResult(_error_of(response), [])


__all__ = [
    "INVALID_ARTIST",
    "INVALID_ARTIST_OR_ALBUM",
    "INVALID_ARTIST_OR_TRACK",
    "LASTFM_MUSIC_BASE_URL",
    "LASTFM_TAG_BASE_URL",
    "MISSING_ALBUM_SEGMENT",
    "MetadataQueries",
    "album_url",
    "artist_url",
    "tag_url",
    "track_url",
]
