from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from scrobbly.domain.credentials import ACCOUNT_ID_KEY, SESSION_KEY_KEY, CredentialStoreAdapter
from scrobbly.domain.metadata import (
    INVALID_ARTIST,
    INVALID_ARTIST_OR_ALBUM,
    INVALID_ARTIST_OR_TRACK,
    MetadataQueries,
    album_url,
    artist_url,
    tag_url,
    track_url,
)
from scrobbly.domain.ports import EntityInfo
from scrobbly.domain.session import SessionManager
from scrobbly.domain.types import NOT_AUTHENTICATED, UNKNOWN_ERROR
from tests.support.fakes import (
    FakeClientFactory,
    MemoryCredentialStore,
    MemorySettingsStore,
    RecordingLinkOpener,
)

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def make_queries(
    client_factory: FakeClientFactory,
    settings: MemorySettingsStore,
    links: RecordingLinkOpener,
) -> Callable[..., MetadataQueries]:
    def factory(*, logged_in: bool = True) -> MetadataQueries:
        values = {ACCOUNT_ID_KEY: "demo-user", SESSION_KEY_KEY: "token"} if logged_in else {}
        session = SessionManager(
            store=CredentialStoreAdapter(
                secrets=MemoryCredentialStore(values), settings=settings, name="Last.fm"
            ),
            client_factory=client_factory,
            authorization=None,
        )
        asyncio.run(session.load())
        return MetadataQueries(session, links)

    return factory


def test_love_state_defaults_missing_flag_to_false(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.info = EntityInfo(name="Track", user_loved=None)

    result = asyncio.run(make_queries().get_love_state("Artist", "Track"))

    assert result.error is None
    assert result.value is False


def test_love_state_reads_flag(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.info = EntityInfo(name="Track", user_loved=True)

    result = asyncio.run(make_queries().get_love_state("Artist", "Track"))

    assert result.ok
    assert result.value is True


def test_state_dependent_reads_require_session(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    queries = make_queries(logged_in=False)

    love = asyncio.run(queries.get_love_state("Artist", "Track"))
    plays = asyncio.run(queries.get_artist_play_count("Artist"))
    now_playing = asyncio.run(queries.update_now_playing("Artist", "Track"))
    set_love = asyncio.run(queries.set_love_state("Artist", "Track", loved=True))

    assert (love.error, love.value) == (NOT_AUTHENTICATED, False)
    assert (plays.error, plays.value) == (NOT_AUTHENTICATED, 0)
    assert now_playing == NOT_AUTHENTICATED
    assert set_love == NOT_AUTHENTICATED
    assert client_factory.client.calls == []


def test_play_counts_default_to_zero(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.info = EntityInfo(name="X", user_play_count=None)
    queries = make_queries()

    assert asyncio.run(queries.get_artist_play_count("Artist")).value == 0
    assert asyncio.run(queries.get_track_play_count("Artist", "Track")).value == 0
    assert asyncio.run(queries.get_album_play_count("Artist", "Album")).value == 0


def test_play_counts_unwrap_value(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.info = EntityInfo(name="X", user_play_count=12)

    result = asyncio.run(make_queries().get_album_play_count("Artist", "Album"))

    assert result.ok
    assert result.value == 12
    assert client_factory.client.calls == ["album.getInfo"]


def test_remote_failure_passes_message_through(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.info_error = "Track not found"

    result = asyncio.run(make_queries().get_track_play_count("Artist", "Track"))

    assert (result.error, result.value) == ("Track not found", 0)


def test_remote_failure_without_message_is_unknown_error(
    make_queries: Callable[..., MetadataQueries],
) -> None:
    result = asyncio.run(make_queries().get_artist_play_count("Artist"))

    assert result.error == UNKNOWN_ERROR


@pytest.mark.parametrize(
    ("call", "expected"),
    [
        (lambda q: q.get_track_play_count("", "Track"), INVALID_ARTIST_OR_TRACK),
        (lambda q: q.get_track_play_count("Artist", ""), INVALID_ARTIST_OR_TRACK),
        (lambda q: q.get_album_play_count("Artist", ""), INVALID_ARTIST_OR_ALBUM),
        (lambda q: q.get_artist_play_count(""), INVALID_ARTIST),
        (lambda q: q.get_track_tags("Artist", ""), INVALID_ARTIST_OR_TRACK),
        (lambda q: q.get_album_tags("", "Album"), INVALID_ARTIST_OR_ALBUM),
    ],
)
def test_validation_errors_skip_network(
    make_queries: Callable[..., MetadataQueries],
    client_factory: FakeClientFactory,
    call: Callable[[MetadataQueries], object],
    expected: str,
) -> None:
    result = asyncio.run(call(make_queries()))  # type: ignore[arg-type]

    assert result.error == expected  # type: ignore[attr-defined]
    assert client_factory.client.calls == []


def test_empty_artist_tags_is_validation_error(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    result = asyncio.run(make_queries(logged_in=False).get_artist_tags(""))

    assert result.error == INVALID_ARTIST
    assert result.value == []
    assert client_factory.client.calls == []


def test_tags_work_without_session(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.tags = ["shoegaze", "dream pop"]

    result = asyncio.run(make_queries(logged_in=False).get_artist_tags("Slowdive"))

    assert result.ok
    assert result.value == ["shoegaze", "dream pop"]
    assert client_factory.tokens == [None]


def test_set_love_state_routes_to_love_or_unlove(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    queries = make_queries()

    assert asyncio.run(queries.set_love_state("Artist", "Track", loved=True)) is None
    assert asyncio.run(queries.set_love_state("Artist", "Track", loved=False)) is None
    assert client_factory.client.calls == ["track.love", "track.unlove"]


def test_update_now_playing_failure_without_message(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    client_factory.client.write_error = "boom"

    error = asyncio.run(make_queries().update_now_playing("Artist", "Track", "Album"))

    assert error == UNKNOWN_ERROR


def test_update_now_playing_validates_names(
    make_queries: Callable[..., MetadataQueries], client_factory: FakeClientFactory
) -> None:
    error = asyncio.run(make_queries().update_now_playing("", "Track"))

    assert error == INVALID_ARTIST_OR_TRACK
    assert client_factory.client.calls == []


def test_track_url_uses_placeholder_for_missing_album() -> None:
    assert track_url("A", "T") == "https://www.last.fm/music/A/_/T"
    assert track_url("A", "T", "") == "https://www.last.fm/music/A/_/T"


def test_urls_escape_each_segment() -> None:
    assert artist_url("AC/DC") == "https://www.last.fm/music/AC%2FDC"
    assert album_url("Sigur Rós", "( )") == "https://www.last.fm/music/Sigur%20R%C3%B3s/%28%20%29"
    assert track_url("A&B", "Who?", "X/Y") == "https://www.last.fm/music/A%26B/X%2FY/Who%3F"
    assert tag_url("hip hop") == "https://www.last.fm/tag/hip%20hop"


def test_open_links_delegate_to_opener(
    make_queries: Callable[..., MetadataQueries], links: RecordingLinkOpener
) -> None:
    queries = make_queries(logged_in=False)

    async def run() -> None:
        await queries.open_artist_link("Artist")
        await queries.open_album_link("Album", "Artist")
        await queries.open_track_link("Track", "Artist", None)
        await queries.open_tag_link("rock")

    asyncio.run(run())

    assert links.opened == [
        "https://www.last.fm/music/Artist",
        "https://www.last.fm/music/Artist/Album",
        "https://www.last.fm/music/Artist/_/Track",
        "https://www.last.fm/tag/rock",
    ]


def test_open_links_ignore_missing_names(
    make_queries: Callable[..., MetadataQueries], links: RecordingLinkOpener
) -> None:
    queries = make_queries()

    async def run() -> None:
        await queries.open_artist_link("")
        await queries.open_album_link("", "Artist")
        await queries.open_track_link("", "Artist")
        await queries.open_tag_link("")

    asyncio.run(run())

    assert links.opened == []
