"""Host-facing account facade and default wiring."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from scrobbly.adapters.lastfm import LastFmAuthFlow, build_lastfm_client_factory
from scrobbly.adapters.links import BrowserLinkOpener
from scrobbly.adapters.storage import FileCredentialStore, JsonSettingsStore
from scrobbly.config import get_lastfm_config, get_storage_config
from scrobbly.domain import (
    BatchSubmitter,
    ChangeNotifier,
    CredentialStoreAdapter,
    MetadataQueries,
    QuotaTracker,
    SessionManager,
)
from scrobbly.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from scrobbly.config import LastFmConfig, StorageConfig
    from scrobbly.domain.ports import (
        AuthorizationFlow,
        CredentialStore,
        LinkOpener,
        RemoteClientFactory,
        SettingsStore,
    )
    from scrobbly.domain.time_windows import Clock
    from scrobbly.domain.types import QueryResult, ScrobbleRecord, SubmissionResult

log = getLogger(__name__)

PLUGIN_NAME: Final[str] = "Last.fm"


class LastFmAccount:
    """Everything a host application needs from a Last.fm account.

    Call ``load`` once at startup and ``save`` before exit. ``submit`` must not
    run concurrently for the same account.
    """

    def __init__(
        self,
        *,
        secrets: CredentialStore,
        settings: SettingsStore,
        client_factory: RemoteClientFactory,
        authorization: AuthorizationFlow | None,
        links: LinkOpener,
        name: str = PLUGIN_NAME,
        clock: Clock = utcnow,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.name = name
        self._session = SessionManager(
            store=CredentialStoreAdapter(secrets=secrets, settings=settings, name=name),
            client_factory=client_factory,
            authorization=authorization,
        )
        self._quota = QuotaTracker(self._session, clock=clock)
        self._submitter = BatchSubmitter(self._session, self._quota)
        self._queries = MetadataQueries(self._session, links)
        self._on_close = on_close
        self.submission_enabled_changed = ChangeNotifier("scrobbling enabled")

    # lifecycle

    async def load(self) -> None:
        await self._session.load()
        await self._quota.refresh()
        log.debug(
            f"Loaded {self.name} account: authenticated={self.is_authenticated}, "
            f"scrobbles today={self.current_count}"
        )

    async def save(self) -> None:
        await self._session.save()

    async def authenticate(self) -> bool:
        return await self._session.authenticate()

    def logout(self) -> None:
        self._session.logout()
        self._quota.current_count = 0

    async def aclose(self) -> None:
        if self._on_close is not None:
            await self._on_close()

    # session

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def account_id(self) -> str | None:
        return self._session.account_id

    @property
    def submission_enabled(self) -> bool:
        return self._session.preferences.submission_enabled

    @submission_enabled.setter
    def submission_enabled(self, value: bool) -> None:
        if value != self._session.preferences.submission_enabled:
            self._session.preferences.submission_enabled = value
            self.submission_enabled_changed.notify()

    # quota

    @property
    def current_count(self) -> int:
        return self._quota.current_count

    @property
    def limit(self) -> int:
        return self._quota.limit

    @property
    def has_reached_limit(self) -> bool:
        return self._quota.has_reached_limit

    @property
    def current_count_changed(self) -> ChangeNotifier:
        return self._quota.changed

    async def refresh_count(self) -> None:
        await self._quota.refresh()

    # submission

    async def submit(
        self,
        records: Iterable[ScrobbleRecord],
        *,
        progress: Callable[[int, int], None] | None = None,
    ) -> SubmissionResult:
        return await self._submitter.submit(tuple(records), progress=progress)

    # metadata

    async def set_love_state(
        self, artist: str, track: str, album: str | None = None, *, loved: bool
    ) -> str | None:
        return await self._queries.set_love_state(artist, track, album, loved=loved)

    async def get_love_state(
        self, artist: str, track: str, album: str | None = None
    ) -> QueryResult[bool]:
        return await self._queries.get_love_state(artist, track, album)

    async def get_artist_play_count(self, artist: str) -> QueryResult[int]:
        return await self._queries.get_artist_play_count(artist)

    async def get_track_play_count(self, artist: str, track: str) -> QueryResult[int]:
        return await self._queries.get_track_play_count(artist, track)

    async def get_album_play_count(self, artist: str, album: str) -> QueryResult[int]:
        return await self._queries.get_album_play_count(artist, album)

    async def get_artist_tags(self, artist: str) -> QueryResult[list[str]]:
        return await self._queries.get_artist_tags(artist)

    async def get_track_tags(self, artist: str, track: str) -> QueryResult[list[str]]:
        return await self._queries.get_track_tags(artist, track)

    async def get_album_tags(self, artist: str, album: str) -> QueryResult[list[str]]:
        return await self._queries.get_album_tags(artist, album)

    async def update_now_playing(
        self, artist: str, track: str, album: str | None = None
    ) -> str | None:
        return await self._queries.update_now_playing(artist, track, album)

    async def open_artist_link(self, artist: str) -> None:
        await self._queries.open_artist_link(artist)

    async def open_album_link(self, album: str, artist: str) -> None:
        await self._queries.open_album_link(album, artist)

    async def open_track_link(self, track: str, artist: str, album: str | None = None) -> None:
        await self._queries.open_track_link(track, artist, album)

    async def open_tag_link(self, tag: str) -> None:
        await self._queries.open_tag_link(tag)


def build_lastfm_account(
    *,
    config: LastFmConfig | None = None,
    storage: StorageConfig | None = None,
    links: LinkOpener | None = None,
    name: str = PLUGIN_NAME,
) -> LastFmAccount:
    """Wire the account with file storage and the HTTP Last.fm client."""

    storage_config = storage or get_storage_config()
    effective_links = links or BrowserLinkOpener()

    factory = build_lastfm_client_factory(config or get_lastfm_config())
    authorization = LastFmAuthFlow(transport=factory.transport, links=effective_links)

    return LastFmAccount(
        secrets=FileCredentialStore(storage_config.secrets_path(name), scope=name),
        settings=JsonSettingsStore(storage_config.settings_path(name)),
        client_factory=factory,
        authorization=authorization,
        links=effective_links,
        name=name,
        on_close=factory.aclose,
    )
