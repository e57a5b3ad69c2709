"""Authentication state and the remote client bound to it."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .types import Authenticated, PreferencesRecord, Unauthenticated

if TYPE_CHECKING:
    from .credentials import CredentialStoreAdapter
    from .ports import AuthorizationFlow, RemoteClient, RemoteClientFactory
    from .types import Session

log = getLogger(__name__)


class SessionManager:
    """Owns the session; callers only ever see ``is_authenticated`` and ``account_id``."""

    def __init__(
        self,
        *,
        store: CredentialStoreAdapter,
        client_factory: RemoteClientFactory,
        authorization: AuthorizationFlow | None,
    ) -> None:
        self._store = store
        self._client_factory = client_factory
        self._authorization = authorization
        self._session: Session = Unauthenticated()
        self._client: RemoteClient | None = None
        self._public_client: RemoteClient | None = None
        self.preferences = PreferencesRecord()

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def account_id(self) -> str | None:
        if isinstance(self._session, Authenticated):
            return self._session.account_id or None
        return None

    @property
    def client(self) -> RemoteClient | None:
        """The session-bound client, or ``None`` while unauthenticated."""

        return self._client

    def public_client(self) -> RemoteClient:
        """Client for lookups that need no session."""

        if self._client is not None:
            return self._client
        if self._public_client is None:
            self._public_client = self._client_factory(None)
        return self._public_client

    async def load(self) -> None:
        log.debug("Loading settings...")
        state = await self._store.load()
        self.preferences = state.preferences
        self._bind(state.session)

    async def save(self) -> None:
        await self._store.save(self._session, self.preferences)

    async def authenticate(self) -> bool:
        """Run the authorization flow; prior state survives any failure."""

        if self._authorization is None:
            log.error("Cannot authenticate: no API key/secret configured")
            return False

        log.debug("Starting OAuth flow")
        try:
            authorized = await self._authorization.authenticate()
            session = Authenticated(
                account_id=authorized.username, token=authorized.session_token
            )
        except Exception:
            log.exception("Error during OAuth flow.")
            return False

        self._bind(session)
        log.debug(f"Finished OAuth flow. Logged in as {session.account_id}")
        return True

    def logout(self) -> None:
        self._bind(Unauthenticated())

    def _bind(self, session: Session) -> None:
        self._session = session
        if isinstance(session, Authenticated):
            self._client = self._client_factory(session.token)
        else:
            self._client = None


__all__ = ["SessionManager"]
