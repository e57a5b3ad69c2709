"""Facade over the external credential and settings stores."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from .types import Authenticated, PreferencesRecord, StoredState, Unauthenticated

if TYPE_CHECKING:
    from .ports import CredentialStore, SettingsStore
    from .types import Session

log = getLogger(__name__)

ACCOUNT_ID_KEY: Final[str] = "AccountId"
SESSION_KEY_KEY: Final[str] = "SessionKey"


class CredentialStoreAdapter:
    """Load and persist the session identity and user preferences."""

    def __init__(
        self,
        *,
        secrets: CredentialStore,
        settings: SettingsStore,
        name: str,
    ) -> None:
        self._secrets = secrets
        self._settings = settings
        self.name = name

    async def load(self) -> StoredState:
        account_id = await self._secrets.get(ACCOUNT_ID_KEY)
        token = await self._secrets.get(SESSION_KEY_KEY)
        preferences = await self._settings.get_or_create(self.name, PreferencesRecord)

        session: Session = Unauthenticated()
        if token:
            session = Authenticated(account_id=account_id or "", token=token)
        elif account_id:
            log.debug("Stored account id without session key; ignoring it")
        return StoredState(session=session, preferences=preferences)

    async def save(self, session: Session, preferences: PreferencesRecord) -> None:
        if isinstance(session, Authenticated):
            if session.account_id:
                await self._secrets.save(ACCOUNT_ID_KEY, session.account_id)
            else:
                await self._secrets.remove(ACCOUNT_ID_KEY)
            await self._secrets.save(SESSION_KEY_KEY, session.token)
        else:
            await self._secrets.remove(ACCOUNT_ID_KEY)
            await self._secrets.remove(SESSION_KEY_KEY)

        await self._settings.set(self.name, preferences)


__all__ = ["ACCOUNT_ID_KEY", "SESSION_KEY_KEY", "CredentialStoreAdapter"]
