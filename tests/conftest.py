from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from scrobbly.app import LastFmAccount
from scrobbly.domain.credentials import ACCOUNT_ID_KEY, SESSION_KEY_KEY
from scrobbly.domain.ports import AuthorizedSession
from tests.support.fakes import (
    FakeAuthorizationFlow,
    FakeClientFactory,
    MemoryCredentialStore,
    MemorySettingsStore,
    RecordingLinkOpener,
    fixed_clock,
)

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def client_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def secrets() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def settings() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture
def authorization() -> FakeAuthorizationFlow:
    return FakeAuthorizationFlow(
        session=AuthorizedSession(username="demo-user", session_token="session-123")
    )


@pytest.fixture
def links() -> RecordingLinkOpener:
    return RecordingLinkOpener()


@pytest.fixture
def make_account(
    client_factory: FakeClientFactory,
    secrets: MemoryCredentialStore,
    settings: MemorySettingsStore,
    authorization: FakeAuthorizationFlow,
    links: RecordingLinkOpener,
) -> Callable[..., LastFmAccount]:
    def factory(*, logged_in: bool = False, enabled: bool = False) -> LastFmAccount:
        if logged_in:
            secrets.values[ACCOUNT_ID_KEY] = "demo-user"
            secrets.values[SESSION_KEY_KEY] = "session-123"
        if enabled:
            settings.records["Last.fm"] = {"submission_enabled": True}
        return LastFmAccount(
            secrets=secrets,
            settings=settings,
            client_factory=client_factory,
            authorization=authorization,
            links=links,
            clock=fixed_clock,
        )

    return factory
