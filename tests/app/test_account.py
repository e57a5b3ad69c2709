from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from scrobbly.app import LastFmAccount
from scrobbly.domain.credentials import ACCOUNT_ID_KEY, SESSION_KEY_KEY
from scrobbly.domain.submission import LIMIT_WILL_BE_EXCEEDED
from scrobbly.domain.types import NOT_AUTHENTICATED
from tests.support.fakes import (
    FakeClientFactory,
    MemoryCredentialStore,
    MemorySettingsStore,
    RecordingLinkOpener,
    make_records,
)

if TYPE_CHECKING:
    from collections.abc import Callable


def test_load_restores_session_and_count(
    make_account: Callable[..., LastFmAccount],
    client_factory: FakeClientFactory,
) -> None:
    client_factory.client.recent_total = 120
    account = make_account(logged_in=True, enabled=True)
    counts: list[int] = []
    account.current_count_changed.subscribe(lambda: counts.append(account.current_count))

    asyncio.run(account.load())

    assert account.is_authenticated
    assert account.account_id == "demo-user"
    assert account.submission_enabled
    assert account.current_count == 120
    assert account.limit == 3000
    assert not account.has_reached_limit
    assert counts == [120]


def test_load_without_credentials_skips_remote(
    make_account: Callable[..., LastFmAccount],
    client_factory: FakeClientFactory,
) -> None:
    account = make_account()

    asyncio.run(account.load())

    assert not account.is_authenticated
    assert account.account_id is None
    assert account.current_count == 0
    assert client_factory.client.calls == []


def test_toggling_submission_notifies_once_per_change(
    make_account: Callable[..., LastFmAccount],
) -> None:
    account = make_account(logged_in=True)
    asyncio.run(account.load())
    notified: list[bool] = []
    account.submission_enabled_changed.subscribe(
        lambda: notified.append(account.submission_enabled)
    )

    account.submission_enabled = True
    account.submission_enabled = True
    account.submission_enabled = False

    assert notified == [True, False]


def test_authenticate_then_save_persists_credentials(
    make_account: Callable[..., LastFmAccount],
    secrets: MemoryCredentialStore,
    settings: MemorySettingsStore,
) -> None:
    account = make_account()

    async def run() -> bool:
        await account.load()
        ok = await account.authenticate()
        account.submission_enabled = True
        await account.save()
        return ok

    assert asyncio.run(run())
    assert secrets.values == {ACCOUNT_ID_KEY: "demo-user", SESSION_KEY_KEY: "session-123"}
    assert settings.records["Last.fm"] == {"submission_enabled": True}


def test_logout_then_save_clears_credentials(
    make_account: Callable[..., LastFmAccount],
    secrets: MemoryCredentialStore,
) -> None:
    account = make_account(logged_in=True, enabled=True)

    async def run() -> None:
        await account.load()
        account.logout()
        await account.save()

    asyncio.run(run())

    assert not account.is_authenticated
    assert secrets.values == {}
    assert account.submission_enabled


def test_submit_reports_progress_and_refreshes_count(
    make_account: Callable[..., LastFmAccount],
    client_factory: FakeClientFactory,
) -> None:
    account = make_account(logged_in=True, enabled=True)
    asyncio.run(account.load())
    progress: list[tuple[int, int]] = []

    result = asyncio.run(
        account.submit(
            iter(make_records(120)), progress=lambda done, total: progress.append((done, total))
        )
    )

    assert result.success
    assert result.total_batches == 3
    assert [len(batch) for batch in client_factory.client.scrobbled] == [50, 50, 20]
    assert progress == [(1, 3), (2, 3), (3, 3)]
    assert account.current_count == 120


def test_submit_refuses_batch_that_would_exceed_limit(
    make_account: Callable[..., LastFmAccount],
    client_factory: FakeClientFactory,
) -> None:
    client_factory.client.recent_total = 2990
    account = make_account(logged_in=True, enabled=True)
    asyncio.run(account.load())

    result = asyncio.run(account.submit(make_records(20)))

    assert not result.success
    assert result.error_message == LIMIT_WILL_BE_EXCEEDED
    assert client_factory.client.scrobble_calls == 0


def test_aclose_runs_close_hook(
    secrets: MemoryCredentialStore,
    settings: MemorySettingsStore,
    client_factory: FakeClientFactory,
    links: RecordingLinkOpener,
) -> None:
    closed: list[bool] = []

    async def on_close() -> None:
        closed.append(True)

    account = LastFmAccount(
        secrets=secrets,
        settings=settings,
        client_factory=client_factory,
        authorization=None,
        links=links,
        on_close=on_close,
    )

    asyncio.run(account.aclose())

    assert closed == [True]
    assert not asyncio.run(account.authenticate())


def test_enabling_at_runtime_gates_submission(
    make_account: Callable[..., LastFmAccount],
    client_factory: FakeClientFactory,
) -> None:
    account = make_account(logged_in=True)
    asyncio.run(account.load())

    account.submission_enabled = True
    first = asyncio.run(account.submit(make_records(3)))

    assert first.success
    assert client_factory.client.scrobble_calls == 1

    account.submission_enabled = False
    second = asyncio.run(account.submit(make_records(3)))

    assert not second.success
    assert second.error_message == NOT_AUTHENTICATED
    assert client_factory.client.scrobble_calls == 1


def test_logout_resets_quota_snapshot(
    make_account: Callable[..., LastFmAccount],
    client_factory: FakeClientFactory,
) -> None:
    client_factory.client.recent_total = 3000
    account = make_account(logged_in=True, enabled=True)
    asyncio.run(account.load())
    assert account.has_reached_limit
    counts: list[int] = []
    account.current_count_changed.subscribe(lambda: counts.append(account.current_count))

    account.logout()

    assert account.current_count == 0
    assert not account.has_reached_limit
    assert counts == [0]
