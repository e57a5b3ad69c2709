"""Batched scrobble submission."""

from __future__ import annotations

import math
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from .types import NOT_AUTHENTICATED, SCROBBLE_BATCH_SIZE, UNKNOWN_ERROR, SubmissionResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from .quota import QuotaTracker
    from .session import SessionManager
    from .types import ScrobbleRecord

    type ProgressCallback = Callable[[int, int], None]

log = getLogger(__name__)

LIMIT_REACHED = "Scrobble limit reached"
LIMIT_WILL_BE_EXCEEDED = "Scrobble limit will be exceeded"


def batch_count(total: int, *, size: int = SCROBBLE_BATCH_SIZE) -> int:
    return math.ceil(total / size) if total > 0 else 0


def partition(
    records: Iterable[ScrobbleRecord], *, size: int = SCROBBLE_BATCH_SIZE
) -> list[tuple[ScrobbleRecord, ...]]:
    """Split ``records`` into order-preserving batches; only the last may be short."""

    return list(batched(records, size))


class BatchSubmitter:
    """Submits scrobbles in sequential batches, stopping at the first failure.

    Batches accepted before a failure stay accepted; nothing is retried or
    rolled back. Callers must serialise ``submit`` per account since the quota
    check reads a shared snapshot.
    """

    def __init__(
        self,
        session: SessionManager,
        quota: QuotaTracker,
        *,
        batch_size: int = SCROBBLE_BATCH_SIZE,
    ) -> None:
        self._session = session
        self._quota = quota
        self.batch_size = batch_size

    async def submit(
        self,
        records: Sequence[ScrobbleRecord],
        *,
        progress: ProgressCallback | None = None,
    ) -> SubmissionResult:
        client = self._session.client
        if (
            not self._session.preferences.submission_enabled
            or not self._session.is_authenticated
            or client is None
        ):
            log.warning(
                "Tried to scrobble, but scrobbling was not enabled, or client was not authenticated"
            )
            return SubmissionResult.failed(NOT_AUTHENTICATED)

        if not records:
            return SubmissionResult.ok()

        await self._quota.refresh()
        if self._quota.has_reached_limit:
            log.warning("Scrobble limit reached; not scrobbling.")
            return SubmissionResult.failed(LIMIT_REACHED)
        if self._quota.would_exceed(len(records)):
            log.warning("Scrobble limit will be exceeded; not scrobbling.")
            return SubmissionResult.failed(LIMIT_WILL_BE_EXCEEDED)

        total = batch_count(len(records), size=self.batch_size)
        for index, batch in enumerate(partition(records, size=self.batch_size), start=1):
            log.info(f"Scrobbling batch {index} / {total}...")
            if progress is not None:
                progress(index, total)
            response = await client.scrobble(batch)
            log.info(f"Scrobble Status: {response.status_code}")
            if not response.is_success:
                message = response.error_message or UNKNOWN_ERROR
                log.error("Error during scrobble: " + message)
                return SubmissionResult.failed(
                    message, accepted_batches=index - 1, total_batches=total
                )
            if response.data is not None and response.data.ignored:
                log.warning(
                    "Batch %s: accepted=%s, ignored=%s",
                    index,
                    response.data.accepted,
                    response.data.ignored,
                )

        await self._quota.refresh()
        return SubmissionResult.ok(batches=total)


__all__ = [
    "LIMIT_REACHED",
    "LIMIT_WILL_BE_EXCEEDED",
    "BatchSubmitter",
    "batch_count",
    "partition",
]
