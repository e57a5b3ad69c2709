"""Locally cached view of the rolling daily scrobble quota."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .events import ChangeNotifier
from .time_windows import trailing_day, utcnow
from .types import SCROBBLE_LIMIT, UNKNOWN_ERROR

if TYPE_CHECKING:
    from .session import SessionManager
    from .time_windows import Clock

log = getLogger(__name__)


class QuotaTracker:
    """Counts scrobbles in the trailing 24 hours as last reported by the service.

    ``current_count`` is a snapshot taken at the last ``refresh``; it is not an
    upper bound between refreshes. A failed refresh resets the count to zero so
    a transient lookup error never blocks submission.
    """

    limit: int = SCROBBLE_LIMIT

    def __init__(self, session: SessionManager, *, clock: Clock = utcnow) -> None:
        self._session = session
        self._clock = clock
        self._current_count = 0
        self.changed = ChangeNotifier("current scrobble count")

    @property
    def current_count(self) -> int:
        return self._current_count

    @current_count.setter
    def current_count(self, value: int) -> None:
        if value != self._current_count:
            self._current_count = value
            self.changed.notify()

    @property
    def has_reached_limit(self) -> bool:
        return self._current_count >= self.limit

    def would_exceed(self, count: int) -> bool:
        return self._current_count + count > self.limit

    def can_accept(self, count: int) -> bool:
        return not self.has_reached_limit and not self.would_exceed(count)

    async def refresh(self) -> None:
        log.debug("Updating scrobble count...")

        client = self._session.client
        username = self._session.account_id
        if not self._session.is_authenticated or username is None or client is None:
            self.current_count = 0
            log.warning("Cannot update scrobble count: not authenticated")
            return

        from_time, to_time = trailing_day(clock=self._clock)
        response = await client.get_recent_activity(username, from_time=from_time, to_time=to_time)
        if response.is_success and response.data is not None:
            self.current_count = response.data.total_count
        else:
            self.current_count = 0
            log.error(
                "Failed to update scrobble count: " + (response.error_message or UNKNOWN_ERROR)
            )


__all__ = ["QuotaTracker"]
