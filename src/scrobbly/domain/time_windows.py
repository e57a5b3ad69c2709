"""Rolling time windows anchored on an injectable clock."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class RollingWindow:
    """A fixed-length window that always ends at the clock's current time."""

    length: timedelta

    def __post_init__(self) -> None:
        if self.length < timedelta(0):
            raise ValueError("Window length must be non-negative")

    def bounds(self, *, clock: Clock = utcnow) -> tuple[datetime, datetime]:
        """Return ``(start, end)`` in UTC; a naive clock reading is taken as UTC."""

        end = clock()
        if end.tzinfo is None:
            end = end.replace(tzinfo=UTC)
        end = end.astimezone(UTC)
        return end - self.length, end


QUOTA_WINDOW = RollingWindow(length=timedelta(hours=24))


def trailing_day(*, clock: Clock = utcnow) -> tuple[datetime, datetime]:
    return QUOTA_WINDOW.bounds(clock=clock)


__all__ = ["QUOTA_WINDOW", "Clock", "RollingWindow", "trailing_day", "utcnow"]
