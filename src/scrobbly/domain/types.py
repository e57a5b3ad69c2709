"""Value types shared by the scrobbly core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from typing import Final

from pydantic import BaseModel, ConfigDict

SCROBBLE_LIMIT: Final[int] = 3000
SCROBBLE_BATCH_SIZE: Final[int] = 50

NOT_AUTHENTICATED: Final[str] = "Not authenticated"
UNKNOWN_ERROR: Final[str] = "Unknown error"


@dataclass(frozen=True, slots=True)
class ScrobbleRecord:
    """A single play event to report to the service."""

    artist: str
    track: str
    timestamp: datetime
    album: str | None = None
    album_artist: str | None = None


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """Outcome of a whole submission call.

    ``accepted_batches`` counts the batches the service accepted before the
    first failure. Those are not rolled back, so a host retrying after a
    failure should skip ``accepted_batches * SCROBBLE_BATCH_SIZE`` records.
    """

    success: bool
    error_message: str | None = None
    accepted_batches: int = 0
    total_batches: int = 0

    @classmethod
    def ok(cls, *, batches: int = 0) -> SubmissionResult:
        return cls(success=True, accepted_batches=batches, total_batches=batches)

    @classmethod
    def failed(
        cls, message: str, *, accepted_batches: int = 0, total_batches: int = 0
    ) -> SubmissionResult:
        return cls(
            success=False,
            error_message=message,
            accepted_batches=accepted_batches,
            total_batches=total_batches,
        )


@dataclass(frozen=True, slots=True)
class QueryResult[T]:
    """An ``(error, value)`` pair; ``error`` is ``None`` on success."""

    error: str | None
    value: T

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    """No session is held."""

    @property
    def is_authenticated(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Authenticated:
    """A session bound to one account."""

    account_id: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("Authenticated session requires a non-empty token")

    @property
    def is_authenticated(self) -> bool:
        return True


type Session = Unauthenticated | Authenticated


class PreferencesRecord(BaseModel):
    """User preferences persisted next to the session."""

    model_config = ConfigDict(extra="ignore")

    submission_enabled: bool = False


@dataclass(frozen=True, slots=True)
class StoredState:
    """Everything the credential store adapter restores on load."""

    session: Session
    preferences: PreferencesRecord


__all__ = [
    "NOT_AUTHENTICATED",
    "SCROBBLE_BATCH_SIZE",
    "SCROBBLE_LIMIT",
    "UNKNOWN_ERROR",
    "Authenticated",
    "PreferencesRecord",
    "QueryResult",
    "ScrobbleRecord",
    "Session",
    "StoredState",
    "SubmissionResult",
    "Unauthenticated",
]
