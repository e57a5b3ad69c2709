"""Core services: session, quota, submission and metadata lookups."""

from __future__ import annotations

from .credentials import CredentialStoreAdapter
from .events import ChangeNotifier
from .metadata import MetadataQueries
from .quota import QuotaTracker
from .session import SessionManager
from .submission import BatchSubmitter
from .types import (
    SCROBBLE_BATCH_SIZE,
    SCROBBLE_LIMIT,
    Authenticated,
    PreferencesRecord,
    QueryResult,
    ScrobbleRecord,
    SubmissionResult,
    Unauthenticated,
)

__all__ = [
    "SCROBBLE_BATCH_SIZE",
    "SCROBBLE_LIMIT",
    "Authenticated",
    "BatchSubmitter",
    "ChangeNotifier",
    "CredentialStoreAdapter",
    "MetadataQueries",
    "PreferencesRecord",
    "QueryResult",
    "QuotaTracker",
    "ScrobbleRecord",
    "SessionManager",
    "SubmissionResult",
    "Unauthenticated",
]
