"""Domain port definitions for adapters."""

from __future__ import annotations

from .external import AuthorizationFlow, AuthorizedSession, LinkOpener
from .remote import (
    ApiResponse,
    EntityInfo,
    RecentActivity,
    RemoteClient,
    RemoteClientFactory,
    ScrobbleBatchAck,
)
from .storage import CredentialStore, SettingsStore

__all__ = [
    "ApiResponse",
    "AuthorizationFlow",
    "AuthorizedSession",
    "CredentialStore",
    "EntityInfo",
    "LinkOpener",
    "RecentActivity",
    "RemoteClient",
    "RemoteClientFactory",
    "ScrobbleBatchAck",
    "SettingsStore",
]
