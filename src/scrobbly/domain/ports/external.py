"""Ports for collaborators that run outside the core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class AuthorizedSession:
    username: str
    session_token: str = field(repr=False)


@runtime_checkable
class AuthorizationFlow(Protocol):
    """Interactive consent flow yielding a session token."""

    async def authenticate(self) -> AuthorizedSession: ...


@runtime_checkable
class LinkOpener(Protocol):
    async def open_link(self, url: str) -> None: ...


__all__ = ["AuthorizationFlow", "AuthorizedSession", "LinkOpener"]
