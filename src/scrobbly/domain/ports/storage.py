"""Ports for persisting credentials and preferences."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pydantic import BaseModel


@runtime_checkable
class CredentialStore(Protocol):
    """Key/value secret storage scoped to one plugin instance."""

    async def get(self, key: str) -> str | None: ...

    async def save(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


@runtime_checkable
class SettingsStore(Protocol):
    """JSON-backed preference records keyed by name."""

    async def get_or_create[TModel: BaseModel](
        self, name: str, model: type[TModel]
    ) -> TModel: ...

    async def set(self, name: str, record: BaseModel) -> None: ...


__all__ = ["CredentialStore", "SettingsStore"]
