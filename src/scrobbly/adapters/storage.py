"""File-backed credential and settings stores."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ValidationError

from scrobbly.domain.ports import CredentialStore, SettingsStore

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


def _read_json(path: Path) -> dict[str, object]:
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        log.warning(f"Ignoring unreadable store file {path}")
        return {}
    if not isinstance(payload, dict):
        log.warning(f"Ignoring malformed store file {path}")
        return {}
    return cast(dict[str, object], payload)


def _write_json(path: Path, payload: dict[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    tmp_path.replace(path)


class FileCredentialStore:
    """Plain JSON key/value file, one section per scope. Values are not encrypted."""

    def __init__(self, path: Path, *, scope: str) -> None:
        self.path = path
        self.scope = scope
        self._lock = asyncio.Lock()

    def _section(self, payload: dict[str, object]) -> dict[str, str]:
        section = payload.get(self.scope)
        if not isinstance(section, dict):
            return {}
        return {str(k): str(v) for k, v in cast(dict[object, object], section).items()}

    async def get(self, key: str) -> str | None:
        payload = await asyncio.to_thread(_read_json, self.path)
        return self._section(payload).get(key)

    async def save(self, key: str, value: str) -> None:
        async with self._lock:
            payload = await asyncio.to_thread(_read_json, self.path)
            section = self._section(payload)
            section[key] = value
            payload[self.scope] = section
            await asyncio.to_thread(_write_json, self.path, payload)

    async def remove(self, key: str) -> None:
        async with self._lock:
            payload = await asyncio.to_thread(_read_json, self.path)
            section = self._section(payload)
            if key not in section:
                return
            del section[key]
            payload[self.scope] = section
            await asyncio.to_thread(_write_json, self.path, payload)


class JsonSettingsStore:
    """Pydantic records serialised into one JSON document keyed by name."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = asyncio.Lock()

    async def get_or_create[TModel: BaseModel](self, name: str, model: type[TModel]) -> TModel:
        payload = await asyncio.to_thread(_read_json, self.path)
        raw = payload.get(name)
        if raw is None:
            return model()
        try:
            return model.model_validate(raw)
        except ValidationError:
            log.warning(f"Discarding invalid settings for {name}")
            return model()

    async def set(self, name: str, record: BaseModel) -> None:
        async with self._lock:
            payload = await asyncio.to_thread(_read_json, self.path)
            payload[name] = record.model_dump(mode="json")
            await asyncio.to_thread(_write_json, self.path, payload)


if TYPE_CHECKING:
    _credential_check: CredentialStore = FileCredentialStore(Path(), scope="")
    _settings_check: SettingsStore = JsonSettingsStore(Path())
