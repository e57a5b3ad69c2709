"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "scrobbly"
PLUGINS_DIR_NAME: Final[str] = "plugins"
SETTINGS_FILENAME: Final[str] = "settings.json"
SECRETS_FILENAME: Final[str] = "settings.dat"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    settings_filename: str = SETTINGS_FILENAME
    secrets_filename: str = SECRETS_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def plugin_dir(self, name: str, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        path = base / PLUGINS_DIR_NAME / name
        if ensure:
            path.mkdir(parents=True, exist_ok=True)
        return path

    def settings_path(self, name: str, *, ensure: bool = True) -> Path:
        return self.plugin_dir(name, ensure=ensure) / self.settings_filename

    def secrets_path(self, name: str, *, ensure: bool = True) -> Path:
        return self.plugin_dir(name, ensure=ensure) / self.secrets_filename


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("SCROBBLY_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)
