from __future__ import annotations

from typing import TYPE_CHECKING

from scrobbly.config import StorageConfig, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_data_dir_comes_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SCROBBLY_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "data").resolve()


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SCROBBLY_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    monkeypatch.setattr("scrobbly.config.storage.os.name", "posix")

    assert get_storage_config().data_dir == (tmp_path / "scrobbly").resolve()


def test_plugin_paths_are_created_on_demand(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path)

    settings_path = config.settings_path("Last.fm")
    secrets_path = config.secrets_path("Last.fm")

    assert settings_path == tmp_path.resolve() / "plugins" / "Last.fm" / "settings.json"
    assert secrets_path == tmp_path.resolve() / "plugins" / "Last.fm" / "settings.dat"
    assert settings_path.parent.is_dir()
    assert not settings_path.exists()


def test_paths_can_be_resolved_without_creating(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path / "missing")

    path = config.plugin_dir("Last.fm", ensure=False)

    assert not path.exists()
