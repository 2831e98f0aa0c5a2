from pathlib import Path

import pytest

from . import config
from .config import DEFAULT_TAGS_FILE, StorageSettings, load_seed_tags


def test_settings_resolve_under_base_path(tmp_path: Path):
    settings = StorageSettings(base_path=tmp_path)
    assert settings.storage_path == tmp_path / "data"
    assert settings.database_path == tmp_path / "data" / "snipboard.db"


def test_absolute_storage_path_is_kept(tmp_path: Path):
    settings = StorageSettings(base_path=Path("/elsewhere"), storage_path=tmp_path)
    assert settings.storage_path == tmp_path


def test_settings_read_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("SNIPBOARD_STORAGE_PATH", str(tmp_path))
    monkeypatch.setenv("SNIPBOARD_DATABASE_NAME", "custom.db")
    settings = StorageSettings()
    assert settings.database_path == tmp_path / "custom.db"


def test_default_tags_file_loads():
    assert DEFAULT_TAGS_FILE.exists()
    assert "algorithms" in load_seed_tags()


def test_missing_tags_file_is_empty(tmp_path: Path):
    assert load_seed_tags(tmp_path / "nope.yaml") == []


def test_tags_file_must_be_mapping(tmp_path: Path):
    path = tmp_path / "tags.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a mapping"):
        load_seed_tags(path)


def test_tags_key_must_be_list(tmp_path: Path):
    path = tmp_path / "tags.yaml"
    path.write_text("tags: python\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a list"):
        load_seed_tags(path)


def test_default_tags_file_named_in_error(tmp_path: Path, monkeypatch):
    path = tmp_path / "tags.yaml"
    path.write_text("tags: python\n", encoding="utf-8")
    monkeypatch.setattr(config, "DEFAULT_TAGS_FILE", path)
    with pytest.raises(ValueError) as exc_info:
        load_seed_tags()
    assert str(path) in str(exc_info.value)
    assert "None" not in str(exc_info.value)
