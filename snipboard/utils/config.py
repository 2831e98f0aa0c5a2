"""Settings and YAML config loading for snipboard."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"
DEFAULT_TAGS_FILE = CONFIG_DIR / "tags.yaml"


class StorageSettings(BaseSettings):
    """Settings for the snippet database location."""

    model_config = SettingsConfigDict(env_prefix="SNIPBOARD_")

    base_path: Path = Field(
        Path("."),
        description="Base directory for relative storage paths.",
    )

    storage_path: Path = Field(
        Path("data"),
        description="Directory containing the snippet database.",
    )

    database_name: str = Field(
        "snipboard.db",
        description="File name of the SQLite database inside storage_path.",
    )

    tags_file: Path = Field(
        DEFAULT_TAGS_FILE,
        description="YAML file listing tags to seed on init.",
    )

    @model_validator(mode="after")
    def _apply_base_path(self) -> "StorageSettings":
        self.storage_path = self._resolve_under_base(self.storage_path)
        self.tags_file = self._resolve_under_base(self.tags_file)
        return self

    def _resolve_under_base(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.base_path / path

    @property
    def database_path(self) -> Path:
        return self.storage_path / self.database_name


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def load_seed_tags(path: Path | None = None) -> list[str]:
    """Read the `tags:` list from a YAML file.

    Returns an empty list when the file is missing or has no tags key.
    """
    path = path or DEFAULT_TAGS_FILE
    data = _load_yaml(path)
    tags = data.get("tags") or []
    if not isinstance(tags, list):
        raise ValueError(f"'tags' must be a list in {path}")
    return [str(tag) for tag in tags]
