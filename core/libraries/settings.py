"""Settings loading for descriptor sources and remote lookups."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class LibrariesSettings(BaseModel):
    """Where descriptors live and how to reach them."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    github_api_prefix: str
    github_raw_prefix: str
    libraries_dir: str
    default_ref: str
    descriptor_extension: str = "json"
    http_timeout_seconds: float = Field(default=10.0, gt=0)


def load_settings(path: Path | None = None) -> LibrariesSettings:
    """Load and validate settings from YAML."""

    settings_path = path or Path(__file__).with_name("settings.yaml")

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Settings file not found: {settings_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in settings file: {settings_path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a mapping: {settings_path}")

    try:
        return LibrariesSettings.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings schema: {settings_path}") from exc
