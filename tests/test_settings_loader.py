from __future__ import annotations

from pathlib import Path

import pytest

from core.libraries.settings import load_settings


def test_load_default_settings() -> None:
    settings = load_settings()

    assert settings.default_ref == "master"
    assert settings.libraries_dir == "libraries"
    assert settings.descriptor_extension == "json"
    assert settings.http_timeout_seconds > 0


def test_load_settings_raises_for_invalid_type(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        """
github_api_prefix: https://api.example.test/repos/org/kernel
github_raw_prefix: https://raw.example.test/org/kernel
libraries_dir: libraries
default_ref: master
http_timeout_seconds: bad_type
""",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Invalid settings schema"):
        load_settings(path)


def test_load_settings_raises_for_non_positive_timeout(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        """
github_api_prefix: https://api.example.test/repos/org/kernel
github_raw_prefix: https://raw.example.test/org/kernel
libraries_dir: libraries
default_ref: master
http_timeout_seconds: 0
""",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Invalid settings schema"):
        load_settings(path)


def test_load_settings_raises_for_unknown_key(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        """
github_api_prefix: https://api.example.test/repos/org/kernel
github_raw_prefix: https://raw.example.test/org/kernel
libraries_dir: libraries
default_ref: master
retries: 3
""",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Invalid settings schema"):
        load_settings(path)


def test_load_settings_applies_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        """
github_api_prefix: https://api.example.test/repos/org/kernel
github_raw_prefix: https://raw.example.test/org/kernel
libraries_dir: descriptors
default_ref: main
""",
        encoding="utf-8",
    )

    settings = load_settings(path)
    assert settings.libraries_dir == "descriptors"
    assert settings.default_ref == "main"
    assert settings.descriptor_extension == "json"
    assert settings.http_timeout_seconds == 10.0


def test_load_settings_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Settings file not found"):
        load_settings(tmp_path / "absent.yaml")


def test_load_settings_raises_for_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("default_ref: [unclosed", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML in settings file"):
        load_settings(path)


def test_load_settings_raises_for_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Settings file must contain a mapping"):
        load_settings(path)
