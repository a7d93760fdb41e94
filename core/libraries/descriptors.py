"""Descriptor decoding, descriptor sources and remote change detection."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from core.libraries.models import ByDirectory, LibraryDescriptor, LibraryResolutionInfo
from core.libraries.settings import LibrariesSettings, load_settings
from core.utils.errors import DescriptorParseError, LibraryNotFoundError
from core.utils.events import log_event
from core.utils.http import get_json, get_text

logger = logging.getLogger("libresolve.libraries")


def parse_library_descriptor(json_text: str, name: str | None = None) -> LibraryDescriptor:
    """Decode descriptor JSON text; the top-level value must be an object."""

    try:
        raw = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise DescriptorParseError(
            f"Invalid descriptor JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            name=name,
        ) from exc

    if not isinstance(raw, dict):
        actual_type = _json_type_name(raw)
        raise DescriptorParseError(
            f"Result of library descriptor parsing is of type {actual_type} which is unexpected",
            actual_type=actual_type,
            name=name,
        )
    return parse_library_descriptor_object(raw, name=name)


def parse_library_descriptor_object(
    raw: Mapping[str, Any], name: str | None = None
) -> LibraryDescriptor:
    try:
        return LibraryDescriptor.model_validate(raw)
    except ValidationError as exc:
        label = f"'{name}' " if name else ""
        raise DescriptorParseError(
            f"Invalid descriptor {label}schema: {exc.error_count()} error(s)",
            actual_type="object",
            name=name,
        ) from exc


def parse_library_descriptors(
    library_jsons: Mapping[str, Mapping[str, Any]],
) -> dict[str, LibraryDescriptor]:
    """Decode several already-parsed descriptor objects keyed by library name."""

    descriptors: dict[str, LibraryDescriptor] = {}
    for name, raw in library_jsons.items():
        log_event(logger, logging.INFO, "descriptor_parse", name=name)
        descriptors[name] = parse_library_descriptor_object(raw, name=name)
    return descriptors


def load_descriptors_from_dir(
    directory: Path, settings: LibrariesSettings | None = None
) -> dict[str, LibraryDescriptor]:
    """Parse every descriptor file in ``directory``, keyed by file stem."""

    resolved = settings or load_settings()
    descriptors: dict[str, LibraryDescriptor] = {}
    for path in sorted(directory.glob(f"*.{resolved.descriptor_extension}")):
        log_event(logger, logging.INFO, "descriptor_parse", name=path.stem, path=str(path))
        descriptors[path.stem] = parse_library_descriptor(
            path.read_text(encoding="utf-8"), name=path.stem
        )
    return descriptors


def fetch_descriptor_text(
    name: str,
    info: LibraryResolutionInfo,
    settings: LibrariesSettings | None = None,
    client: httpx.Client | None = None,
) -> str:
    """Read one descriptor's raw JSON from a directory or a remote reference."""

    resolved = settings or load_settings()
    file_name = f"{name}.{resolved.descriptor_extension}"

    if isinstance(info, ByDirectory):
        try:
            return (info.path / file_name).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise LibraryNotFoundError(name) from exc

    url = (
        f"{resolved.github_raw_prefix}/{quote(info.ref, safe='/')}"
        f"/{resolved.libraries_dir}/{quote(file_name, safe='')}"
    )
    try:
        return get_text(url, timeout=resolved.http_timeout_seconds, client=client)
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == 404:
            raise LibraryNotFoundError(name) from exc
        raise


def get_latest_commit_to_libraries(
    ref: str,
    since_timestamp: str | None = None,
    settings: LibrariesSettings | None = None,
    client: httpx.Client | None = None,
) -> tuple[str, str] | None:
    """Return ``(sha, timestamp)`` of the newest commit touching the descriptors.

    With ``since_timestamp`` and no match, the query is retried once
    unfiltered. Any failure is logged and reported as None.
    """

    resolved = settings or load_settings()
    url = f"{resolved.github_api_prefix}/commits"
    params = {"path": resolved.libraries_dir, "sha": ref}
    if since_timestamp is not None:
        params["since"] = since_timestamp

    try:
        log_event(logger, logging.INFO, "commit_check", url=url, params=params)
        commits = get_json(
            url, timeout=resolved.http_timeout_seconds, client=client, params=params
        )
        if not commits:
            if since_timestamp is not None:
                return get_latest_commit_to_libraries(ref, None, resolved, client)
            log_event(
                logger, logging.INFO, "commit_check_empty", url=url, path=resolved.libraries_dir
            )
            return None
        commit = commits[0]
        return commit["sha"], commit["commit"]["committer"]["date"]
    except (
        httpx.HTTPError,
        httpx.InvalidURL,
        ValueError,
        KeyError,
        TypeError,
        IndexError,
    ) as exc:
        log_event(
            logger,
            logging.WARNING,
            "commit_check_failed",
            url=url,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )
        return None


def _json_type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, list):
        return "list"
    return type(value).__name__
