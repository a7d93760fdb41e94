"""CLI I/O helpers for atomic output writing."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from core.utils.events import dump_json


def write_text_atomic(path: Path, text: str) -> None:
    """Write text using a temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)

    fd, raw_tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f"{path.name}.",
        suffix=".tmp",
    )
    os.close(fd)
    tmp_path = Path(raw_tmp_path)

    try:
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write compact, key-sorted JSON atomically."""

    write_text_atomic(path, dump_json(payload))
