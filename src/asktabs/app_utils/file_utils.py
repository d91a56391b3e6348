"""JSON file helpers for the persisted state blob."""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional


def read_json(path: Path) -> Optional[Dict[str, Any]]:
    """Read a JSON object from path; None if the file does not exist.

    Raises:
        OSError: If the file exists but cannot be read.
        ValueError: If the content is not a JSON object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not hold a JSON object")
    return data


def atomic_write_json(path: Path, data: Dict[str, Any], indent: int = 2) -> None:
    """Write data as JSON through a temp file in the same directory.

    Readers see either the previous or the new content, never a partial file.

    Raises:
        OSError: If writing fails.
        TypeError: If data is not JSON serializable.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_path)
        raise
