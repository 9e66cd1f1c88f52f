"""File helpers shared by the JSON-backed stores.

Writes go to a temp file in the same directory that is then swapped in
with ``os.replace``, so readers only ever see a complete file.  I/O and
decoding failures surface as PersistenceError.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from marketplace.domain.exceptions import PersistenceError


def load_json(file_path: Path) -> dict[str, Any]:
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PersistenceError(f"Cannot read {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise PersistenceError(f"Cannot read {file_path}: expected a JSON object")
    return data


def persist_json(file_path: Path, data: Any) -> None:
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=file_path.parent, prefix=file_path.name, suffix=".tmp"
        )
    except OSError as exc:
        raise PersistenceError(f"Cannot write {file_path}: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(data, indent=2) + "\n")
        os.replace(tmp_name, file_path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise PersistenceError(f"Cannot write {file_path}: {exc}") from exc


def ensure_json_file(file_path: Path) -> None:
    """Create *file_path* holding an empty object if it does not exist."""
    if file_path.exists():
        return
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text("{}", encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Cannot create {file_path}: {exc}") from exc
