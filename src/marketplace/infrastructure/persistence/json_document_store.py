"""JSON-file-backed implementation of DocumentStore.

Every collection lives in one file so a commit touching several
collections is a single atomic file replace.
"""

from __future__ import annotations

import threading
from pathlib import Path

import structlog

from marketplace.infrastructure.persistence.document_store import (
    Change,
    DocumentStore,
    apply_changes,
)
from marketplace.infrastructure.persistence.json_files import (
    ensure_json_file,
    load_json,
    persist_json,
)

logger = structlog.get_logger(__name__)


class JsonDocumentStore(DocumentStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        ensure_json_file(self._file_path)

    # --- DocumentStore interface ----------------------------------------------

    def load(self, collection: str) -> list[dict]:
        with self._lock:
            return load_json(self._file_path).get(collection, [])

    def commit(self, changes: list[Change]) -> int:
        with self._lock:
            collections, written = apply_changes(load_json(self._file_path), changes)
            persist_json(self._file_path, collections)
        logger.debug("Committed changes", file=str(self._file_path), written=written)
        return written
