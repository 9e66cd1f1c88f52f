"""Document store port and the commit rules every store shares.

A document store keeps one list of JSON-compatible records per
collection.  ``commit`` applies a batch of changes all-or-nothing:
``apply_changes`` checks every change against the current records before
anything is replaced, so a store only has to swap in the result.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from marketplace.domain.exceptions import ConcurrencyConflictError


class ChangeAction(Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


@dataclass
class Change:
    collection: str
    action: ChangeAction
    record: dict
    expected_version: int | None = None


class DocumentStore(ABC):

    @abstractmethod
    def load(self, collection: str) -> list[dict]:
        """Return a private copy of every record in *collection*."""

    @abstractmethod
    def commit(self, changes: list[Change]) -> int:
        """Apply *changes* atomically and return the number written.

        New records get an id assigned; versioned records get their
        version bumped.  Both are written back into ``change.record``.
        """


def apply_changes(
    collections: dict[str, list[dict]], changes: list[Change]
) -> tuple[dict[str, list[dict]], int]:
    """Return *collections* with *changes* applied, leaving the input untouched.

    Raises ConcurrencyConflictError if an updated or removed record is gone
    or its version moved on since it was read.
    """
    result = copy.deepcopy(collections)
    applied: list[tuple[Change, dict]] = []

    for change in changes:
        records = result.setdefault(change.collection, [])
        record = copy.deepcopy(change.record)

        if change.action is ChangeAction.ADD:
            if record.get("id") is None:
                record["id"] = max((r["id"] for r in records), default=0) + 1
            elif any(r["id"] == record["id"] for r in records):
                raise ConcurrencyConflictError(
                    f"{change.collection} #{record['id']} already exists"
                )
            if "version" in record:
                record["version"] = 1
            records.append(record)
        else:
            index = _index_of(records, record["id"])
            if index is None:
                raise ConcurrencyConflictError(
                    f"{change.collection} #{record['id']} no longer exists"
                )
            stored_version = records[index].get("version")
            if change.expected_version is not None and stored_version != change.expected_version:
                raise ConcurrencyConflictError(
                    f"{change.collection} #{record['id']} was modified concurrently "
                    f"(expected version {change.expected_version}, found {stored_version})"
                )
            if change.action is ChangeAction.REMOVE:
                del records[index]
            else:
                if stored_version is not None:
                    record["version"] = stored_version + 1
                records[index] = record

        applied.append((change, record))

    for change, record in applied:
        change.record["id"] = record["id"]
        if "version" in record:
            change.record["version"] = record["version"]

    return result, len(applied)


def _index_of(records: list[dict], record_id: int) -> int | None:
    for i, raw in enumerate(records):
        if raw["id"] == record_id:
            return i
    return None
