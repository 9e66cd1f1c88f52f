"""Unit of work and generic repository over a DocumentStore.

``DocumentRepository`` is the single Repository implementation for every
entity type; the mapper registered for the type supplies the collection
name and the record conversion.  Reads see committed records overlaid
with the changes staged in the same unit of work.  Nothing reaches the
store until ``DocumentUnitOfWork.complete()``.
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog

from marketplace.domain.exceptions import PersistenceError
from marketplace.domain.repository.repository import Repository
from marketplace.domain.repository.unit_of_work import UnitOfWork
from marketplace.domain.specification import Specification, count, evaluate
from marketplace.infrastructure.persistence.document_store import (
    Change,
    ChangeAction,
    DocumentStore,
)
from marketplace.infrastructure.persistence.mappers import MAPPERS, EntityMapper

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DocumentRepository(Repository[T]):

    def __init__(self, uow: DocumentUnitOfWork, mapper: EntityMapper[T]) -> None:
        self._uow = uow
        self._mapper = mapper
        self._loaded: dict[int, T] = {}  # identity map for this unit of work
        self._added: list[T] = []
        self._removed: set[int] = set()

    # --- Repository interface -------------------------------------------------

    def get_by_id(self, entity_id: int) -> T | None:
        if entity_id in self._removed:
            return None
        if entity_id in self._loaded:
            return self._loaded[entity_id]
        for record in self._uow.store.load(self._mapper.collection):
            if record["id"] == entity_id:
                return self._track(record)
        return None

    def list_by_spec(self, spec: Specification[T]) -> list[T]:
        return evaluate(self._current(), spec, self._mapper.relations(self._uow))

    def first_by_spec(self, spec: Specification[T]) -> T | None:
        results = self.list_by_spec(spec)
        return results[0] if results else None

    def count_by_spec(self, spec: Specification[T]) -> int:
        return count(self._current(), spec)

    def add(self, entity: T) -> None:
        self._added.append(entity)
        self._uow.stage(ChangeAction.ADD, self._mapper, entity)

    def update(self, entity: T) -> None:
        if self._is_added(entity):
            # Not saved yet: the pending add will write its latest state.
            return
        entity_id = getattr(entity, "id", None)
        if entity_id is None:
            raise PersistenceError("Cannot update an entity that was never added")
        self._loaded[entity_id] = entity
        self._uow.stage(ChangeAction.UPDATE, self._mapper, entity)

    def remove(self, entity: T) -> None:
        if self._is_added(entity):
            self._added = [e for e in self._added if e is not entity]
            self._uow.unstage(entity)
            return
        entity_id = getattr(entity, "id", None)
        if entity_id is None:
            raise PersistenceError("Cannot remove an entity that was never added")
        self._removed.add(entity_id)
        self._loaded.pop(entity_id, None)
        self._uow.stage(ChangeAction.REMOVE, self._mapper, entity)

    # --- Staging bookkeeping --------------------------------------------------

    def _is_added(self, entity: T) -> bool:
        return any(e is entity for e in self._added)

    def _track(self, record: dict) -> T:
        entity = self._mapper.to_entity(record)
        self._loaded[record["id"]] = entity
        return entity

    def _current(self) -> list[T]:
        entities: list[T] = []
        for record in self._uow.store.load(self._mapper.collection):
            entity_id = record["id"]
            if entity_id in self._removed:
                continue
            entity = self._loaded.get(entity_id)
            entities.append(entity if entity is not None else self._track(record))
        entities.extend(self._added)
        return entities

    def _committed(self) -> None:
        for entity in self._added:
            self._loaded[entity.id] = entity  # type: ignore[attr-defined]
        self._added.clear()
        self._removed.clear()

    def _discard(self) -> None:
        self._loaded.clear()
        self._added.clear()
        self._removed.clear()


class DocumentUnitOfWork(UnitOfWork):

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self._repositories: dict[type, DocumentRepository[Any]] = {}
        self._pending: list[tuple[ChangeAction, EntityMapper[Any], Any]] = []

    def repository(self, entity_type: type[T]) -> Repository[T]:
        repo = self._repositories.get(entity_type)
        if repo is None:
            mapper = MAPPERS.get(entity_type)
            if mapper is None:
                raise PersistenceError(f"No mapping registered for {entity_type.__name__}")
            repo = DocumentRepository(self, mapper)
            self._repositories[entity_type] = repo
        return repo

    # --- Staging --------------------------------------------------------------

    def stage(self, action: ChangeAction, mapper: EntityMapper[Any], entity: Any) -> None:
        """Record *action* for *entity*, superseding earlier updates to it."""
        if action is not ChangeAction.ADD:
            self._pending = [
                (a, m, e) for a, m, e in self._pending
                if not (a is ChangeAction.UPDATE and m is mapper and e.id == entity.id)
            ]
        self._pending.append((action, mapper, entity))

    def unstage(self, entity: Any) -> None:
        self._pending = [(a, m, e) for a, m, e in self._pending if e is not entity]

    # --- Commit boundary ------------------------------------------------------

    def complete(self) -> int:
        if not self._pending:
            return 0

        changes = [
            Change(
                collection=mapper.collection,
                action=action,
                record=mapper.to_record(entity),
                expected_version=getattr(entity, "version", None),
            )
            for action, mapper, entity in self._pending
        ]

        try:
            written = self.store.commit(changes)
        except PersistenceError as exc:
            logger.warning("Unit of work commit failed", error=str(exc), changes=len(changes))
            self.rollback()
            raise

        for (action, _, entity), change in zip(self._pending, changes):
            if action is ChangeAction.REMOVE:
                continue
            if getattr(entity, "id", None) is None:
                entity.id = change.record["id"]
            if "version" in change.record:
                entity.version = change.record["version"]

        self._pending.clear()
        for repo in self._repositories.values():
            repo._committed()

        logger.debug("Unit of work committed", written=written)
        return written

    def rollback(self) -> None:
        self._pending.clear()
        for repo in self._repositories.values():
            repo._discard()
