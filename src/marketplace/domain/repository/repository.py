"""Generic repository port.

One interface serves every entity type; a backing store implements it
once and is parameterised by the entity type it holds.  Defined in the
domain layer so the domain never depends on infrastructure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from marketplace.domain.specification import Specification

T = TypeVar("T")


class Repository(ABC, Generic[T]):

    @abstractmethod
    def get_by_id(self, entity_id: int) -> T | None:
        """Return the entity with this id, or None."""

    @abstractmethod
    def list_by_spec(self, spec: Specification[T]) -> list[T]:
        """Return every entity matching *spec*, ordered and paged."""

    @abstractmethod
    def first_by_spec(self, spec: Specification[T]) -> T | None:
        """Return the first entity matching *spec*, or None."""

    @abstractmethod
    def count_by_spec(self, spec: Specification[T]) -> int:
        """Count entities matching *spec*'s criteria, ignoring its page."""

    @abstractmethod
    def add(self, entity: T) -> None:
        """Stage a new entity for insertion."""

    @abstractmethod
    def update(self, entity: T) -> None:
        """Stage changes to an existing entity."""

    @abstractmethod
    def remove(self, entity: T) -> None:
        """Stage an existing entity for deletion."""
