"""Unit-of-work port: one commit boundary for one logical operation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import TypeVar

from marketplace.domain.repository.repository import Repository

T = TypeVar("T")


class UnitOfWork(ABC):
    """Groups repository writes so they persist together or not at all.

    ``repository()`` hands out one repository per entity type and keeps
    handing out the same one, so staged changes are shared.  A unit of
    work is used for a single operation and then thrown away.
    """

    @abstractmethod
    def repository(self, entity_type: type[T]) -> Repository[T]:
        """Return the repository for *entity_type*."""

    @abstractmethod
    def complete(self) -> int:
        """Atomically persist every staged change.

        Returns the number of records written.  On failure nothing is
        written, the staged changes are discarded and PersistenceError
        is raised.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard all staged changes."""

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()
