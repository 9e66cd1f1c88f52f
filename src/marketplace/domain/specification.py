"""Query specifications and their evaluator.

A ``Specification`` is a plain, immutable description of a query: which
entities match, which relations to load alongside them, how to order
them and which page to return.  ``evaluate`` interprets one against an
in-memory collection; it never mutates its inputs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from marketplace.domain.exceptions import ValidationError

T = TypeVar("T")

Predicate = Callable[[T], bool]
RelationLoader = Callable[[T], T]


@dataclass(frozen=True)
class Page:
    """A paging window: skip ``offset`` entities, return at most ``size``."""

    offset: int
    size: int

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValidationError(f"Page size must be positive, got {self.size}")
        if self.offset < 0:
            raise ValidationError(f"Page offset cannot be negative, got {self.offset}")

    @staticmethod
    def of(page_index: int, page_size: int) -> Page:
        """Build a window from a 1-based page index."""
        if page_index < 1:
            raise ValidationError(f"Page index must be at least 1, got {page_index}")
        return Page(offset=(page_index - 1) * page_size, size=page_size)


def _match_all(entity: Any) -> bool:
    return True


@dataclass(frozen=True)
class Specification(Generic[T]):
    criteria: Predicate = _match_all
    includes: tuple[str, ...] = ()
    order_by: Callable[[T], Any] | None = None
    descending: bool = False
    page: Page | None = None

    # --- Builders (each returns a new specification) --------------------------

    def where(self, predicate: Predicate) -> Specification[T]:
        """AND *predicate* onto the existing criteria."""
        current = self.criteria
        if current is _match_all:
            return replace(self, criteria=predicate)
        return replace(self, criteria=lambda e: current(e) and predicate(e))

    def include(self, *relations: str) -> Specification[T]:
        return replace(self, includes=self.includes + tuple(relations))

    def ordered_by(
        self, key: Callable[[T], Any], descending: bool = False
    ) -> Specification[T]:
        return replace(self, order_by=key, descending=descending)

    def paged(self, offset: int, size: int) -> Specification[T]:
        return replace(self, page=Page(offset, size))

    def unpaged(self) -> Specification[T]:
        return replace(self, page=None)


def _entity_id(entity: Any) -> Any:
    # Unsaved entities (id None) sort ahead of saved ones.
    entity_id = getattr(entity, "id", None)
    return (entity_id is not None, entity_id if entity_id is not None else 0)


def evaluate(
    entities: Iterable[T],
    spec: Specification[T],
    relations: Mapping[str, RelationLoader] | None = None,
) -> list[T]:
    """Apply *spec* to *entities*.

    Filtering comes first, then ordering, then paging, and finally the
    requested relations are loaded for the entities that made the page.
    Entities are first sorted by id so that a stable sort on the ordering
    key leaves ties in id order, whichever direction is requested.  An
    offset past the end yields an empty list.
    """
    unknown = [name for name in spec.includes if name not in (relations or {})]
    if unknown:
        raise ValidationError(f"Cannot include unknown relation(s): {', '.join(unknown)}")

    result = sorted((e for e in entities if spec.criteria(e)), key=_entity_id)

    if spec.order_by is not None:
        result.sort(key=spec.order_by, reverse=spec.descending)

    if spec.page is not None:
        result = result[spec.page.offset : spec.page.offset + spec.page.size]

    for name in spec.includes:
        loader = relations[name]  # type: ignore[index]
        result = [loader(e) for e in result]

    return result


def count(entities: Iterable[T], spec: Specification[T]) -> int:
    """Number of entities matching the criteria; paging is ignored."""
    return sum(1 for e in entities if spec.criteria(e))
