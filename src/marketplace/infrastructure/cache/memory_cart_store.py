"""In-process CartStore with per-entry expiration.

Stands in for an external cache when running everything in one
process.  Entries are stored as records, so callers never share a Cart
instance with the store.  Expired entries are dropped when read and
swept on every write.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from marketplace.domain.model.cart import Cart
from marketplace.domain.repository.cart_store import CartStore
from marketplace.infrastructure.cache.cart_records import cart_from_raw, cart_to_raw


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCartStore(CartStore):

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=48),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[datetime, dict]] = {}

    def get(self, cart_id: str) -> Cart | None:
        with self._lock:
            entry = self._entries.get(cart_id)
            if entry is None:
                return None
            expires_at, raw = entry
            if expires_at <= self._clock():
                del self._entries[cart_id]
                return None
            return cart_from_raw(raw)

    def put(self, cart: Cart) -> Cart:
        with self._lock:
            now = self._clock()
            self._entries = {
                k: entry for k, entry in self._entries.items() if entry[0] > now
            }
            self._entries[cart.id] = (now + self._ttl, cart_to_raw(cart))
        return cart

    def __len__(self) -> int:
        """Number of entries held, expired ones included until the next put."""
        with self._lock:
            return len(self._entries)

    def delete(self, cart_id: str) -> bool:
        with self._lock:
            entry = self._entries.pop(cart_id, None)
            return entry is not None and entry[0] > self._clock()
