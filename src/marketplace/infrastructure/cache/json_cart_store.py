"""JSON-file-backed implementation of CartStore.

Keeps carts between CLI invocations.  Each entry records when it
expires; expired entries read as absent and are pruned on the next write.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import structlog

from marketplace.domain.exceptions import PersistenceError
from marketplace.domain.model.cart import Cart
from marketplace.domain.repository.cart_store import CartStore
from marketplace.infrastructure.cache.cart_records import cart_from_raw, cart_to_raw
from marketplace.infrastructure.persistence.json_files import (
    ensure_json_file,
    load_json,
    persist_json,
)

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JsonCartStore(CartStore):

    def __init__(
        self,
        file_path: Path,
        ttl: timedelta = timedelta(hours=48),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._file_path = file_path
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        ensure_json_file(self._file_path)

    # --- CartStore interface --------------------------------------------------

    def get(self, cart_id: str) -> Cart | None:
        with self._lock:
            entry = load_json(self._file_path).get(cart_id)
        if entry is None or self._expired(entry):
            return None
        try:
            return cart_from_raw(entry["cart"])
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise PersistenceError(f"Cart '{cart_id}' in {self._file_path} is malformed") from exc

    def put(self, cart: Cart) -> Cart:
        with self._lock:
            entries = self._live_entries()
            entries[cart.id] = {
                "expires_at": (self._clock() + self._ttl).isoformat(),
                "cart": cart_to_raw(cart),
            }
            persist_json(self._file_path, entries)
        logger.debug("Cart stored", cart_id=cart.id, items=len(cart.items))
        return cart

    def delete(self, cart_id: str) -> bool:
        with self._lock:
            entries = load_json(self._file_path)
            entry = entries.pop(cart_id, None)
            if entry is None:
                return False
            persist_json(self._file_path, entries)
        return not self._expired(entry)

    # --- Helpers --------------------------------------------------------------

    def _expired(self, entry: dict) -> bool:
        try:
            expires_at = datetime.fromisoformat(entry["expires_at"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Cart entry in {self._file_path} has no valid expiry") from exc
        return expires_at <= self._clock()

    def _live_entries(self) -> dict[str, dict]:
        return {k: v for k, v in load_json(self._file_path).items() if not self._expired(v)}
