"""Cart store port.

Carts are kept in a key-value cache, independent of the relational
store.  Every ``put`` refreshes the entry's time-to-live; an expired or
unknown id reads as None, meaning the cart no longer exists.  Concurrent
writers to one cart id get last-write-wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketplace.domain.model.cart import Cart


class CartStore(ABC):

    @abstractmethod
    def get(self, cart_id: str) -> Cart | None:
        """Return the cart, or None if absent or expired."""

    @abstractmethod
    def put(self, cart: Cart) -> Cart:
        """Store *cart* (overwriting) and refresh its expiration."""

    @abstractmethod
    def delete(self, cart_id: str) -> bool:
        """Remove the cart; True if it existed."""
