"""Application services: fetch and discard carts."""

from __future__ import annotations

from marketplace.domain.model.cart import Cart
from marketplace.domain.repository.cart_store import CartStore


class GetCartHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, cart_id: str) -> Cart:
        """Return the cart, or a new empty one if the id is unknown or expired.

        The empty cart is not stored until something is added to it.
        """
        return self._cart_store.get(cart_id) or Cart(id=cart_id)


class DeleteCartHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, cart_id: str) -> bool:
        return self._cart_store.delete(cart_id)
