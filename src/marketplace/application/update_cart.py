"""Application services: change what is in a cart.

Only the cart store is written; the catalog is read to take item
snapshots and delivery prices.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from marketplace.application.specifications import product_with_details
from marketplace.domain.exceptions import EntityNotFoundError
from marketplace.domain.model.cart import Cart, CartItem
from marketplace.domain.model.order import DeliveryMethod
from marketplace.domain.model.product import Product
from marketplace.domain.model.value_objects import Quantity
from marketplace.domain.repository.cart_store import CartStore
from marketplace.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AddCartItemHandler:

    def __init__(self, cart_store: CartStore, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._cart_store = cart_store
        self._uow_factory = uow_factory

    def handle(self, cart_id: str, product_id: int, quantity: int) -> Cart:
        """Add *quantity* of a product, snapshotting its current details."""
        qty = Quantity(quantity)
        with self._uow_factory() as uow:
            product = uow.repository(Product).first_by_spec(product_with_details(product_id))
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        cart = self._cart_store.get(cart_id) or Cart(id=cart_id)
        cart.add_item(
            CartItem(
                product_id=product_id,
                product_name=product.name,
                price=product.price,
                quantity=qty,
                picture_url=product.picture_url,
                brand=product.brand.name if product.brand else "",
                type=product.type.name if product.type else "",
            )
        )
        self._cart_store.put(cart)
        logger.info("Item added to cart", cart_id=cart_id, product_id=product_id, quantity=quantity)
        return cart


class RemoveCartItemHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, cart_id: str, product_id: int, quantity: int | None = None) -> Cart:
        """Remove some units of a product, or the whole line if *quantity* is None."""
        cart = self._cart_store.get(cart_id)
        if cart is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        cart.remove_item(product_id, quantity)
        self._cart_store.put(cart)
        return cart


class SetDeliveryMethodHandler:

    def __init__(self, cart_store: CartStore, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._cart_store = cart_store
        self._uow_factory = uow_factory

    def handle(self, cart_id: str, delivery_method_id: int) -> Cart:
        cart = self._cart_store.get(cart_id)
        if cart is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")

        with self._uow_factory() as uow:
            method = uow.repository(DeliveryMethod).get_by_id(delivery_method_id)
        if method is None:
            raise EntityNotFoundError(f"Delivery method #{delivery_method_id} not found")

        cart.choose_delivery_method(method.id, method.price)
        self._cart_store.put(cart)
        return cart
