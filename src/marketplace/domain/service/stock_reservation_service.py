"""Domain service: Stock Reservation.

Coordinates the cross-aggregate operation of taking product stock for an
order, or giving it back when a pending order is replaced.  Changes are
staged on the product repository; they only become durable when the
owning unit of work completes.

The two-phase approach (validate-then-mutate) ensures we never stage a
partial reservation if one product fails validation.
"""

from __future__ import annotations

from collections.abc import Iterable

from marketplace.domain.exceptions import EntityNotFoundError, InsufficientStockError
from marketplace.domain.model.order import Order, OrderItem
from marketplace.domain.model.product import Product
from marketplace.domain.repository.repository import Repository


class StockReservationService:

    def __init__(self, product_repo: Repository[Product]) -> None:
        self._product_repo = product_repo

    def reserve_for_items(self, items: Iterable[OrderItem]) -> None:
        """Remove stock for every line item.

        Uses a two-phase approach:
          Phase 1 (validate): ensure every product has enough stock
                    for the combined quantity ordered.
          Phase 2 (mutate): call ``remove_stock()`` on each Product
                    and stage the update.
        """
        # Phase 1: load all products and validate
        wanted: dict[int, int] = {}
        names: dict[int, str] = {}
        for line in items:
            wanted[line.product_id] = wanted.get(line.product_id, 0) + line.quantity.value
            names[line.product_id] = line.product_name

        products: list[tuple[Product, int]] = []
        for product_id, qty in wanted.items():
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product '{names[product_id]}' no longer exists")
            if qty > product.stock:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name} "
                    f"(need {qty}, have {product.stock})"
                )
            products.append((product, qty))

        # Phase 2: mutate and stage
        for product, qty in products:
            product.remove_stock(qty)
            self._product_repo.update(product)

    def release_for_order(self, order: Order) -> None:
        """Return an order's quantities to stock.

        Products that have since left the catalog have nothing to return to.
        """
        for line in order.items:
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                continue
            product.add_stock(line.quantity.value)
            self._product_repo.update(product)
