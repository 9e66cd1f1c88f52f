"""Application service: Create Order use case.

Turns a customer's cart into a placed order.  Products are re-read so
the order is priced from the current catalog, not from the cart's
snapshots, and their stock is taken in the same commit as the order
insert.  The cart itself is never modified here, so a failed checkout
can simply be retried.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from marketplace.application.dto import OrderDTO, order_to_dto
from marketplace.application.specifications import order_with_payment_intent
from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.order import DeliveryMethod, Order, OrderItem, OrderStatus
from marketplace.domain.model.product import Product
from marketplace.domain.model.value_objects import Address
from marketplace.domain.repository.cart_store import CartStore
from marketplace.domain.repository.unit_of_work import UnitOfWork
from marketplace.domain.service.stock_reservation_service import StockReservationService

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cart_store: CartStore,
    ) -> None:
        self._uow_factory = uow_factory
        self._cart_store = cart_store

    def handle(
        self,
        buyer_email: str,
        delivery_method_id: int,
        cart_id: str,
        ship_to_address: Address,
    ) -> OrderDTO:
        """Place an order for the contents of a cart.

        Steps:
        1. Load the cart (fail if missing or empty).
        2. Re-fetch every product and snapshot its *current* name/price.
        3. Load the delivery method.
        4. If an order already exists for the cart's payment intent, this
           is a checkout retry: give back its stock and replace it.
        5. Take stock for the new order and commit everything at once.
        """
        cart = self._cart_store.get(cart_id)
        if cart is None or cart.is_empty:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found or empty")

        with self._uow_factory() as uow:
            products = uow.repository(Product)
            orders = uow.repository(Order)

            items: list[OrderItem] = []
            for cart_item in cart.items:
                product = products.get_by_id(cart_item.product_id)
                if product is None:
                    raise EntityNotFoundError(
                        f"Product '{cart_item.product_name}' is no longer available"
                    )
                items.append(
                    OrderItem(
                        product_id=product.id,  # type: ignore[arg-type]
                        product_name=product.name,
                        picture_url=product.picture_url,
                        price=product.price,  # <-- price snapshot
                        quantity=cart_item.quantity,
                    )
                )

            delivery_method = uow.repository(DeliveryMethod).get_by_id(delivery_method_id)
            if delivery_method is None:
                raise EntityNotFoundError(f"Delivery method #{delivery_method_id} not found")

            order = Order.create(
                buyer_email=buyer_email,
                ship_to_address=ship_to_address,
                delivery_method=delivery_method,
                items=items,
                payment_intent_id=cart.payment_intent_id,
            )

            stock = StockReservationService(products)

            if cart.payment_intent_id is not None:
                existing = orders.first_by_spec(order_with_payment_intent(cart.payment_intent_id))
                if existing is not None:
                    if existing.status == OrderStatus.PAYMENT_RECEIVED:
                        raise ValidationError(
                            f"Order #{existing.id} for this payment has already been paid"
                        )
                    logger.info(
                        "Replacing order for repeated checkout",
                        order_id=existing.id,
                        payment_intent_id=cart.payment_intent_id,
                    )
                    stock.release_for_order(existing)
                    orders.remove(existing)

            stock.reserve_for_items(order.items)
            orders.add(order)
            uow.complete()

        logger.info(
            "Order created",
            order_id=order.id,
            cart_id=cart_id,
            total=str(order.total),
            payment_intent_id=order.payment_intent_id,
        )
        return order_to_dto(order)
