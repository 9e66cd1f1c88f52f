"""Application service: Create or Update Payment Intent use case.

Keeps one external payment intent per cart whose amount follows the
cart's current total.  The cart is saved only once the gateway call has
returned, so a failed or timed-out call never leaves the cart pointing at
an intent that does not exist.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.cart import Cart
from marketplace.domain.model.order import DeliveryMethod
from marketplace.domain.model.product import Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.cart_store import CartStore
from marketplace.domain.repository.unit_of_work import UnitOfWork
from marketplace.domain.service.payment_gateway import PaymentGateway

logger = structlog.get_logger(__name__)


class CreateOrUpdatePaymentIntentHandler:

    def __init__(
        self,
        cart_store: CartStore,
        uow_factory: Callable[[], UnitOfWork],
        gateway: PaymentGateway,
        currency: str = "usd",
    ) -> None:
        self._cart_store = cart_store
        self._uow_factory = uow_factory
        self._gateway = gateway
        self._currency = currency

    def handle(self, cart_id: str) -> Cart:
        cart = self._cart_store.get(cart_id)
        if cart is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        if cart.is_empty:
            raise ValidationError(f"Cart '{cart_id}' is empty")

        self._refresh_prices(cart)

        total = cart.subtotal + (cart.shipping_price or Money.zero(cart.subtotal.currency))
        if total.currency.lower() != self._currency.lower():
            raise ValidationError(
                f"Cart is priced in {total.currency}, payments are taken in "
                f"{self._currency.upper()}"
            )
        amount = total.to_minor_units()

        if cart.payment_intent_id is None:
            intent = self._gateway.create_intent(amount, self._currency)
        else:
            intent = self._gateway.update_intent(cart.payment_intent_id, amount)

        cart.attach_payment_intent(intent.id, intent.client_secret)
        self._cart_store.put(cart)

        logger.info(
            "Payment intent attached to cart",
            cart_id=cart_id,
            payment_intent_id=intent.id,
            amount=amount,
        )
        return cart

    def _refresh_prices(self, cart: Cart) -> None:
        """Reprice items and shipping from the catalog, as checkout will."""
        with self._uow_factory() as uow:
            products = uow.repository(Product)
            for item in cart.items:
                product = products.get_by_id(item.product_id)
                if product is None:
                    raise EntityNotFoundError(
                        f"Product '{item.product_name}' is no longer available"
                    )
                item.product_name = product.name
                item.price = product.price

            if cart.delivery_method_id is not None:
                method = uow.repository(DeliveryMethod).get_by_id(cart.delivery_method_id)
                if method is None:
                    raise EntityNotFoundError(
                        f"Delivery method #{cart.delivery_method_id} not found"
                    )
                cart.choose_delivery_method(method.id, method.price)
