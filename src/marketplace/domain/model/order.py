"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns immutable snapshots of what was
bought and how it ships.  After creation only its payment status changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.value_objects import Address, Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    PAYMENT_RECEIVED = "Payment Received"
    PAYMENT_FAILED = "Payment Failed"


@dataclass(frozen=True)
class DeliveryMethod:
    id: int
    short_name: str
    delivery_time: str
    description: str
    price: Money


@dataclass(frozen=True)
class OrderItem:
    """Captures the product as it was priced at checkout."""

    product_id: int
    product_name: str
    picture_url: str
    price: Money  # locked at order-creation time
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    buyer_email: str
    ship_to_address: Address
    delivery_method: DeliveryMethod
    items: tuple[OrderItem, ...]
    subtotal: Money
    payment_intent_id: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    order_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        buyer_email: str,
        ship_to_address: Address,
        delivery_method: DeliveryMethod,
        items: list[OrderItem],
        payment_intent_id: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not buyer_email or "@" not in buyer_email:
            raise ValidationError("A valid buyer email is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        subtotal = Money.zero(delivery_method.price.currency)
        for item in items:
            subtotal = subtotal + item.line_total

        return Order(
            id=None,
            buyer_email=buyer_email.strip(),
            ship_to_address=ship_to_address,
            delivery_method=delivery_method,
            items=tuple(items),
            subtotal=subtotal,
            payment_intent_id=payment_intent_id,
        )

    # --- State transitions ----------------------------------------------------

    def mark_payment_received(self) -> bool:
        """Record a successful payment.

        Returns False when the order already is PAYMENT_RECEIVED, so a
        redelivered notification changes nothing.  A PAYMENT_FAILED order
        may still move here: the buyer can retry the same intent with
        another card, and the gateway then reports success for it.
        """
        if self.status == OrderStatus.PAYMENT_RECEIVED:
            return False
        self.status = OrderStatus.PAYMENT_RECEIVED
        return True

    def mark_payment_failed(self) -> bool:
        """Record a failed payment attempt.

        A failure reported after the payment was received is stale and is
        ignored; so is a repeated failure.
        """
        if self.status in (OrderStatus.PAYMENT_FAILED, OrderStatus.PAYMENT_RECEIVED):
            return False
        self.status = OrderStatus.PAYMENT_FAILED
        return True

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return self.subtotal + self.delivery_method.price
