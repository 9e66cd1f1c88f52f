"""Cart aggregate: a customer's in-progress selection.

Carts live only in the cache, keyed by an opaque session id.  Each item
carries a snapshot of the product as it looked when it was added, so the
cart can be displayed without hitting the catalog.  Checkout re-reads the
catalog and never trusts these snapshots for pricing an order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.value_objects import Money, Quantity


@dataclass
class CartItem:
    product_id: int
    product_name: str
    price: Money
    quantity: Quantity
    picture_url: str = ""
    brand: str = ""
    type: str = ""

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass
class Cart:
    """Aggregate root for a shopping cart.

    Item order is preserved for display; totals do not depend on it.
    """

    id: str
    items: list[CartItem] = field(default_factory=list)
    delivery_method_id: int | None = None
    payment_intent_id: str | None = None
    client_secret: str | None = None
    shipping_price: Money | None = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Cart id is required")

    # --- Item management ------------------------------------------------------

    def add_item(self, item: CartItem) -> None:
        """Add *item*, merging quantities if the product is already present.

        A merged line takes the newer snapshot (name, price, picture).
        """
        existing = self.find_item(item.product_id)
        if existing is None:
            self.items.append(item)
            return
        index = self.items.index(existing)
        self.items[index] = CartItem(
            product_id=item.product_id,
            product_name=item.product_name,
            price=item.price,
            quantity=existing.quantity + item.quantity,
            picture_url=item.picture_url,
            brand=item.brand,
            type=item.type,
        )

    def remove_item(self, product_id: int, quantity: int | None = None) -> None:
        """Remove *quantity* units of a product, or the whole line if None."""
        existing = self.find_item(product_id)
        if existing is None:
            raise ValidationError(f"Product ID '{product_id}' is not in the cart")
        if quantity is not None and quantity <= 0:
            raise ValidationError("Quantity must be positive")

        if quantity is None or quantity >= existing.quantity.value:
            self.items.remove(existing)
        else:
            existing.quantity = Quantity(existing.quantity.value - quantity)

    def find_item(self, product_id: int) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # --- Checkout state -------------------------------------------------------

    def choose_delivery_method(self, delivery_method_id: int, price: Money) -> None:
        self.delivery_method_id = delivery_method_id
        self.shipping_price = price

    def attach_payment_intent(self, intent_id: str, client_secret: str) -> None:
        if not intent_id or not client_secret:
            raise ValidationError("Payment intent id and client secret are required")
        self.payment_intent_id = intent_id
        self.client_secret = client_secret

    # --- Computed properties --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result
