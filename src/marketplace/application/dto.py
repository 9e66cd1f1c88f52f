"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the presentation and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from marketplace.domain.model.order import DeliveryMethod, Order
from marketplace.domain.model.product import Product

T = TypeVar("T")


@dataclass(frozen=True)
class ProductQuery:
    """Input: catalog browsing parameters."""

    brand_id: int | None = None
    type_id: int | None = None
    search: str | None = None
    sort: str | None = None  # "name" (default), "priceAsc" or "priceDesc"
    page_index: int = 1
    page_size: int = 6


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    description: str
    price: str  # formatted, e.g. "$15.00"
    picture_url: str
    brand: str
    type: str
    stock: int


@dataclass(frozen=True)
class Pagination(Generic[T]):
    """Output: one page of results plus the total number of matches."""

    page_index: int
    page_size: int
    count: int
    data: list[T]


@dataclass(frozen=True)
class DeliveryMethodDTO:
    id: int
    short_name: str
    delivery_time: str
    description: str
    price: str


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: int
    product_name: str
    picture_url: str
    price: str
    quantity: int
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    buyer_email: str
    order_date: str
    ship_to_address: str
    delivery_method: str
    shipping_price: str
    items: list[OrderItemDTO]
    subtotal: str
    total: str
    status: str
    payment_intent_id: str | None


# --- Mapping ------------------------------------------------------------------


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        description=product.description,
        price=str(product.price),
        picture_url=product.picture_url,
        brand=product.brand.name if product.brand else "",
        type=product.type.name if product.type else "",
        stock=product.stock,
    )


def delivery_method_to_dto(method: DeliveryMethod) -> DeliveryMethodDTO:
    return DeliveryMethodDTO(
        id=method.id,
        short_name=method.short_name,
        delivery_time=method.delivery_time,
        description=method.description,
        price=str(method.price),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        buyer_email=order.buyer_email,
        order_date=order.order_date.strftime("%Y-%m-%d %H:%M UTC"),
        ship_to_address=str(order.ship_to_address),
        delivery_method=order.delivery_method.short_name,
        shipping_price=str(order.delivery_method.price),
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                picture_url=item.picture_url,
                price=str(item.price),
                quantity=item.quantity.value,
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        total=str(order.total),
        status=order.status.value,
        payment_intent_id=order.payment_intent_id,
    )
