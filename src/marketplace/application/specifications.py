"""Named query specifications used by the use cases."""

from __future__ import annotations

from marketplace.application.dto import ProductQuery
from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.order import Order
from marketplace.domain.model.product import Product
from marketplace.domain.specification import Page, Specification

MAX_PAGE_SIZE = 50

_PRODUCT_SORTS = {
    "name": (lambda p: p.name.lower(), False),
    "priceAsc": (lambda p: p.price.amount, False),
    "priceDesc": (lambda p: p.price.amount, True),
}


def product_filter(query: ProductQuery) -> Specification[Product]:
    """Brand/type/search criteria only; used for counting matches."""
    spec: Specification[Product] = Specification()
    if query.brand_id is not None:
        spec = spec.where(lambda p: p.brand_id == query.brand_id)
    if query.type_id is not None:
        spec = spec.where(lambda p: p.type_id == query.type_id)
    if query.search:
        needle = query.search.strip().lower()
        spec = spec.where(lambda p: needle in p.name.lower())
    return spec


def product_catalog(query: ProductQuery) -> Specification[Product]:
    """Filtered, sorted, paged products with brand and type loaded."""
    sort = query.sort or "name"
    if sort not in _PRODUCT_SORTS:
        raise ValidationError(
            f"Unknown sort '{sort}'; expected one of {', '.join(_PRODUCT_SORTS)}"
        )
    key, descending = _PRODUCT_SORTS[sort]
    page_size = min(query.page_size, MAX_PAGE_SIZE)
    page = Page.of(query.page_index, page_size)

    return (
        product_filter(query)
        .include("brand", "type")
        .ordered_by(key, descending=descending)
        .paged(page.offset, page.size)
    )


def product_with_details(product_id: int) -> Specification[Product]:
    return Specification(criteria=lambda p: p.id == product_id).include("brand", "type")


def order_with_payment_intent(payment_intent_id: str) -> Specification[Order]:
    return Specification(criteria=lambda o: o.payment_intent_id == payment_intent_id)


def orders_for_buyer(buyer_email: str) -> Specification[Order]:
    email = buyer_email.strip().lower()
    return Specification(
        criteria=lambda o: o.buyer_email.lower() == email,
    ).ordered_by(lambda o: o.order_date, descending=True)


def order_for_buyer(order_id: int, buyer_email: str) -> Specification[Order]:
    return orders_for_buyer(buyer_email).where(lambda o: o.id == order_id)
