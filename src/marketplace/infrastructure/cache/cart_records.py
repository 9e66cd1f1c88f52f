"""Cart <-> JSON record conversion shared by the cart stores."""

from __future__ import annotations

from decimal import Decimal

from marketplace.domain.model.cart import Cart, CartItem
from marketplace.domain.model.value_objects import Money, Quantity


def cart_to_raw(cart: Cart) -> dict:
    return {
        "id": cart.id,
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product_name,
                "price": str(item.price.amount),
                "currency": item.price.currency,
                "quantity": item.quantity.value,
                "picture_url": item.picture_url,
                "brand": item.brand,
                "type": item.type,
            }
            for item in cart.items
        ],
        "delivery_method_id": cart.delivery_method_id,
        "payment_intent_id": cart.payment_intent_id,
        "client_secret": cart.client_secret,
        "shipping_price": (
            str(cart.shipping_price.amount) if cart.shipping_price is not None else None
        ),
        "shipping_currency": (
            cart.shipping_price.currency if cart.shipping_price is not None else None
        ),
    }


def cart_from_raw(raw: dict) -> Cart:
    items = [
        CartItem(
            product_id=i["product_id"],
            product_name=i["product_name"],
            price=Money(Decimal(i["price"]), i.get("currency", "USD")),
            quantity=Quantity(i["quantity"]),
            picture_url=i.get("picture_url", ""),
            brand=i.get("brand", ""),
            type=i.get("type", ""),
        )
        for i in raw["items"]
    ]
    shipping = raw.get("shipping_price")
    return Cart(
        id=raw["id"],
        items=items,
        delivery_method_id=raw.get("delivery_method_id"),
        payment_intent_id=raw.get("payment_intent_id"),
        client_secret=raw.get("client_secret"),
        shipping_price=(
            Money(Decimal(shipping), raw.get("shipping_currency") or "USD")
            if shipping is not None
            else None
        ),
    )
