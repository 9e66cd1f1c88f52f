"""Entity <-> record mapping for the document store.

Each mapper names the collection its entity lives in and converts
between domain objects and JSON-compatible dicts.  Mappers may also
declare the relations a specification can include for their entity.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from marketplace.domain.model.order import DeliveryMethod, Order, OrderItem, OrderStatus
from marketplace.domain.model.product import Product, ProductBrand, ProductType
from marketplace.domain.model.value_objects import Address, Money, Quantity

if TYPE_CHECKING:
    from marketplace.domain.repository.unit_of_work import UnitOfWork

T = TypeVar("T")


class EntityMapper(Generic[T]):
    collection: str

    def to_record(self, entity: T) -> dict:
        raise NotImplementedError

    def to_entity(self, record: dict) -> T:
        raise NotImplementedError

    def relations(self, uow: UnitOfWork) -> Mapping[str, Callable[[T], T]]:
        return {}


# --- Money helpers ------------------------------------------------------------


def _money_to_raw(money: Money) -> dict:
    return {"amount": str(money.amount), "currency": money.currency}


def _money_from_raw(raw: dict) -> Money:
    return Money(Decimal(raw["amount"]), raw.get("currency", "USD"))


# --- Catalog ------------------------------------------------------------------


class BrandMapper(EntityMapper[ProductBrand]):
    collection = "brands"

    def to_record(self, entity: ProductBrand) -> dict:
        return {"id": entity.id, "name": entity.name}

    def to_entity(self, record: dict) -> ProductBrand:
        return ProductBrand(id=record["id"], name=record["name"])


class TypeMapper(EntityMapper[ProductType]):
    collection = "types"

    def to_record(self, entity: ProductType) -> dict:
        return {"id": entity.id, "name": entity.name}

    def to_entity(self, record: dict) -> ProductType:
        return ProductType(id=record["id"], name=record["name"])


class ProductMapper(EntityMapper[Product]):
    collection = "products"

    def to_record(self, entity: Product) -> dict:
        return {
            "id": entity.id,
            "name": entity.name,
            "description": entity.description,
            "price": _money_to_raw(entity.price),
            "stock": entity.stock,
            "brand_id": entity.brand_id,
            "type_id": entity.type_id,
            "picture_url": entity.picture_url,
            "version": entity.version,
        }

    def to_entity(self, record: dict) -> Product:
        return Product(
            id=record["id"],
            name=record["name"],
            description=record.get("description", ""),
            price=_money_from_raw(record["price"]),
            stock=record["stock"],
            brand_id=record["brand_id"],
            type_id=record["type_id"],
            picture_url=record.get("picture_url", ""),
            version=record.get("version", 0),
        )

    def relations(self, uow: UnitOfWork) -> Mapping[str, Callable[[Product], Product]]:
        brands = uow.repository(ProductBrand)
        types = uow.repository(ProductType)
        return {
            "brand": lambda p: replace(p, brand=brands.get_by_id(p.brand_id)),
            "type": lambda p: replace(p, type=types.get_by_id(p.type_id)),
        }


# --- Ordering -----------------------------------------------------------------


class DeliveryMethodMapper(EntityMapper[DeliveryMethod]):
    collection = "delivery_methods"

    def to_record(self, entity: DeliveryMethod) -> dict:
        return {
            "id": entity.id,
            "short_name": entity.short_name,
            "delivery_time": entity.delivery_time,
            "description": entity.description,
            "price": _money_to_raw(entity.price),
        }

    def to_entity(self, record: dict) -> DeliveryMethod:
        return DeliveryMethod(
            id=record["id"],
            short_name=record["short_name"],
            delivery_time=record["delivery_time"],
            description=record.get("description", ""),
            price=_money_from_raw(record["price"]),
        )


class OrderMapper(EntityMapper[Order]):
    collection = "orders"

    _delivery = DeliveryMethodMapper()

    def to_record(self, entity: Order) -> dict:
        address = entity.ship_to_address
        return {
            "id": entity.id,
            "buyer_email": entity.buyer_email,
            "order_date": entity.order_date.isoformat(),
            "ship_to_address": {
                "first_name": address.first_name,
                "last_name": address.last_name,
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
            },
            "delivery_method": self._delivery.to_record(entity.delivery_method),
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "picture_url": item.picture_url,
                    "price": _money_to_raw(item.price),
                    "quantity": item.quantity.value,
                }
                for item in entity.items
            ],
            "subtotal": _money_to_raw(entity.subtotal),
            "payment_intent_id": entity.payment_intent_id,
            "status": entity.status.value,
            "version": entity.version,
        }

    def to_entity(self, record: dict) -> Order:
        items = tuple(
            OrderItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                picture_url=i.get("picture_url", ""),
                price=_money_from_raw(i["price"]),
                quantity=Quantity(i["quantity"]),
            )
            for i in record["items"]
        )
        return Order(
            id=record["id"],
            buyer_email=record["buyer_email"],
            ship_to_address=Address(**record["ship_to_address"]),
            delivery_method=self._delivery.to_entity(record["delivery_method"]),
            items=items,
            subtotal=_money_from_raw(record["subtotal"]),
            payment_intent_id=record.get("payment_intent_id"),
            status=OrderStatus(record["status"]),
            order_date=datetime.fromisoformat(record["order_date"]),
            version=record.get("version", 0),
        )


MAPPERS: dict[type, EntityMapper[Any]] = {
    ProductBrand: BrandMapper(),
    ProductType: TypeMapper(),
    Product: ProductMapper(),
    DeliveryMethod: DeliveryMethodMapper(),
    Order: OrderMapper(),
}
