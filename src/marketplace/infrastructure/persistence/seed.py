"""Sample catalog and delivery methods for a fresh store."""

from __future__ import annotations

import structlog

from marketplace.domain.model.order import DeliveryMethod
from marketplace.domain.model.product import Product, ProductBrand, ProductType
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.unit_of_work import UnitOfWork
from marketplace.domain.specification import Specification

logger = structlog.get_logger(__name__)

BRANDS = [
    ProductBrand(id=1, name="Angular"),
    ProductBrand(id=2, name="NetCore"),
    ProductBrand(id=3, name="React"),
    ProductBrand(id=4, name="Typescript"),
]

TYPES = [
    ProductType(id=1, name="Boards"),
    ProductType(id=2, name="Hats"),
    ProductType(id=3, name="Boots"),
    ProductType(id=4, name="Gloves"),
]

# (name, description, price, stock, brand_id, type_id)
_PRODUCTS = [
    ("Angular Speedster Board 2000", "A fast board for fast riders.", "200.00", 25, 1, 1),
    ("Green Angular Board 3000", "Stiff enough for park laps.", "150.00", 30, 1, 1),
    ("Core Board Speed Rush 3", "All-mountain twin.", "180.00", 12, 2, 1),
    ("Net Core Super Board", "Soft flex, easy turns.", "300.00", 8, 2, 1),
    ("React Board Super Whizzy Fast", "Built for powder days.", "250.00", 15, 3, 1),
    ("Typescript Entry Board", "A forgiving first board.", "120.00", 40, 4, 1),
    ("Core Blue Hat", "Warm knit beanie.", "10.00", 100, 2, 2),
    ("Green React Woolen Hat", "Merino wool.", "8.00", 120, 3, 2),
    ("Purple React Woolen Hat", "Merino wool.", "15.00", 80, 3, 2),
    ("Blue Code Gloves", "Waterproof shell.", "18.00", 60, 2, 4),
    ("Green Code Gloves", "Waterproof shell.", "15.00", 60, 3, 4),
    ("Purple React Gloves", "Insulated liner.", "16.00", 45, 3, 4),
    ("Red Code Gloves", "Insulated liner.", "14.00", 50, 3, 4),
    ("Angular Purple Boots", "Stiff freeride boot.", "150.00", 20, 1, 3),
    ("Angular Blue Boots", "Medium flex boot.", "180.00", 18, 1, 3),
]

DELIVERY_METHODS = [
    DeliveryMethod(1, "UPS1", "1-2 Days", "Fastest delivery time", Money.of("10.00")),
    DeliveryMethod(2, "UPS2", "2-5 Days", "Get it within 5 days", Money.of("5.00")),
    DeliveryMethod(3, "UPS3", "5-10 Days", "Slower but cheap", Money.of("2.00")),
    DeliveryMethod(4, "FREE", "1-2 Weeks", "Free! You get what you pay for", Money.of("0.00")),
]


def seed_store(uow: UnitOfWork) -> int:
    """Add the sample data unless the catalog already has products.

    Returns the number of records written.
    """
    products = uow.repository(Product)
    if products.count_by_spec(Specification()) > 0:
        logger.info("Store already seeded")
        return 0

    for brand in BRANDS:
        uow.repository(ProductBrand).add(brand)
    for product_type in TYPES:
        uow.repository(ProductType).add(product_type)
    for method in DELIVERY_METHODS:
        uow.repository(DeliveryMethod).add(method)
    for i, (name, description, price, stock, brand_id, type_id) in enumerate(_PRODUCTS, 1):
        products.add(
            Product(
                id=i,
                name=name,
                description=description,
                price=Money.of(price),
                stock=stock,
                brand_id=brand_id,
                type_id=type_id,
                picture_url=f"images/products/{i}.png",
            )
        )

    written = uow.complete()
    logger.info("Store seeded", written=written)
    return written
