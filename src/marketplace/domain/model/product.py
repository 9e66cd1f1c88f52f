"""Product aggregate and its catalog classifications.

Products live independently of carts and orders. They hold plain id
references to their brand and type; the ``brand`` / ``type`` fields are
navigation slots that are only filled when a query asks to include them.
"""

from __future__ import annotations

from dataclasses import dataclass

from marketplace.domain.exceptions import InsufficientStockError, ValidationError
from marketplace.domain.model.value_objects import Money


@dataclass(frozen=True)
class ProductBrand:
    id: int
    name: str


@dataclass(frozen=True)
class ProductType:
    id: int
    name: str


@dataclass
class Product:
    """A product in the catalog.

    Stock is shared, store-owned state: it is only mutated through
    ``remove_stock`` / ``add_stock`` inside a unit of work, and ``version``
    is the optimistic concurrency token the store checks on commit.
    """

    id: int | None
    name: str
    description: str
    price: Money
    stock: int
    brand_id: int
    type_id: int
    picture_url: str = ""
    version: int = 0
    brand: ProductBrand | None = None
    type: ProductType | None = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock for {self.name} cannot be negative")

    def remove_stock(self, quantity: int) -> None:
        """Take *quantity* units out of stock.

        Raises InsufficientStockError instead of letting stock go negative.
        """
        if quantity <= 0:
            raise ValidationError("Stock quantity must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.stock})"
            )
        self.stock -= quantity

    def add_stock(self, quantity: int) -> None:
        """Put *quantity* units back, e.g. when a pending order is replaced."""
        if quantity <= 0:
            raise ValidationError("Stock quantity must be positive")
        self.stock += quantity
