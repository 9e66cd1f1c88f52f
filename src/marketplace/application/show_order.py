"""Application services: order queries (read-only)."""

from __future__ import annotations

from collections.abc import Callable

from marketplace.application.dto import (
    DeliveryMethodDTO,
    OrderDTO,
    delivery_method_to_dto,
    order_to_dto,
)
from marketplace.application.specifications import order_for_buyer, orders_for_buyer
from marketplace.domain.exceptions import EntityNotFoundError
from marketplace.domain.model.order import DeliveryMethod, Order
from marketplace.domain.repository.unit_of_work import UnitOfWork
from marketplace.domain.specification import Specification


class ShowOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int, buyer_email: str) -> OrderDTO:
        """Return one of the buyer's orders; other buyers' orders read as missing."""
        with self._uow_factory() as uow:
            order = uow.repository(Order).first_by_spec(order_for_buyer(order_id, buyer_email))
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, buyer_email: str) -> list[OrderDTO]:
        """The buyer's orders, newest first."""
        with self._uow_factory() as uow:
            orders = uow.repository(Order).list_by_spec(orders_for_buyer(buyer_email))
        return [order_to_dto(o) for o in orders]


class ListDeliveryMethodsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[DeliveryMethodDTO]:
        with self._uow_factory() as uow:
            methods = uow.repository(DeliveryMethod).list_by_spec(
                Specification().ordered_by(lambda m: m.price.amount, descending=True)
            )
        return [delivery_method_to_dto(m) for m in methods]
