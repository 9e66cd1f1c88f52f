"""Integration tests for the cart use cases."""

import pytest

from marketplace.application.get_cart import DeleteCartHandler, GetCartHandler
from marketplace.application.update_cart import (
    AddCartItemHandler,
    RemoveCartItemHandler,
    SetDeliveryMethodHandler,
)
from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.value_objects import Money, Quantity
from marketplace.infrastructure.cache.memory_cart_store import InMemoryCartStore
from marketplace.infrastructure.persistence.unit_of_work import DocumentUnitOfWork
from tests.fakes import FakeClock, seeded_store


def _setup():
    store = seeded_store()
    clock = FakeClock()
    carts = InMemoryCartStore(clock=clock)
    uow_factory = lambda: DocumentUnitOfWork(store)  # noqa: E731
    return carts, uow_factory, clock


class TestGetCart:

    def test_unknown_cart_is_empty_and_not_stored(self):
        carts, _, _ = _setup()
        cart = GetCartHandler(carts).handle("basket-1")
        assert cart.id == "basket-1"
        assert cart.is_empty
        assert carts.get("basket-1") is None

    def test_returns_stored_cart(self):
        carts, uow_factory, _ = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 2)
        cart = GetCartHandler(carts).handle("basket-1")
        assert cart.find_item(1).quantity == Quantity(2)

    def test_expired_cart_reads_as_empty(self):
        carts, uow_factory, clock = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 2)
        clock.advance(hours=49)
        assert GetCartHandler(carts).handle("basket-1").is_empty


class TestAddCartItem:

    def test_snapshots_product_details(self):
        carts, uow_factory, _ = _setup()
        cart = AddCartItemHandler(carts, uow_factory).handle("basket-1", 2, 1)
        item = cart.find_item(2)
        assert item.product_name == "Product B"
        assert item.price == Money.of("5.00")
        assert item.brand == "React"
        assert item.type == "Boards"
        assert item.picture_url == "images/2.png"

    def test_adding_twice_merges(self):
        carts, uow_factory, _ = _setup()
        handler = AddCartItemHandler(carts, uow_factory)
        handler.handle("basket-1", 1, 1)
        handler.handle("basket-1", 1, 2)
        assert carts.get("basket-1").find_item(1).quantity == Quantity(3)

    def test_unknown_product_rejected(self):
        carts, uow_factory, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="'99' not found"):
            AddCartItemHandler(carts, uow_factory).handle("basket-1", 99, 1)
        assert carts.get("basket-1") is None

    def test_zero_quantity_rejected(self):
        carts, uow_factory, _ = _setup()
        with pytest.raises(ValidationError):
            AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 0)

    def test_write_refreshes_expiry(self):
        carts, uow_factory, clock = _setup()
        handler = AddCartItemHandler(carts, uow_factory)
        handler.handle("basket-1", 1, 1)
        clock.advance(hours=40)
        handler.handle("basket-1", 2, 1)
        clock.advance(hours=40)
        assert len(carts.get("basket-1").items) == 2


class TestRemoveCartItem:

    def test_remove_units(self):
        carts, uow_factory, _ = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 3)
        cart = RemoveCartItemHandler(carts).handle("basket-1", 1, 1)
        assert cart.find_item(1).quantity == Quantity(2)
        assert carts.get("basket-1").find_item(1).quantity == Quantity(2)

    def test_remove_line(self):
        carts, uow_factory, _ = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 3)
        RemoveCartItemHandler(carts).handle("basket-1", 1)
        assert carts.get("basket-1").is_empty

    def test_missing_cart_rejected(self):
        carts, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            RemoveCartItemHandler(carts).handle("basket-1", 1)


class TestSetDeliveryMethod:

    def test_records_method_and_price(self):
        carts, uow_factory, _ = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 1)
        SetDeliveryMethodHandler(carts, uow_factory).handle("basket-1", 1)
        stored = carts.get("basket-1")
        assert stored.delivery_method_id == 1
        assert stored.shipping_price == Money.of("3.00")

    def test_unknown_method_rejected(self):
        carts, uow_factory, _ = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 1)
        with pytest.raises(EntityNotFoundError, match="#42"):
            SetDeliveryMethodHandler(carts, uow_factory).handle("basket-1", 42)

    def test_missing_cart_rejected(self):
        carts, uow_factory, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            SetDeliveryMethodHandler(carts, uow_factory).handle("basket-1", 1)


class TestDeleteCart:

    def test_delete_existing(self):
        carts, uow_factory, _ = _setup()
        AddCartItemHandler(carts, uow_factory).handle("basket-1", 1, 1)
        assert DeleteCartHandler(carts).handle("basket-1") is True
        assert carts.get("basket-1") is None

    def test_delete_missing(self):
        carts, _, _ = _setup()
        assert DeleteCartHandler(carts).handle("basket-1") is False
