"""Integration tests for the CreateOrUpdatePaymentIntent use case."""

import pytest

from marketplace.application.payment_intent import CreateOrUpdatePaymentIntentHandler
from marketplace.domain.exceptions import (
    EntityNotFoundError,
    PaymentServiceError,
    ValidationError,
)
from marketplace.domain.model.cart import Cart, CartItem
from marketplace.domain.model.value_objects import Money, Quantity
from marketplace.infrastructure.cache.memory_cart_store import InMemoryCartStore
from marketplace.infrastructure.payments.fake_gateway import FakePaymentGateway
from marketplace.infrastructure.persistence.unit_of_work import DocumentUnitOfWork
from tests.fakes import seeded_store


def _setup(cart: Cart | None = None, currency: str = "usd"):
    store = seeded_store()
    carts = InMemoryCartStore()
    gateway = FakePaymentGateway()
    if cart is None:
        cart = Cart("basket-1")
        cart.add_item(CartItem(1, "Product A", Money.of("10.00"), Quantity(2)))
        cart.add_item(CartItem(2, "Product B", Money.of("5.00"), Quantity(1)))
        cart.choose_delivery_method(1, Money.of("3.00"))
    carts.put(cart)
    handler = CreateOrUpdatePaymentIntentHandler(
        carts, lambda: DocumentUnitOfWork(store), gateway, currency=currency
    )
    return handler, carts, gateway


class TestCreateIntent:

    def test_creates_intent_for_cart_total(self):
        handler, _, gateway = _setup()
        cart = handler.handle("basket-1")

        assert cart.payment_intent_id.startswith("pi_fake_")
        assert cart.client_secret
        assert gateway.calls == [
            {"method": "create_intent", "amount": 2800, "currency": "usd"}
        ]

    def test_intent_saved_on_cart(self):
        handler, carts, _ = _setup()
        cart = handler.handle("basket-1")
        stored = carts.get("basket-1")
        assert stored.payment_intent_id == cart.payment_intent_id
        assert stored.client_secret == cart.client_secret

    def test_without_delivery_method_charges_items_only(self):
        cart = Cart("basket-1")
        cart.add_item(CartItem(2, "Product B", Money.of("5.00"), Quantity(3)))
        handler, _, gateway = _setup(cart)
        handler.handle("basket-1")
        assert gateway.calls[0]["amount"] == 1500

    def test_prices_refreshed_from_catalog(self):
        cart = Cart("basket-1")
        cart.add_item(CartItem(1, "Old name", Money.of("1.00"), Quantity(1)))
        cart.choose_delivery_method(2, Money.of("9.99"))
        handler, carts, gateway = _setup(cart)

        handler.handle("basket-1")

        assert gateway.calls[0]["amount"] == 1000
        stored = carts.get("basket-1")
        assert stored.items[0].price == Money.of("10.00")
        assert stored.items[0].product_name == "Product A"
        assert stored.shipping_price == Money.of("0.00")


class TestUpdateIntent:

    def test_second_call_updates_same_intent(self):
        handler, carts, gateway = _setup()
        first = handler.handle("basket-1")

        cart = carts.get("basket-1")
        cart.add_item(CartItem(2, "Product B", Money.of("5.00"), Quantity(2)))
        carts.put(cart)
        second = handler.handle("basket-1")

        assert second.payment_intent_id == first.payment_intent_id
        assert [c["method"] for c in gateway.calls] == ["create_intent", "update_intent"]
        assert gateway.calls[1]["amount"] == 3800
        assert gateway.intents[first.payment_intent_id].amount == 3800

    def test_unknown_foreign_intent_rejected(self):
        cart = Cart("basket-1")
        cart.add_item(CartItem(1, "Product A", Money.of("10.00"), Quantity(1)))
        cart.attach_payment_intent("pi_elsewhere", "pi_elsewhere_secret")
        handler, _, _ = _setup(cart)
        with pytest.raises(PaymentServiceError, match="No such payment intent"):
            handler.handle("basket-1")


class TestPaymentIntentFailures:

    def test_missing_cart_rejected(self):
        handler, _, gateway = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("nope")
        assert gateway.calls == []

    def test_empty_cart_rejected(self):
        handler, _, gateway = _setup(Cart("basket-1"))
        with pytest.raises(ValidationError, match="empty"):
            handler.handle("basket-1")
        assert gateway.calls == []

    def test_gateway_failure_leaves_cart_unchanged(self):
        handler, carts, gateway = _setup()
        gateway.configure(should_succeed=False, failure_reason="Gateway timeout")

        with pytest.raises(PaymentServiceError, match="Gateway timeout"):
            handler.handle("basket-1")

        stored = carts.get("basket-1")
        assert stored.payment_intent_id is None
        assert stored.client_secret is None

    def test_product_gone_from_catalog_rejected(self):
        cart = Cart("basket-1")
        cart.add_item(CartItem(99, "Ghost", Money.of("1.00"), Quantity(1)))
        handler, _, gateway = _setup(cart)
        with pytest.raises(EntityNotFoundError, match="no longer available"):
            handler.handle("basket-1")
        assert gateway.calls == []

    def test_currency_mismatch_rejected(self):
        handler, carts, gateway = _setup(currency="eur")
        with pytest.raises(ValidationError, match="priced in USD"):
            handler.handle("basket-1")
        assert gateway.calls == []
        assert carts.get("basket-1").payment_intent_id is None
