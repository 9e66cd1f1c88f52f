"""Integration tests for the HandlePaymentNotification use case."""

import json

import pytest

from marketplace.application.create_order import CreateOrderHandler
from marketplace.application.payment_notification import (
    HandlePaymentNotificationHandler,
    PaymentNotification,
)
from marketplace.domain.exceptions import ConcurrencyConflictError, ValidationError
from marketplace.domain.model.cart import Cart, CartItem
from marketplace.domain.model.order import Order, OrderStatus
from marketplace.domain.model.value_objects import Money, Quantity
from marketplace.infrastructure.cache.memory_cart_store import InMemoryCartStore
from marketplace.infrastructure.payments.fake_gateway import FakePaymentGateway
from marketplace.infrastructure.persistence.unit_of_work import DocumentUnitOfWork
from tests.fakes import make_address, seeded_store

GATEWAY = FakePaymentGateway()


def _setup(intent: str = "pi_1"):
    """A store holding one pending order paid through *intent*."""
    store = seeded_store()
    carts = InMemoryCartStore()
    cart = Cart("basket-1")
    cart.add_item(CartItem(1, "Product A", Money.of("10.00"), Quantity(1)))
    cart.attach_payment_intent(intent, f"{intent}_secret")
    carts.put(cart)
    uow_factory = lambda: DocumentUnitOfWork(store)  # noqa: E731
    CreateOrderHandler(uow_factory, carts).handle("ada@example.com", 1, "basket-1", make_address())
    return HandlePaymentNotificationHandler(uow_factory), store


def _order(store) -> dict:
    [record] = store.load("orders")
    return record


class TestParsing:

    def test_from_json_string(self):
        notification = PaymentNotification.from_payload(GATEWAY.event_payload("pi_1"))
        assert notification.payment_intent_id == "pi_1"
        assert notification.outcome == OrderStatus.PAYMENT_RECEIVED

    def test_failure_outcome(self):
        payload = GATEWAY.event_payload("pi_1", succeeded=False)
        assert PaymentNotification.from_payload(payload).outcome == OrderStatus.PAYMENT_FAILED

    def test_unhandled_type_has_no_outcome(self):
        payload = {"type": "charge.refunded", "data": {"object": {"id": "ch_1"}}}
        assert PaymentNotification.from_payload(payload).outcome is None

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2]",
            {"type": "payment_intent.succeeded"},
            {"type": "payment_intent.succeeded", "data": {"object": {}}},
            {"type": "payment_intent.succeeded", "data": {"object": {"id": ""}}},
            {"data": {"object": {"id": "pi_1"}}},
        ],
    )
    def test_malformed_payload_rejected(self, payload):
        with pytest.raises(ValidationError):
            PaymentNotification.from_payload(payload)


class TestHandleNotification:

    def test_success_marks_payment_received(self):
        handler, store = _setup()
        handler.handle(GATEWAY.event_payload("pi_1"))
        record = _order(store)
        assert record["status"] == "Payment Received"
        assert record["version"] == 2

    def test_failure_marks_payment_failed(self):
        handler, store = _setup()
        handler.handle(GATEWAY.event_payload("pi_1", succeeded=False))
        assert _order(store)["status"] == "Payment Failed"

    def test_redelivery_changes_nothing(self):
        handler, store = _setup()
        payload = GATEWAY.event_payload("pi_1")
        handler.handle(payload)
        commits = store.commits

        handler.handle(payload)

        assert store.commits == commits
        assert _order(store)["version"] == 2

    def test_failure_after_success_ignored(self):
        handler, store = _setup()
        handler.handle(GATEWAY.event_payload("pi_1"))
        handler.handle(GATEWAY.event_payload("pi_1", succeeded=False))
        assert _order(store)["status"] == "Payment Received"

    def test_success_after_failure_accepted(self):
        handler, store = _setup()
        handler.handle(GATEWAY.event_payload("pi_1", succeeded=False))
        handler.handle(GATEWAY.event_payload("pi_1"))
        assert _order(store)["status"] == "Payment Received"

    def test_unknown_intent_dropped(self):
        handler, store = _setup()
        commits = store.commits
        handler.handle(GATEWAY.event_payload("pi_unknown"))
        assert store.commits == commits
        assert _order(store)["status"] == "Pending"

    def test_unhandled_event_type_ignored(self):
        handler, store = _setup()
        commits = store.commits
        handler.handle(json.dumps({"type": "charge.refunded", "data": {"object": {"id": "pi_1"}}}))
        assert store.commits == commits

    def test_malformed_payload_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError):
            handler.handle("{")


class TestConcurrentDelivery:

    def _race(self, monkeypatch, store, competitor_succeeds: bool) -> None:
        """Let another delivery commit its outcome just before ours does."""
        original = store.commit

        def racing_commit(changes):
            monkeypatch.setattr(store, "commit", original)
            uow = DocumentUnitOfWork(store)
            orders = uow.repository(Order)
            order = orders.get_by_id(1)
            if competitor_succeeds:
                order.mark_payment_received()
            else:
                order.mark_payment_failed()
            orders.update(order)
            uow.complete()
            return original(changes)

        monkeypatch.setattr(store, "commit", racing_commit)

    def test_duplicate_delivery_absorbed(self, monkeypatch):
        handler, store = _setup()
        self._race(monkeypatch, store, competitor_succeeds=True)

        handler.handle(GATEWAY.event_payload("pi_1"))

        record = _order(store)
        assert record["status"] == "Payment Received"
        assert record["version"] == 2

    def test_conflicting_outcome_raises(self, monkeypatch):
        handler, store = _setup()
        self._race(monkeypatch, store, competitor_succeeds=False)

        with pytest.raises(ConcurrencyConflictError):
            handler.handle(GATEWAY.event_payload("pi_1"))
        assert _order(store)["status"] == "Payment Failed"
