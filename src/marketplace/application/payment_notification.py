"""Application service: Handle Payment Notification use case.

Reacts to the gateway's asynchronous payment outcomes.  The transport
that receives the notification verifies its signature before calling in.
Handling is idempotent: a redelivered notification finds the order
already in the target status and changes nothing.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from marketplace.application.specifications import order_with_payment_intent
from marketplace.domain.exceptions import ConcurrencyConflictError, ValidationError
from marketplace.domain.model.order import Order, OrderStatus
from marketplace.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

_OUTCOMES = {
    PAYMENT_SUCCEEDED: OrderStatus.PAYMENT_RECEIVED,
    PAYMENT_FAILED: OrderStatus.PAYMENT_FAILED,
}


@dataclass(frozen=True)
class PaymentNotification:
    event_type: str
    payment_intent_id: str

    @property
    def outcome(self) -> OrderStatus | None:
        """Status the order should move to, or None for events we ignore."""
        return _OUTCOMES.get(self.event_type)

    @staticmethod
    def from_payload(payload: str | Mapping[str, Any]) -> PaymentNotification:
        """Parse a gateway event: ``{"type": ..., "data": {"object": {"id": ...}}}``."""
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except ValueError as exc:
                raise ValidationError(f"Notification is not valid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise ValidationError("Notification payload must be an object")

        event_type = payload.get("type")
        try:
            intent_id = payload["data"]["object"]["id"]
        except (KeyError, TypeError) as exc:
            raise ValidationError("Notification carries no payment intent id") from exc

        if not isinstance(event_type, str) or not event_type:
            raise ValidationError("Notification carries no event type")
        if not isinstance(intent_id, str) or not intent_id:
            raise ValidationError("Notification carries no payment intent id")
        return PaymentNotification(event_type=event_type, payment_intent_id=intent_id)


class HandlePaymentNotificationHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, payload: str | Mapping[str, Any]) -> None:
        notification = PaymentNotification.from_payload(payload)
        log = logger.bind(
            event_type=notification.event_type,
            payment_intent_id=notification.payment_intent_id,
        )

        target = notification.outcome
        if target is None:
            log.info("Ignoring payment notification of unhandled type")
            return

        try:
            self._apply(notification, target, log)
        except ConcurrencyConflictError:
            # Another delivery of the same event may have won the race.
            if self._current_status(notification) != target:
                raise
            log.info("Concurrent duplicate notification absorbed")

    def _apply(self, notification: PaymentNotification, target: OrderStatus, log: Any) -> None:
        with self._uow_factory() as uow:
            orders = uow.repository(Order)
            order = orders.first_by_spec(order_with_payment_intent(notification.payment_intent_id))
            if order is None:
                log.warning("No order for payment intent; notification dropped")
                return

            if target == OrderStatus.PAYMENT_RECEIVED:
                changed = order.mark_payment_received()
            else:
                changed = order.mark_payment_failed()

            if not changed:
                log.info("Order status unchanged", order_id=order.id, status=order.status.value)
                return

            orders.update(order)
            uow.complete()
            log.info("Order payment status updated", order_id=order.id, status=order.status.value)

    def _current_status(self, notification: PaymentNotification) -> OrderStatus | None:
        with self._uow_factory() as uow:
            order = uow.repository(Order).first_by_spec(
                order_with_payment_intent(notification.payment_intent_id)
            )
            return order.status if order is not None else None
