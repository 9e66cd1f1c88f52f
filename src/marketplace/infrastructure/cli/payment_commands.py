"""CLI commands that play the webhook transport for payment notifications.

Signatures are verified here, before the payload reaches the core.
"""

from __future__ import annotations

import click

from marketplace.application.payment_notification import HandlePaymentNotificationHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import payment_gateway, unit_of_work


def _deliver(payload: str, signature: str) -> None:
    if not payment_gateway().verify_signature(payload, signature):
        raise click.ClickException("Invalid notification signature")

    try:
        HandlePaymentNotificationHandler(unit_of_work).handle(payload)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("notify")
@click.option("--payload", "payload_file", required=True, type=click.File("r"), help="Event JSON file.")
@click.option("--signature", required=True, help="Signature header sent with the event.")
def payment_notify(payload_file, signature: str) -> None:
    """Deliver a signed gateway notification."""
    _deliver(payload_file.read(), signature)
    click.echo("Notification processed.")


@click.command("simulate")
@click.option("--intent", "intent_id", required=True, help="Payment intent ID.")
@click.option("--failed", is_flag=True, default=False, help="Simulate a failed payment.")
def payment_simulate(intent_id: str, failed: bool) -> None:
    """Deliver a gateway-signed outcome for a payment intent."""
    gateway = payment_gateway()
    payload = gateway.event_payload(intent_id, succeeded=not failed)
    _deliver(payload, gateway.sign(payload))
    click.echo(f"Payment {'failure' if failed else 'success'} delivered for {intent_id}.")
