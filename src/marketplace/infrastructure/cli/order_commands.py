"""CLI commands for checkout and the Order aggregate."""

from __future__ import annotations

import click

from marketplace.application.create_order import CreateOrderHandler
from marketplace.application.dto import OrderDTO
from marketplace.application.payment_intent import CreateOrUpdatePaymentIntentHandler
from marketplace.application.show_order import (
    ListDeliveryMethodsHandler,
    ListOrdersHandler,
    ShowOrderHandler,
)
from marketplace.domain.exceptions import DomainException
from marketplace.domain.model.value_objects import Address
from marketplace.infrastructure.bootstrap import (
    cart_store,
    payment_gateway,
    settings,
    unit_of_work,
)
from marketplace.infrastructure.cli.cart_commands import display_cart


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Buyer:    {dto.buyer_email}")
    click.echo(f"Placed:   {dto.order_date}")
    click.echo(f"Ship to:  {dto.ship_to_address}")
    click.echo(f"Delivery: {dto.delivery_method}")
    click.echo()
    click.echo(f"  {'Product':<32} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*59}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<32} {item.quantity:>5} {item.price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*59}")
    click.echo(f"  {'Subtotal':<38} {dto.subtotal:>20}")
    click.echo(f"  {'Shipping':<38} {dto.shipping_price:>20}")
    click.echo(f"  {'Order Total':<38} {dto.total:>20}")


@click.command("delivery-methods")
def delivery_methods() -> None:
    """List available delivery methods."""
    for m in ListDeliveryMethodsHandler(unit_of_work).handle():
        click.echo(f"{m.id:<4} {m.short_name:<6} {m.delivery_time:<10} {m.price:>8}  {m.description}")


@click.command("pay")
@click.option("--cart", "cart_id", required=True, help="Cart (session) ID.")
def checkout_pay(cart_id: str) -> None:
    """Create or update the payment intent for a cart."""
    handler = CreateOrUpdatePaymentIntentHandler(
        cart_store=cart_store(),
        uow_factory=unit_of_work,
        gateway=payment_gateway(),
        currency=settings().currency,
    )

    try:
        cart = handler.handle(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(cart)
    click.echo(f"  Client secret: {cart.client_secret}")


@click.command("place")
@click.option("--cart", "cart_id", required=True, help="Cart (session) ID.")
@click.option("--email", required=True, help="Buyer email.")
@click.option("--delivery", "delivery_method_id", required=True, type=int, help="Delivery method ID.")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True)
def checkout_place(
    cart_id: str,
    email: str,
    delivery_method_id: int,
    first_name: str,
    last_name: str,
    street: str,
    city: str,
    state: str,
    zip_code: str,
) -> None:
    """Place an order for a cart's contents."""
    handler = CreateOrderHandler(uow_factory=unit_of_work, cart_store=cart_store())

    try:
        address = Address(first_name, last_name, street, city, state, zip_code)
        dto = handler.handle(
            buyer_email=email,
            delivery_method_id=delivery_method_id,
            cart_id=cart_id,
            ship_to_address=address,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("list")
@click.option("--email", required=True, help="Buyer email.")
def order_list(email: str) -> None:
    """List a buyer's orders, newest first."""
    orders = ListOrdersHandler(unit_of_work).handle(email)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Placed':<22} {'Status':<18} {'Total':>10}")
    click.echo("-" * 59)
    for o in orders:
        click.echo(f"{o.id:<6} {o.order_date:<22} {o.status:<18} {o.total:>10}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--email", required=True, help="Buyer email.")
def order_show(order_id: int, email: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work)

    try:
        dto = handler.handle(order_id, email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
