"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from marketplace.application.get_cart import DeleteCartHandler, GetCartHandler
from marketplace.application.update_cart import (
    AddCartItemHandler,
    RemoveCartItemHandler,
    SetDeliveryMethodHandler,
)
from marketplace.domain.exceptions import DomainException
from marketplace.domain.model.cart import Cart
from marketplace.infrastructure.bootstrap import cart_store, unit_of_work

_cart_option = click.option("--cart", "cart_id", required=True, help="Cart (session) ID.")


def display_cart(cart: Cart) -> None:
    """Shared formatting for displaying a cart."""
    click.echo(f"Cart {cart.id}")
    if cart.is_empty:
        click.echo("  (empty)")
        return

    click.echo(f"  {'ID':<5} {'Product':<32} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*65}")
    for item in cart.items:
        click.echo(
            f"  {item.product_id:<5} {item.product_name:<32} {item.quantity.value:>5} "
            f"{str(item.price):>10} {str(item.line_total):>10}"
        )
    click.echo(f"  {'-'*65}")
    click.echo(f"  {'Subtotal':<44} {str(cart.subtotal):>20}")
    if cart.shipping_price is not None:
        click.echo(f"  {'Shipping':<44} {str(cart.shipping_price):>20}")
    if cart.payment_intent_id:
        click.echo(f"  Payment intent: {cart.payment_intent_id}")


@click.command("show")
@_cart_option
def cart_show(cart_id: str) -> None:
    """Show a cart's contents."""
    try:
        cart = GetCartHandler(cart_store()).handle(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(cart)


@click.command("add")
@_cart_option
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", default=1, type=int, help="Units to add.")
def cart_add(cart_id: str, product_id: int, quantity: int) -> None:
    """Add a product to a cart."""
    handler = AddCartItemHandler(cart_store(), unit_of_work)

    try:
        cart = handler.handle(cart_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(cart)


@click.command("remove")
@_cart_option
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", default=None, type=int, help="Units to remove (default: all).")
def cart_remove(cart_id: str, product_id: int, quantity: int | None) -> None:
    """Remove a product (or some units of it) from a cart."""
    handler = RemoveCartItemHandler(cart_store())

    try:
        cart = handler.handle(cart_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(cart)


@click.command("delivery")
@_cart_option
@click.option("--method", "method_id", required=True, type=int, help="Delivery method ID.")
def cart_delivery(cart_id: str, method_id: int) -> None:
    """Choose how a cart will be shipped."""
    handler = SetDeliveryMethodHandler(cart_store(), unit_of_work)

    try:
        cart = handler.handle(cart_id, method_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(cart)


@click.command("delete")
@_cart_option
def cart_delete(cart_id: str) -> None:
    """Throw a cart away."""
    if DeleteCartHandler(cart_store()).handle(cart_id):
        click.echo(f"Cart {cart_id} deleted.")
    else:
        click.echo(f"Cart {cart_id} not found.")
