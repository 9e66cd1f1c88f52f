import click

from marketplace.infrastructure.bootstrap import settings, unit_of_work
from marketplace.infrastructure.cli.cart_commands import (
    cart_add,
    cart_delete,
    cart_delivery,
    cart_remove,
    cart_show,
)
from marketplace.infrastructure.cli.order_commands import (
    checkout_pay,
    checkout_place,
    delivery_methods,
    order_list,
    order_show,
)
from marketplace.infrastructure.cli.payment_commands import payment_notify, payment_simulate
from marketplace.infrastructure.cli.product_commands import (
    product_brands,
    product_list,
    product_show,
    product_types,
)
from marketplace.infrastructure.persistence.seed import seed_store
from marketplace.utils.logging import bind_context, clear_context, configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Marketplace: carts, checkout and payments"""
    configure_logging(settings().env)
    clear_context()
    bind_context(command=ctx.invoked_subcommand)


@cli.command("seed")
def seed() -> None:
    """Load the sample catalog into an empty store."""
    with unit_of_work() as uow:
        written = seed_store(uow)
    if written:
        click.echo(f"Seeded {written} records.")
    else:
        click.echo("Store already has products; nothing seeded.")


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def cart() -> None:
    """Manage shopping carts."""


@cli.group()
def checkout() -> None:
    """Pay for and place orders."""


@cli.group()
def order() -> None:
    """View placed orders."""


@cli.group()
def payment() -> None:
    """Receive payment gateway notifications."""


# Register subcommands
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_brands)
product.add_command(product_types)
cart.add_command(cart_show)
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_delivery)
cart.add_command(cart_delete)
checkout.add_command(delivery_methods)
checkout.add_command(checkout_pay)
checkout.add_command(checkout_place)
order.add_command(order_list)
order.add_command(order_show)
payment.add_command(payment_notify)
payment.add_command(payment_simulate)
