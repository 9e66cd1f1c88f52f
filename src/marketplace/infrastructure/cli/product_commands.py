"""CLI commands for browsing the catalog."""

from __future__ import annotations

import click

from marketplace.application.browse_products import (
    BrowseProductsHandler,
    ListBrandsHandler,
    ListTypesHandler,
    ShowProductHandler,
)
from marketplace.application.dto import ProductQuery
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import unit_of_work


@click.command("list")
@click.option("--brand", "brand_id", type=int, default=None, help="Brand ID filter.")
@click.option("--type", "type_id", type=int, default=None, help="Type ID filter.")
@click.option("--search", default=None, help="Match product names containing this text.")
@click.option(
    "--sort",
    type=click.Choice(["name", "priceAsc", "priceDesc"]),
    default="name",
    help="Sort order.",
)
@click.option("--page", "page_index", type=int, default=1, help="1-based page number.")
@click.option("--page-size", type=int, default=6, help="Products per page (max 50).")
def product_list(
    brand_id: int | None,
    type_id: int | None,
    search: str | None,
    sort: str,
    page_index: int,
    page_size: int,
) -> None:
    """List catalog products, one page at a time."""
    handler = BrowseProductsHandler(unit_of_work)
    query = ProductQuery(
        brand_id=brand_id,
        type_id=type_id,
        search=search,
        sort=sort,
        page_index=page_index,
        page_size=page_size,
    )

    try:
        page = handler.handle(query)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not page.data:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<5} {'Name':<32} {'Brand':<12} {'Type':<8} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 78)
    for p in page.data:
        click.echo(
            f"{p.id:<5} {p.name:<32} {p.brand:<12} {p.type:<8} {p.price:>10} {p.stock:>6}"
        )
    click.echo(f"Page {page.page_index} ({len(page.data)} of {page.count} products)")


@click.command("show")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_show(product_id: int) -> None:
    """Show one product."""
    handler = ShowProductHandler(unit_of_work)

    try:
        p = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{p.id}  {p.name}")
    click.echo(f"  {p.description}")
    click.echo(f"  Brand: {p.brand}  Type: {p.type}")
    click.echo(f"  Price: {p.price}  In stock: {p.stock}")


@click.command("brands")
def product_brands() -> None:
    """List product brands."""
    for brand in ListBrandsHandler(unit_of_work).handle():
        click.echo(f"{brand.id:<5} {brand.name}")


@click.command("types")
def product_types() -> None:
    """List product types."""
    for product_type in ListTypesHandler(unit_of_work).handle():
        click.echo(f"{product_type.id:<5} {product_type.name}")
