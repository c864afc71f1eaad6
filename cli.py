"""
Catalog CLI.

Command-line access to the Notion catalog, the presupuesto cart and the
running API.
"""

import asyncio

import httpx
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from shared.config.settings import settings
from shared.utils.exceptions import CatalogError

from catalog_api.schemas import CatalogData
from catalog_api.services.cart.pricing import Cart, format_currency
from catalog_api.services.cart.storage import CartStorage, JsonFileStore
from catalog_api.services.catalog.cache import CatalogCache
from catalog_api.services.catalog.companies import CompanyResolver
from catalog_api.services.catalog.products import CatalogResolver
from catalog_api.services.catalog.service import CatalogService
from catalog_api.services.notion.client import NotionClient
from catalog_api.services.notion.http import RetryingHttpClient

app = typer.Typer(
    name="catalog",
    help="Notion catalog and presupuesto CLI",
    add_completion=False,
)
console = Console()


async def _load_catalog(company_slug: str) -> CatalogData:
    settings.require_notion_credentials()
    async with RetryingHttpClient() as http:
        notion = NotionClient(http, token=settings.notion_token)
        service = CatalogService(
            CompanyResolver(notion, settings.notion_companies_database_id),
            CatalogResolver(
                notion,
                products_database_id=settings.notion_database_id,
                companies_database_id=settings.notion_companies_database_id,
            ),
            CatalogCache(ttl=settings.catalog_cache_ttl_seconds),
        )
        return await service.get_catalog_data(company_slug)


def load_catalog(company_slug: str) -> CatalogData:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Loading catalog for {company_slug}...", total=None)
        try:
            return asyncio.run(_load_catalog(company_slug))
        except CatalogError as e:
            console.print(f"[red]✗ {e}[/red]")
            raise typer.Exit(1)


def parse_quantity_args(pairs: list[str]) -> dict[str, str]:
    """``["id=3", "other=12"]`` -> ``{"id": "3", "other": "12"}``."""
    quantities = {}
    for pair in pairs:
        product_id, sep, qty = pair.partition("=")
        if not sep or not product_id:
            raise typer.BadParameter(f"Expected PRODUCT_ID=QTY, got {pair!r}")
        quantities[product_id.strip()] = qty.strip()
    return quantities


# =============================================================================
# Catalog Commands
# =============================================================================

@app.command()
def catalog_show(
    company: str = typer.Option(None, help="Company slug (defaults to NOTION_CLIENT)"),
):
    """Show the products of a company's catalog."""
    catalog = load_catalog(company or settings.company_slug)

    title = catalog.company.name if catalog.company else "Catalog"
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Price", justify="right", style="green")
    table.add_column("x10", justify="right")
    table.add_column("x50", justify="right")
    table.add_column("x100", justify="right")

    for product in catalog.products:
        table.add_row(
            product.id,
            product.name,
            product.category,
            format_currency(product.price),
            format_currency(product.price_x10) if product.price_x10 else "-",
            format_currency(product.price_x50) if product.price_x50 else "-",
            format_currency(product.price_x100) if product.price_x100 else "-",
        )

    console.print(table)
    console.print(f"[green]✓ {len(catalog.products)} products[/green]")


# =============================================================================
# Cart Commands
# =============================================================================

@app.command()
def quote(
    quantities: list[str] = typer.Argument(None, help="PRODUCT_ID=QTY pairs"),
    company: str = typer.Option(None, help="Company slug (defaults to NOTION_CLIENT)"),
    submit_to: str = typer.Option(None, help="API base URL to submit the presupuesto to"),
    key: str = typer.Option(None, help="Company key, required with --submit-to"),
):
    """Update the saved cart and print its presupuesto."""
    catalog = load_catalog(company or settings.company_slug)
    storage = CartStorage(JsonFileStore(settings.cart_storage_path))
    cart = Cart(catalog.products, storage=storage)

    for product_id, qty in parse_quantity_args(quantities or []).items():
        if product_id not in cart:
            console.print(f"[yellow]Unknown product {product_id}, skipped[/yellow]")
            continue
        cart.set_quantity(product_id, qty)

    if not cart.active_rows:
        console.print("Sin productos añadidos.")
        raise typer.Exit(0)

    table = Table(title="Presupuesto")
    table.add_column("Product", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Unit", justify="right")
    table.add_column("Subtotal", justify="right", style="green")
    for row in cart.active_rows:
        table.add_row(row.name, str(row.qty), format_currency(row.unit_price), format_currency(row.subtotal))
    console.print(table)

    totals = cart.totals
    console.print(f"Subtotal:  {format_currency(totals.subtotal)}")
    console.print(f"Descuento: {format_currency(totals.discount)}")
    console.print(f"[bold]Total:     {format_currency(totals.total)}[/bold]")

    if submit_to:
        if not key:
            raise typer.BadParameter("--key is required with --submit-to")
        payload = cart.to_presupuesto(catalog.company)
        response = httpx.post(
            f"{submit_to.rstrip('/')}/api/pedido",
            json={"key": key, "presupuesto": payload.model_dump(by_alias=True)},
            timeout=settings.webhook_timeout_seconds,
        )
        body = response.json()
        if body.get("success"):
            console.print("[green]✓ Presupuesto enviado[/green]")
        else:
            console.print(f"[red]✗ {body.get('code')}: {body.get('message')}[/red]")
            raise typer.Exit(1)


@app.command()
def cart_clear():
    """Forget every saved cart quantity."""
    CartStorage(JsonFileStore(settings.cart_storage_path)).save({})
    console.print("[green]✓ Cart cleared[/green]")


# =============================================================================
# API Commands
# =============================================================================

@app.command()
def cache_warm(
    url: str = typer.Option("http://localhost:8000", help="API base URL"),
):
    """Load the catalog through a running API so its cache is filled."""
    try:
        response = httpx.get(f"{url.rstrip('/')}/api/catalog", timeout=settings.webhook_timeout_seconds)
    except httpx.HTTPError as e:
        console.print(f"[red]✗ Request failed: {e}[/red]")
        raise typer.Exit(1)

    body = response.json()
    if response.status_code != 200:
        console.print(f"[red]✗ {body.get('code')}: {body.get('message')}[/red]")
        raise typer.Exit(1)

    products = body.get("products") or []
    if not products:
        console.print("[yellow]Catalog is empty, nothing was cached[/yellow]")
        return
    console.print(f"[green]✓ Cached {len(products)} products[/green]")


@app.command()
def revalidate(
    url: str = typer.Option("http://localhost:8000", help="API base URL"),
    secret: str = typer.Option(None, help="Revalidation secret (defaults to REVALIDATE_SECRET)"),
):
    """Ask a running API to drop its catalog caches."""
    try:
        response = httpx.post(
            f"{url.rstrip('/')}/api/revalidate",
            params={"secret": secret or settings.revalidate_secret},
        )
    except httpx.HTTPError as e:
        console.print(f"[red]✗ Request failed: {e}[/red]")
        raise typer.Exit(1)

    if response.status_code != 200:
        console.print(f"[red]✗ Revalidation rejected ({response.status_code})[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Caches cleared[/green]")


if __name__ == "__main__":
    app()
