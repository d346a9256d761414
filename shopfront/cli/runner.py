# shopfront/cli/runner.py

"""Headless CLI commands: same reducers as the TUI, printed output."""

import json
import logging
import sys
from decimal import Decimal

from rich.console import Console
from rich.table import Table

from shopfront.models.product import Product
from shopfront.services.health_checker import HealthChecker
from shopfront.services.shop_client import ShopClient
from shopfront.state.auth import (
    Authenticated,
    AuthError,
    CheckStatus,
    LoadProfile,
    Login,
    Logout,
)
from shopfront.state.catalog import (
    LoadCategories,
    LoadCategory,
    LoadProduct,
    LoadProducts,
    SearchProducts,
)

logger = logging.getLogger("shopfront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _product_to_dict(p: Product) -> dict[str, object]:
    """Serialise a product to a plain dict for JSON output."""
    return {
        "id": p.id,
        "title": p.title,
        "price": str(p.price),
        "category": p.category,
        "description": p.description,
        "images": list(p.images),
        "rating": round(p.average_rating, 2),
        "reviews": [
            {
                "rating": r.rating,
                "comment": r.comment,
                "reviewer": r.reviewer_name,
            }
            for r in p.reviews
        ],
    }


def _dump_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _format_price(price: Decimal) -> str:
    return f"${price:,.2f}"


def _print_table(products: list[Product], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Rating", justify="center")

    for p in products:
        table.add_row(
            str(p.id),
            p.title[:50],
            _format_price(p.price),
            p.category,
            f"{p.average_rating:.1f}" if p.reviews else "—",
        )

    Console().print(table)


def _emit_products(
    products: list[Product], output_format: str, title: str,
) -> None:
    if output_format == "table":
        _print_table(products, title)
    else:
        _dump_json([_product_to_dict(p) for p in products])


async def cli_products(
    client: ShopClient,
    category: str | None,
    query: str | None,
    output_format: str,
) -> int:
    """List products, optionally by category or search query."""
    if query:
        state = await client.catalog.dispatch(SearchProducts(query))
        products = list(state.search_results)
        title = f"Search: {query}"
    elif category:
        state = await client.catalog.dispatch(LoadCategory(category))
        products = list(state.category_products.get(category, ()))
        title = f"Category: {category}"
    else:
        state = await client.catalog.dispatch(LoadProducts())
        products = list(state.products)
        title = "Products"

    if state.error:
        _err.print(f"[red]Error: {state.error}[/red]")
        return 1
    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    _err.print(f"[green]✓ {len(products)} products[/green]")
    _emit_products(products, output_format, title)
    return 0


async def cli_product(
    client: ShopClient, product_id: int, output_format: str,
) -> int:
    """Show one product."""
    state = await client.catalog.dispatch(LoadProduct(product_id))
    if state.error or state.product is None:
        _err.print(f"[red]Error: {state.error or 'not found'}[/red]")
        return 1
    _emit_products([state.product], output_format, state.product.title)
    return 0


async def cli_categories(client: ShopClient, output_format: str) -> int:
    """List category slugs."""
    state = await client.catalog.dispatch(LoadCategories())
    if state.error:
        _err.print(f"[red]Error: {state.error}[/red]")
        return 1
    if output_format == "table":
        table = Table(title="Categories", title_style="bold cyan")
        table.add_column("Slug", style="magenta")
        for slug in state.categories:
            table.add_row(slug)
        Console().print(table)
    else:
        _dump_json(list(state.categories))
    return 0


async def cli_login(
    client: ShopClient, username: str, password: str,
) -> int:
    """Log in and persist the session."""
    state = await client.auth.dispatch(Login(username, password))
    if isinstance(state, AuthError):
        _err.print(f"[red]Login failed: {state.message}[/red]")
        return 1
    _err.print(f"[green]✓ Logged in as {username}[/green]")
    return 0


async def cli_logout(client: ShopClient) -> int:
    """Forget the persisted session."""
    await client.auth.dispatch(Logout())
    _err.print("[green]✓ Logged out[/green]")
    return 0


async def cli_status(client: ShopClient) -> int:
    """Report whether the persisted session is still accepted."""
    await client.auth.dispatch(CheckStatus())
    state = await client.auth.dispatch(LoadProfile())
    if isinstance(state, Authenticated):
        who = f" as {state.username}" if state.username else ""
        _err.print(f"[green]Authenticated{who}[/green]")
        return 0
    _err.print("[yellow]Not logged in[/yellow]")
    return 1


async def run_health_check(client: ShopClient) -> int:
    """Probe the remote API and print a one-row table."""
    _err.print("[bold]Running API health check...[/bold]")
    result = await HealthChecker(client.gateway).check()

    table = Table(
        title="API Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("API", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    if result.status == "ok":
        status = "[green]✅ OK[/green]"
    elif result.status == "slow":
        status = "[yellow]⚠️  SLOW[/yellow]"
    else:
        status = "[red]❌ DOWN[/red]"

    latency = (
        f"{result.latency_ms:.0f}ms"
        if result.latency_ms > 0
        else "—"
    )
    table.add_row(result.base_url, status, latency, result.message)
    Console().print(table)
    return 1 if result.status == "down" else 0
