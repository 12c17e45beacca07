"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from catalogdesk.di import create_container
from catalogdesk.domain.models import ALL, ActiveFilter, QueryState, SortField, SortOrder
from catalogdesk.domain.repositories import ICategoryRepository, IProductRepository
from catalogdesk.errors import CatalogError, NetworkError, ServerError
from catalogdesk.settings import SettingsManager
from catalogdesk.utils.logging import configure_logging

app = typer.Typer(help="Manage the product catalog from the command line")
products_app = typer.Typer(help="Browse and edit products")
app.add_typer(products_app, name="products")

_console = Console()


class _State:
    def __init__(self) -> None:
        self.settings_path: Optional[Path] = None
        self.base_url: Optional[str] = None
        self.token: Optional[str] = None
        self._container = None

    def reset(self, *, base_url, token, settings_path) -> None:
        self.base_url = base_url
        self.token = token
        self.settings_path = settings_path
        self._container = None

    @property
    def container(self):
        if self._container is None:
            settings = SettingsManager(self.settings_path)
            settings.load()
            if self.base_url:
                settings.set("api.base_url", self.base_url, persist=False)
            if self.token:
                settings.set("api.token", self.token, persist=False)
            self._container = create_container(settings)
        return self._container

    def products(self) -> IProductRepository:
        return self.container.resolve(IProductRepository)

    def categories(self) -> ICategoryRepository:
        return self.container.resolve(ICategoryRepository)


_state = _State()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except NetworkError as exc:
            typer.echo(f"Error: API unreachable: {exc}", err=True)
            raise typer.Exit(1) from exc
        except ServerError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except CatalogError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _coerce_id(raw: str) -> Any:
    """Numeric ids are sent as numbers, anything else verbatim."""
    return int(raw) if raw.isdigit() else raw


@app.callback()
def main(
    base_url: Optional[str] = typer.Option(None, envvar="CATALOGDESK_API_URL", help="API base URL"),
    token: Optional[str] = typer.Option(None, envvar="CATALOGDESK_API_TOKEN", help="Bearer token"),
    settings: Optional[Path] = typer.Option(None, help="Path to settings.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    configure_logging(verbose)
    _state.reset(base_url=base_url, token=token, settings_path=settings)


@products_app.command("list")
@_handle_errors
def list_products(
    search: str = typer.Option("", help="Free-text search"),
    status: ActiveFilter = typer.Option(ActiveFilter.ALL, help="all, active or inactive"),
    category: str = typer.Option("all", help="Category id or 'all'"),
    sort: SortField = typer.Option(SortField.NAME, help="Sort field"),
    order: SortOrder = typer.Option(SortOrder.ASC, help="ASC or DESC"),
) -> None:
    """List products matching the given filters."""

    query = QueryState(
        search_text=search,
        active_filter=status,
        category_filter=ALL if category == "all" else _coerce_id(category),
        sort_field=sort,
        sort_order=order,
    )
    products = _state.products().list(query)
    if not products:
        print("[yellow]No products found")
        return
    table = Table("ID", "Name", "Price", "Stock", "Category", "Active")
    for product in products:
        table.add_row(
            str(product.id),
            product.name,
            f"{product.price:.2f}",
            str(product.stock),
            "" if product.category_id is None else str(product.category_id),
            "yes" if product.is_active else "no",
        )
    _console.print(table)


@products_app.command("show")
@_handle_errors
def show_product(product_id: str) -> None:
    """Show a single product."""

    product = _state.products().get_one(_coerce_id(product_id))
    print(
        f"[bold]{product.name}[/bold] (#{product.id})\n"
        f"{product.description}\n"
        f"Price: {product.price:.2f}  Stock: {product.stock}  "
        f"Active: {'yes' if product.is_active else 'no'}\n"
        f"Image: {product.image_url or '-'}"
    )


@products_app.command("toggle")
@_handle_errors
def toggle_product(product_id: str) -> None:
    """Flip the active flag of a product."""

    repo = _state.products()
    product = repo.get_one(_coerce_id(product_id))
    updated = repo.update(product.id, {"isActive": not product.is_active})
    print(f"[green]{updated.name} is now {'active' if updated.is_active else 'inactive'}")


@products_app.command("delete")
@_handle_errors
def delete_product(
    product_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a product after confirmation."""

    if not yes and not typer.confirm(f"Delete product {product_id}?"):
        raise typer.Exit(0)
    _state.products().delete(_coerce_id(product_id))
    print(f"[green]Deleted product {product_id}")


@products_app.command("upload")
@_handle_errors
def upload_image(path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Upload a product image and print its URL."""

    ref = _state.products().upload_image(path.read_bytes())
    print(ref.url)


@app.command("categories")
@_handle_errors
def list_categories() -> None:
    """List active categories."""

    categories = _state.categories().list_active()
    if not categories:
        print("[yellow]No categories available")
        return
    for category in categories:
        print(f"{category.id}\t{category.label}")


if __name__ == "__main__":  # pragma: no cover
    app()
