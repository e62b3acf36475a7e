"""Search the product catalog."""

from __future__ import annotations

import json

import click
from sqlalchemy.exc import SQLAlchemyError

from catalog_search.catalog.models import Product
from catalog_search.catalog.session import get_session
from catalog_search.cli import Context, pass_context
from catalog_search.exceptions import CatalogSearchError
from catalog_search.search.parser import parse_query
from catalog_search.search.query import execute_search
from catalog_search.search.validation import validate_query
from catalog_search.utils.output import console, create_table, error, info

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1
EXIT_DATABASE_ERROR = 2
EXIT_NO_CONFIG = 3


def _product_to_dict(product: Product) -> dict[str, object]:
    return {
        "id": product.id,
        "title": product.title,
        "slug": product.slug,
        "status": product.status.value,
        "category": product.category.slug if product.category is not None else None,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def _print_table(products: list[Product], query_string: str) -> None:
    """Print results as a Rich table."""
    info(f"Search: {query_string} ({len(products)} results)")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("Title", no_wrap=True)
    table.add_column("Slug", style="term.value")
    table.add_column("Status")
    table.add_column("Category")
    table.add_column("Created", justify="right")

    for product in products:
        table.add_row(
            product.title,
            product.slug,
            product.status.value,
            product.category.slug if product.category is not None else "",
            product.created_at.date().isoformat() if product.created_at else "",
        )
    console.print(table)


@click.command("search")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Limit number of results (default: from config)",
)
@pass_context
def cli(ctx: Context, query: tuple[str, ...], output_format: str, limit: int | None) -> None:
    """Search products using GitHub-style query syntax.

    QUERY is a catalog search string. Multiple arguments are joined with
    spaces.

    \b
    Syntax examples:
      catalog-search search status:published
      catalog-search search 'title:"wireless headphones"'
      catalog-search search "category:electronics OR status:draft"
      catalog-search search created:20240101..20241231
      catalog-search search wireless headphones
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_NO_CONFIG)

    query_string = " ".join(query)

    validation = validate_query(query_string, max_length=config.max_query_length)
    if not validation.valid:
        for message in validation.errors:
            error(f"Invalid search query: {message}")
        raise SystemExit(EXIT_PARSE_ERROR)

    parsed = parse_query(query_string)
    if limit is None:
        limit = config.default_limit

    try:
        with get_session(config.database_url) as session:
            products = execute_search(session, parsed, limit=limit)

            if not products:
                info(f"No results for: {query_string}")
                return

            if output_format == "json":
                click.echo(json.dumps([_product_to_dict(p) for p in products], indent=2))
            else:
                _print_table(products, query_string)
    except (SQLAlchemyError, CatalogSearchError) as e:
        error(f"Catalog error: {e}", hint=f"Database: {config.database_url}")
        raise SystemExit(EXIT_DATABASE_ERROR)
