"""Show how a search query is parsed and translated."""

from __future__ import annotations

import json

import click

from catalog_search.cli import Context, pass_context
from catalog_search.search.parser import parse_query
from catalog_search.search.translator import KNOWN_FIELDS, translate
from catalog_search.utils.output import console, create_table, info, warning


@click.command("parse")
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
    "--predicate",
    "-p",
    "show_predicate",
    is_flag=True,
    default=False,
    help="Also print the translated predicate tree",
)
@pass_context
def cli(ctx: Context, query: tuple[str, ...], output_format: str, show_predicate: bool) -> None:
    """Parse a search query and print its terms.

    QUERY is a catalog search string. Multiple arguments are joined with
    spaces.

    \b
    Examples:
      catalog-search parse status:published
      catalog-search parse "price:100..200 AND category:electronics"
      catalog-search parse --format json 'title:"wireless headphones"'
    """
    query_string = " ".join(query)
    parsed = parse_query(query_string)

    if output_format == "json":
        payload = {
            "operator": parsed.operator.value,
            "terms": [
                {
                    "field": term.field,
                    "operator": term.operator.value,
                    "value": term.value,
                }
                for term in parsed.terms
            ],
        }
        if show_predicate:
            payload["predicate"] = repr(translate(parsed))
        click.echo(json.dumps(payload, indent=2))
        return

    info(f"Query: {query_string} ({len(parsed)} terms, {parsed.operator.value})")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Field", style="term.field")
    table.add_column("Operator", style="term.operator")
    table.add_column("Value", style="term.value")
    for i, term in enumerate(parsed.terms, start=1):
        table.add_row(str(i), term.field, term.operator.name, term.value)
    console.print(table)

    if not ctx.quiet:
        for term in parsed.terms:
            if term.field.lower() not in KNOWN_FIELDS:
                warning(f"Unknown field '{term.field}' will be ignored")

    if show_predicate:
        console.print(translate(parsed))
