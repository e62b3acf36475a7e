"""Check a search query for syntax errors."""

from __future__ import annotations

import click

from catalog_search.cli import Context, pass_context
from catalog_search.search.validation import validate_query
from catalog_search.utils.output import error, success

EXIT_VALID = 0
EXIT_INVALID = 1


@click.command("validate")
@click.argument("query", nargs=-1, required=True)
@pass_context
def cli(ctx: Context, query: tuple[str, ...]) -> None:
    """Validate the syntax of a search query.

    Reports unclosed quotes, unmatched parentheses and over-long queries.
    Exits with status 1 when the query is invalid.
    """
    max_length = ctx.config.max_query_length if ctx.config is not None else None
    result = validate_query(" ".join(query), max_length=max_length)

    if not result.valid:
        for message in result.errors:
            error(message)
        raise SystemExit(EXIT_INVALID)

    if not ctx.quiet:
        success("Query is valid")
