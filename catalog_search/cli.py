"""Command-line interface for catalog-search."""

from __future__ import annotations

import os
from pathlib import Path

import click

from catalog_search import __version__
from catalog_search.config import Config, load_config
from catalog_search.exceptions import CatalogSearchError
from catalog_search.utils.output import (
    configure_logging,
    error,
    set_color,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/catalog-search/config.toml)",
)
@click.option(
    "--database",
    "-d",
    "database_url",
    default=None,
    help="SQLAlchemy URL of the catalog database (overrides config)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="catalog-search")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    database_url: str | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """catalog-search: Filter a product catalog with GitHub-style queries.

    Queries combine field filters such as status:published, ranges such as
    price:100..200, comparisons such as created:>20240101, quoted values
    and free text, joined with AND or OR.

    Configuration is loaded from ~/.config/catalog-search/config.toml by
    default. Use --config to specify an alternative configuration file.

    Examples:

        # Show how a query is parsed
        catalog-search parse 'title:"wireless headphones"'

        # Search the catalog
        catalog-search search "category:electronics OR status:draft"
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    configure_logging(verbose=verbose, debug=debug, quiet=quiet)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None
    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
    except CatalogSearchError as e:
        error(str(e))
        ctx.exit(1)
        return

    app_ctx.config = loaded_config

    if database_url is not None:
        loaded_config.database_url = database_url

    if not disable_color and not loaded_config.colored_output:
        set_color(False)

    if not quiet:
        for warn in warnings:
            warning(warn)


def register_commands() -> None:
    """Register all commands from the commands package."""
    from catalog_search.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
