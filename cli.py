#!/usr/bin/env python3
"""
diver CLI.

Operator-facing client for Docker UCP and the Docker Store.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    diver --help                                        # Show help

    # Control plane
    diver ucp login --url https://ucp.example.com      # Store a UCP token
    diver ucp service list                              # List services
    diver ucp service list --name web --node --resolve  # Tasks of one service
    diver ucp service architecture web                  # Current spec of a service
    diver ucp service architecture web --previous-spec  # Previous spec
    diver ucp auth grants --resolve                     # Grants with names

    # Docker Store
    diver store login                                   # Store a Docker Hub token
    diver store subscriptions                           # List subscriptions
    diver store active                                  # First active subscription

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import typer
from rich.console import Console

from diver import __version__
from diver.cli.client import exit_with_error
from diver.cli.commands import store_app, ucp_app
from diver.core.exceptions import DiverError
from diver.core.logging import setup_logging

app = typer.Typer(
    name="diver",
    help="diver - Docker UCP and Docker Store operator client.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console(stderr=True)

app.add_typer(ucp_app, name="ucp")
app.add_typer(store_app, name="store")


@app.command()
def version() -> None:
    """Show the diver version."""
    typer.echo(__version__)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    diver - Docker UCP and Docker Store operator client.

    Query services, tasks, grants and subscriptions.
    """
    try:
        if debug:
            setup_logging(level="DEBUG", format_type="console")
            console.print("[dim]Debug mode enabled[/dim]")
        elif verbose:
            setup_logging(level="INFO", format_type="console")
        else:
            setup_logging()
    except DiverError as e:
        exit_with_error(e)


if __name__ == "__main__":
    app()
