"""
CLI Client Helpers.

Builds the clients the commands talk through and turns diver errors into
a red message and exit code 1 at the command boundary.
"""

import typer
from rich.console import Console
from rich.markup import escape

from diver.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    DiverError,
    NotFoundError,
    TransportError,
)
from diver.store.client import StoreClient, read_store_token
from diver.ucp.credentials import read_token
from diver.ucp.resolver import UCPClient

err_console = Console(stderr=True)

_ERROR_PREFIXES: list[tuple[type[DiverError], str]] = [
    (NotFoundError, "Not found"),
    (ApplicationError, "Server rejected request"),
    (AuthenticationError, "Authentication failed"),
    (TransportError, "Cannot reach server"),
    (DecodeError, "Unexpected response from server"),
    (ConfigurationError, "Invalid configuration"),
]


def get_ucp_client() -> UCPClient:
    """Client for the control plane the user last logged in to."""
    return UCPClient(read_token())


def get_store_client() -> StoreClient:
    return StoreClient(read_store_token())


def exit_with_error(error: DiverError) -> None:
    """Print error and exit with status 1."""
    prefix = "Error"
    for error_type, label in _ERROR_PREFIXES:
        if isinstance(error, error_type):
            prefix = label
            break
    err_console.print(f"[red]{prefix}: {escape(error.message)}[/red]")
    raise typer.Exit(1)
