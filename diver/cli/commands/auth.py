"""
Access Control Commands.

Read-only views of accounts, teams, roles, collections and grants.
"""

import typer
from rich.console import Console

from diver.cli.client import exit_with_error, get_ucp_client
from diver.core.exceptions import DiverError
from diver.ucp.render import (
    render_accounts,
    render_collections,
    render_grants,
    render_roles,
    render_teams,
)

app = typer.Typer(help="Inspect accounts, teams and grants")
console = Console()


@app.command()
def accounts() -> None:
    """List user and organisation accounts."""
    try:
        with get_ucp_client() as client:
            render_accounts(console, client.get_accounts())
    except DiverError as e:
        exit_with_error(e)


@app.command()
def teams(
    org: str = typer.Argument(..., help="Organisation whose teams to list"),
) -> None:
    """List the teams of an organisation."""
    try:
        with get_ucp_client() as client:
            render_teams(console, client.get_teams(org))
    except DiverError as e:
        exit_with_error(e)


@app.command()
def roles() -> None:
    """List roles."""
    try:
        with get_ucp_client() as client:
            render_roles(console, client.get_roles())
    except DiverError as e:
        exit_with_error(e)


@app.command()
def collections() -> None:
    """List collections."""
    try:
        with get_ucp_client() as client:
            render_collections(console, client.get_collections())
    except DiverError as e:
        exit_with_error(e)


@app.command()
def grants(
    resolve: bool = typer.Option(False, "--resolve", help="Resolve subject, role and object IDs to names"),
) -> None:
    """
    List grants (subject has role on object).

    Examples:
        diver ucp auth grants
        diver ucp auth grants --resolve
    """
    try:
        with get_ucp_client() as client:
            render_grants(console, client.get_grants(resolve_names=resolve))
    except DiverError as e:
        exit_with_error(e)
