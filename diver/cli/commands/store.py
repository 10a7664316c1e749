"""
Store Commands.

Docker Store login and subscription queries.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from diver.cli.client import exit_with_error, get_store_client
from diver.core.config import get_settings
from diver.core.exceptions import DiverError
from diver.store.client import store_login, write_store_token
from diver.store.models import Subscription
from diver.ucp.render import print_table

app = typer.Typer(help="Docker Store commands", no_args_is_help=True)
console = Console()


@app.command()
def login(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Docker ID"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Docker Hub password"),
) -> None:
    """
    Authenticate against Docker Hub and store the token.

    User name and password fall back to DIVER_STORE_USERNAME / DIVER_STORE_PASSWORD.
    """
    settings = get_settings()
    username = username or settings.store_username or typer.prompt("Username")
    password = password or settings.store_password or typer.prompt("Password", hide_input=True)

    try:
        credentials = store_login(username, password)
        path = write_store_token(credentials)
    except DiverError as e:
        exit_with_error(e)
        return

    console.print(f"[green]Logged in as {credentials.user} ({credentials.docker_id})[/green]")
    console.print(f"[dim]Token written to {path}[/dim]")


@app.command()
def subscriptions(
    docker_id: Optional[str] = typer.Option(None, "--id", help="Docker ID to query (default: logged-in ID)"),
) -> None:
    """List all subscriptions of a Docker ID."""
    try:
        with get_store_client() as client:
            _display_subscriptions(client.get_subscriptions(docker_id))
    except DiverError as e:
        exit_with_error(e)


@app.command()
def active(
    docker_id: Optional[str] = typer.Option(None, "--id", help="Docker ID to query (default: logged-in ID)"),
) -> None:
    """Print the ID of the first active subscription."""
    try:
        with get_store_client() as client:
            subscription = client.get_first_active_subscription(docker_id)
    except DiverError as e:
        exit_with_error(e)
        return

    console.print(subscription.subscription_id, markup=False, highlight=False, soft_wrap=True)


def _display_subscriptions(subs: list[Subscription]) -> None:
    """Display subscriptions as a table."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Name", no_wrap=True, overflow="ignore")
    table.add_column("Subscription", no_wrap=True, overflow="ignore")
    table.add_column("State", no_wrap=True, overflow="ignore")
    table.add_column("Period End", no_wrap=True, overflow="ignore")

    for sub in subs:
        color = "green" if sub.is_active else "yellow"
        period_end = sub.current_period_end.date().isoformat() if sub.current_period_end else "-"
        table.add_row(Text(sub.name), Text(sub.subscription_id), Text(sub.state, style=color), Text(period_end))

    print_table(console, table)
