"""
UCP Commands.

Login plus the service and access-control command groups.
"""

from typing import Optional

import typer
from rich.console import Console

from diver.cli.client import exit_with_error
from diver.cli.commands.auth import app as auth_app
from diver.cli.commands.service import app as service_app
from diver.core.config import get_settings
from diver.core.exceptions import DiverError
from diver.ucp.credentials import login as ucp_login
from diver.ucp.credentials import write_token

app = typer.Typer(help="Docker UCP commands", no_args_is_help=True)
console = Console()

app.add_typer(service_app, name="service")
app.add_typer(auth_app, name="auth")


@app.command()
def login(
    url: str = typer.Option(..., "--url", help="URL of the Docker UCP control plane"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="UCP user name"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="UCP password"),
    ignore_cert: bool = typer.Option(False, "--ignore-cert", help="Skip TLS certificate verification"),
) -> None:
    """
    Authenticate against UCP and store the token.

    User name and password fall back to DIVER_UCP_USERNAME / DIVER_UCP_PASSWORD.

    Examples:
        diver ucp login --url https://ucp.example.com -u admin
    """
    settings = get_settings()
    username = username or settings.ucp_username or typer.prompt("Username")
    password = password or settings.ucp_password or typer.prompt("Password", hide_input=True)

    try:
        credentials = ucp_login(url, username, password, verify_tls=False if ignore_cert else None)
        path = write_token(credentials)
    except DiverError as e:
        exit_with_error(e)
        return

    console.print(f"[green]Logged in as {credentials.user}[/green]")
    console.print(f"[dim]Token written to {path}[/dim]")
