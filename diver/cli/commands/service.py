"""
Service Commands.

List services, examine the tasks of one service, or print the design
(current or previous spec) of a service.
"""

from typing import Optional

import typer
from rich.console import Console

from diver.cli.client import exit_with_error, get_ucp_client
from diver.core.exceptions import DiverError
from diver.core.logging import get_logger
from diver.ucp.models import ServiceQuery, SpecSelector
from diver.ucp.render import render_service_spec, render_services, render_tasks

app = typer.Typer(help="Interact with services")
console = Console()
logger = get_logger(__name__)


@app.command("list")
def list_services(
    name: Optional[str] = typer.Option(None, "--name", help="Examine a service by name"),
    show_id: bool = typer.Option(False, "--id", help="Display task ID"),
    networks: bool = typer.Option(False, "--networks", help="Display task Network connections"),
    state: bool = typer.Option(False, "--state", help="Display task state"),
    node: bool = typer.Option(False, "--node", help="Display Node running task"),
    resolve: bool = typer.Option(False, "--resolve", help="Resolve Task IDs to human readable names"),
) -> None:
    """
    List services, or the tasks of one service with --name.

    Examples:
        diver ucp service list
        diver ucp service list --name web --node --state --resolve
    """
    try:
        with get_ucp_client() as client:
            if not name:
                render_services(console, client.get_all_services())
                return

            logger.debug("Looking for service", service=name)
            query = ServiceQuery(
                service_name=name,
                show_id=show_id,
                show_networks=networks,
                show_state=state,
                show_node=node,
                resolve_names=resolve,
            )
            render_tasks(console, client.query_service_containers(query), query)
    except DiverError as e:
        exit_with_error(e)


@app.command()
def architecture(
    name: str = typer.Argument(..., help="Service to inspect"),
    previous_spec: bool = typer.Option(
        False, "--previous-spec", "--previousSpec", help="Display the previous Service specification",
    ),
) -> None:
    """
    Retrieve the "design" of a service.

    Examples:
        diver ucp service architecture web
        diver ucp service architecture web --previous-spec
    """
    logger.info("Inspecting service", service=name)
    try:
        with get_ucp_client() as client:
            service = client.get_service(name)
        render_service_spec(console, service, SpecSelector.from_flag(previous_spec))
    except DiverError as e:
        exit_with_error(e)
