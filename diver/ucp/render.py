"""
Report Renderer.

Renders resolved control plane objects as aligned columnar text on a
rich Console. Values are wrapped in Text so that brackets in labels or
commands are never read as console markup. Like tabwriter, rows are
never wrapped or padded to the terminal width.

Usage:
    from rich.console import Console
    from diver.ucp.render import render_service_spec

    render_service_spec(Console(), service, SpecSelector.CURRENT)
"""

from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from diver.core.exceptions import NotFoundError
from diver.ucp.accounts import Account, Collection, ResolvedGrantView, Role, Team
from diver.ucp.models import (
    ResolvedTaskView,
    Service,
    ServiceQuery,
    ServiceSpec,
    SpecSelector,
)

PADDING = 3
REPORT_WIDTH = 10_000


def _grid(columns: int) -> Table:
    """Borderless, headerless table: the tabwriter look."""
    table = Table.grid(padding=(0, PADDING))
    for _ in range(columns):
        table.add_column(no_wrap=True, overflow="ignore")
    return table


def _listing(*headers: str) -> Table:
    table = Table(
        show_header=True,
        header_style="bold",
        box=None,
        pad_edge=False,
        padding=(0, PADDING),
        collapse_padding=True,
    )
    for header in headers:
        table.add_column(header, no_wrap=True, overflow="ignore")
    return table


def _row(table: Table, *cells: object) -> None:
    table.add_row(*(Text("" if cell is None else str(cell)) for cell in cells))


def print_table(console: Console, table: Table) -> None:
    """
    Print a table at its natural width.

    The table is laid out on a canvas wider than any report, then each line
    is printed with trailing padding stripped, so values are never folded or
    cropped to the terminal width and piped output stays greppable.
    """
    options = console.options.update_width(REPORT_WIDTH)
    for line in console.render_lines(table, options, pad=False):
        text = Text.assemble(*((segment.text, segment.style) for segment in line if not segment.control))
        text.rstrip()
        console.print(text, soft_wrap=True)


def mode_label(spec: ServiceSpec) -> str:
    if spec.mode.replicated is not None:
        replicas = spec.mode.replicated.replicas
        return "replicated" if replicas is None else f"replicated ({replicas})"
    if spec.mode.global_ is not None:
        return "global"
    return ""


# =============================================================================
# Services
# =============================================================================


def render_service_spec(console: Console, service: Service, selector: SpecSelector) -> None:
    """
    Print the design of a service from the selected spec snapshot.

    Resource lines appear only for values present in the payload; the
    replica count and the global marker are mutually exclusive.

    Raises:
        NotFoundError: If the previous snapshot is requested but absent
    """
    spec = service.spec_for(selector)
    if spec is None:
        name = service.spec.name or service.id
        raise NotFoundError(f"Service '{name}' has no {selector.value} specification")

    container = spec.container
    table = _grid(3)

    _row(table, "ID:", service.id, "")
    _row(table, "Version:", service.version_index, "")
    _row(table, "Name:", spec.name, "")
    _row(table, "Image:", container.image, "")
    _row(table, "Cmd:", " ".join(container.command), "")
    _row(table, "Args:", " ".join(container.args), "")

    _row(table, "Labels:", "", "")
    for key in sorted(container.labels):
        _row(table, "", key, container.labels[key])

    resources = spec.resources
    if resources is not None:
        if resources.reservations is not None:
            if resources.reservations.memory_bytes is not None:
                _row(table, "Memory Reservation:", resources.reservations.memory_bytes, "")
            if resources.reservations.nano_cpus is not None:
                _row(table, "CPU Reservation:", resources.reservations.nano_cpus, "")
        if resources.limits is not None:
            if resources.limits.memory_bytes is not None:
                _row(table, "Memory Limits:", resources.limits.memory_bytes, "")
            if resources.limits.nano_cpus is not None:
                _row(table, "CPU Limits:", resources.limits.nano_cpus, "")

    if spec.mode.replicated is not None:
        _row(table, "Replicas:", spec.mode.replicated.replicas, "")
    if spec.mode.global_ is not None:
        _row(table, "Global:", "true", "")

    print_table(console, table)


def render_services(console: Console, services: Iterable[Service]) -> None:
    table = _listing("ID", "Name", "Image", "Mode", "Update")
    for service in services:
        update = service.update_status.state if service.update_status else None
        _row(
            table,
            service.id,
            service.spec.name,
            service.spec.container.image,
            mode_label(service.spec),
            update,
        )
    print_table(console, table)


def render_tasks(console: Console, views: Sequence[ResolvedTaskView], query: ServiceQuery) -> None:
    """Print one row per task, with the columns the query asked for."""
    if not views:
        console.print(Text(f"No tasks found for service {query.service_name}"), soft_wrap=True)
        return

    headers = ["Task"]
    if query.show_id:
        headers.append("ID")
    if query.show_node:
        headers.append("Node")
    if query.show_state:
        headers.append("State")
    if query.show_networks:
        headers.append("Networks")

    table = _listing(*headers)
    for view in views:
        cells: list[object] = [view.name]
        if query.show_id:
            cells.append(view.task.id)
        if query.show_node:
            cells.append(view.node_label)
        if query.show_state:
            cells.append(view.task.state)
        if query.show_networks:
            cells.append(" ".join(a.label for a in view.task.networks_attachments))
        _row(table, *cells)
    print_table(console, table)


# =============================================================================
# Access control
# =============================================================================


def render_accounts(console: Console, accounts: Iterable[Account]) -> None:
    table = _listing("Name", "ID", "Full Name", "Type", "Admin", "Active")
    for account in accounts:
        _row(
            table,
            account.name,
            account.id,
            account.full_name,
            "org" if account.is_org else "user",
            account.is_admin,
            account.is_active,
        )
    print_table(console, table)


def render_teams(console: Console, teams: Iterable[Team]) -> None:
    table = _listing("Name", "ID", "Members", "Description")
    for team in teams:
        _row(table, team.name, team.id, team.members_count, team.description)
    print_table(console, table)


def render_roles(console: Console, roles: Iterable[Role]) -> None:
    table = _listing("Name", "ID", "System")
    for role in roles:
        _row(table, role.name, role.id, role.system_role)
    print_table(console, table)


def render_collections(console: Console, collections: Iterable[Collection]) -> None:
    table = _listing("Name", "ID", "Path")
    for collection in collections:
        _row(table, collection.name, collection.id, collection.path)
    print_table(console, table)


def render_grants(console: Console, views: Iterable[ResolvedGrantView]) -> None:
    table = _listing("Subject", "Role", "Object", "Kind")
    for view in views:
        _row(table, view.subject_label, view.role_label, view.object_label, view.kind.value)
    print_table(console, table)
