"""
Resource Resolver.

Turns a user's intent ("show me service X") into an enriched view by
combining several control plane responses: service specs, task lists,
node identities and access-control objects. Name lookups are fetched at
most once per call regardless of how many rows they annotate, and a
failed lookup degrades to raw IDs instead of failing the whole query.

Usage:
    from diver.ucp.credentials import read_token
    from diver.ucp.resolver import UCPClient

    with UCPClient(read_token()) as client:
        views = client.query_service_containers(ServiceQuery(service_name="web"))
"""

import json
from typing import Any
from urllib.parse import quote

from diver.core.config import get_app_config
from diver.core.exceptions import DiverError
from diver.core.logging import get_logger
from diver.ucp.accounts import (
    Account,
    AccountList,
    Collection,
    Grant,
    GrantList,
    ResolvedGrantView,
    Role,
    Team,
    TeamList,
    classify_grant,
)
from diver.ucp.errors import decode_body, raise_for_response
from diver.ucp.models import Node, ResolvedTaskView, Service, ServiceQuery, Task
from diver.ucp.session import UCPSession

logger = get_logger(__name__)


class UCPClient:
    """Read-only queries against the control plane."""

    def __init__(self, session: UCPSession, page_limit: int | None = None, log: Any = None) -> None:
        self.session = session
        self.page_limit = page_limit if page_limit is not None else get_app_config().ucp.page_limit
        self.logger = log or logger

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "UCPClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get(self, path: str, model: Any, resource: str, params: dict[str, Any] | None = None) -> Any:
        """GET path, raise on any failure envelope, decode into model."""
        response = self.session.get(path, params=params)
        raise_for_response(response, resource=resource)
        return decode_body(response.content, model)

    # -------------------------------------------------------------------------
    # Services and tasks
    # -------------------------------------------------------------------------

    def get_all_services(self) -> list[Service]:
        """Fetch every service, in the order the server returns them."""
        self.logger.debug("Retrieving all services")
        return self._get("/services", list[Service], "services")

    def get_service(self, name: str) -> Service:
        """
        Fetch one service by name or ID.

        Raises:
            NotFoundError: If the control plane does not know the service
        """
        self.logger.debug("Retrieving service", service=name)
        return self._get(f"/services/{quote(name, safe='')}", Service, f"service '{name}'")

    def get_tasks(self, service_id: str) -> list[Task]:
        filters = json.dumps({"service": {service_id: True}})
        tasks = self._get("/tasks", list[Task], "tasks", params={"filters": filters})
        # Older control planes ignore the filter.
        return [task for task in tasks if task.service_id == service_id]

    def get_nodes(self) -> list[Node]:
        return self._get("/nodes", list[Node], "nodes")

    def _node_names(self) -> dict[str, str] | None:
        """Node ID → hostname, or None when the lookup failed."""
        try:
            nodes = self.get_nodes()
        except DiverError as e:
            self.logger.warning("Node lookup failed, showing raw node IDs", error=e.message)
            return None
        return {node.id: node.hostname for node in nodes if node.hostname}

    def query_service_containers(self, query: ServiceQuery) -> list[ResolvedTaskView]:
        """
        Resolve a service and return its tasks, annotated with names when asked.

        The node collection is fetched once per call (only with resolve_names),
        so the number of remote calls does not grow with the task count.
        """
        service = self.get_service(query.service_name)
        tasks = self.get_tasks(service.id)
        self.logger.debug("Found tasks", service=query.service_name, count=len(tasks))

        if not query.resolve_names:
            return [ResolvedTaskView(task=task) for task in tasks]

        node_names = self._node_names() if tasks else {}
        views = []
        for task in tasks:
            if node_names is None or not task.node_id:
                views.append(ResolvedTaskView(task=task, service_name=service.spec.name))
                continue
            node_name = node_names.get(task.node_id)
            views.append(ResolvedTaskView(
                task=task,
                service_name=service.spec.name,
                node_name=node_name,
                node_unresolved=node_name is None,
            ))
        return views

    # -------------------------------------------------------------------------
    # Access control
    # -------------------------------------------------------------------------

    def get_accounts(self) -> list[Account]:
        params = {"filter": "all", "limit": self.page_limit}
        return self._get("/accounts/", AccountList, "accounts", params=params).accounts

    def get_teams(self, org: str) -> list[Team]:
        path = f"/accounts/{quote(org, safe='')}/teams"
        params = {"limit": self.page_limit}
        return self._get(path, TeamList, f"organisation '{org}'", params=params).teams

    def get_roles(self) -> list[Role]:
        return self._get("/roles", list[Role], "roles")

    def get_collections(self) -> list[Collection]:
        params = {"limit": self.page_limit}
        return self._get("/collections", list[Collection], "collections", params=params)

    def _lookup(self, what: str, fetch: Any) -> Any:
        try:
            return fetch()
        except DiverError as e:
            self.logger.warning(f"{what} lookup failed, showing raw IDs", error=e.message)
            return None

    def get_grants(self, resolve_names: bool = False) -> list[ResolvedGrantView]:
        """
        List grants, optionally naming their subject, role and object.

        Each lookup collection is fetched at most once.
        """
        params = {"subjectType": "all", "expandUser": "false", "limit": self.page_limit}
        grants: list[Grant] = self._get("/collectionGrants", GrantList, "grants", params=params).grants

        if not resolve_names or not grants:
            return [ResolvedGrantView(grant=g, kind=classify_grant(g)) for g in grants]

        accounts = self._lookup("Account", self.get_accounts)
        roles = self._lookup("Role", self.get_roles)
        collections = self._lookup("Collection", self.get_collections)

        subject_names = {a.id: a.name for a in accounts} if accounts is not None else {}
        role_names = {r.id: r.name for r in roles} if roles is not None else {}
        collection_paths = (
            {c.id: c.path or c.name for c in collections} if collections is not None else None
        )
        collection_ids = set(collection_paths) if collection_paths is not None else None

        return [
            ResolvedGrantView(
                grant=g,
                kind=classify_grant(g, collection_ids),
                subject_name=subject_names.get(g.subject_id),
                role_name=role_names.get(g.role_id),
                object_name=(collection_paths or {}).get(g.object_id),
            )
            for g in grants
        ]
