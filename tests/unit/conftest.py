"""
Unit Test Fixtures.

Fixtures for unit tests. No test talks to a real control plane: HTTP goes
through httpx.MockTransport, which also records every request so tests
can count remote calls.
"""

import io
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from rich.console import Console

from diver.ucp.resolver import UCPClient
from diver.ucp.session import UCPSession

UCP_URL = "https://ucp.test"

Route = Callable[[httpx.Request], httpx.Response]


# =============================================================================
# Fake Control Plane
# =============================================================================


class FakeControlPlane:
    """
    Canned responses keyed by (method, path), plus a log of requests.

    Usage:
        def test_list(control_plane):
            control_plane.add("GET", "/services", json=[...])
            client = control_plane.client()
            client.get_all_services()
            assert control_plane.count("GET", "/services") == 1
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        content: bytes | None = None,
    ) -> None:
        if content is not None:
            self.routes[(method, path)] = lambda request: httpx.Response(status, content=content)
        else:
            self.routes[(method, path)] = lambda request: httpx.Response(status, json=json)

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"no route for {request.url.path}"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def session(self, token: str = "test-token") -> UCPSession:
        return UCPSession(
            UCP_URL,
            token,
            identity="admin",
            timeout=5.0,
            verify_tls=False,
            transport=self.transport,
        )

    def client(self) -> UCPClient:
        return UCPClient(self.session(), page_limit=50)


@pytest.fixture
def control_plane() -> FakeControlPlane:
    """Provide an empty fake control plane."""
    return FakeControlPlane()


# =============================================================================
# Payload Builders
# =============================================================================


def make_task(
    task_id: str,
    service_id: str = "svc1",
    node_id: str | None = "node1",
    slot: int | None = 1,
    state: str = "running",
    networks: list[tuple[str, str]] | None = None,
) -> dict[str, Any]:
    """Build a Task payload in wire format."""
    payload: dict[str, Any] = {
        "ID": task_id,
        "ServiceID": service_id,
        "Slot": slot,
        "DesiredState": "running",
        "Status": {"State": state, "Message": "started"},
        "NetworksAttachments": [
            {"Network": {"ID": f"net-{name}", "Spec": {"Name": name}}, "Addresses": [addr]}
            for name, addr in (networks or [])
        ],
    }
    if node_id is not None:
        payload["NodeID"] = node_id
    return payload


def make_node(node_id: str, hostname: str) -> dict[str, Any]:
    """Build a Node payload in wire format."""
    return {
        "ID": node_id,
        "Description": {"Hostname": hostname},
        "Status": {"State": "ready", "Addr": "10.0.0.1"},
        "Spec": {"Role": "worker", "Availability": "active"},
    }


def make_service(service_id: str = "svc1", name: str = "web", **spec: Any) -> dict[str, Any]:
    """Build a minimal Service payload in wire format."""
    return {
        "ID": service_id,
        "Version": {"Index": 12},
        "Spec": {
            "Name": name,
            "TaskTemplate": {"ContainerSpec": {"Image": "nginx:1.25"}},
            "Mode": {"Replicated": {"Replicas": 2}},
            **spec,
        },
    }


# =============================================================================
# Output Capture
# =============================================================================


@pytest.fixture
def capture_console() -> Callable[[], tuple[Console, io.StringIO]]:
    """
    Build a standard-width, colourless Console writing into a buffer.

    Usage:
        def test_render(capture_console):
            console, buffer = capture_console()
            render_services(console, services)
            assert "web" in buffer.getvalue()
    """
    def _build() -> tuple[Console, io.StringIO]:
        buffer = io.StringIO()
        console = Console(file=buffer, width=80, color_system=None, force_terminal=False)
        return console, buffer

    return _build


@pytest.fixture
def task_payload() -> Callable[..., dict[str, Any]]:
    """Provide the Task payload builder."""
    return make_task


@pytest.fixture
def node_payload() -> Callable[..., dict[str, Any]]:
    """Provide the Node payload builder."""
    return make_node


@pytest.fixture
def service_payload() -> Callable[..., dict[str, Any]]:
    """Provide the Service payload builder."""
    return make_service
