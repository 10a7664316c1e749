"""
Swarm Models.

Pydantic models for the service, task and node payloads returned by the
control plane. Wire names (PascalCase) are mapped through aliases; fields
absent from a payload stay None or empty, never a synthesized default.
Services, tasks and nodes must carry an ID: a body without one is not
that object and fails validation.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _WireModel(BaseModel):
    """Base for models decoded from control plane JSON."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Service
# =============================================================================


class ResourceSpec(_WireModel):
    nano_cpus: int | None = Field(default=None, alias="NanoCPUs")
    memory_bytes: int | None = Field(default=None, alias="MemoryBytes")


class Resources(_WireModel):
    limits: ResourceSpec | None = Field(default=None, alias="Limits")
    reservations: ResourceSpec | None = Field(default=None, alias="Reservations")


class ContainerSpec(_WireModel):
    image: str = Field(default="", alias="Image")
    command: list[str] = Field(default_factory=list, alias="Command")
    args: list[str] = Field(default_factory=list, alias="Args")
    labels: dict[str, str] = Field(default_factory=dict, alias="Labels")

    @field_validator("command", "args", "labels", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: Any) -> Any:
        if value is None:
            return {} if info.field_name == "labels" else []
        return value


class Placement(_WireModel):
    constraints: list[str] = Field(default_factory=list, alias="Constraints")


class TaskTemplate(_WireModel):
    container_spec: ContainerSpec = Field(default_factory=ContainerSpec, alias="ContainerSpec")
    resources: Resources | None = Field(default=None, alias="Resources")
    placement: Placement | None = Field(default=None, alias="Placement")


class ReplicatedMode(_WireModel):
    replicas: int | None = Field(default=None, alias="Replicas")


class ServiceMode(_WireModel):
    """Scheduling mode. At most one of replicated / global is populated."""

    replicated: ReplicatedMode | None = Field(default=None, alias="Replicated")
    global_: dict[str, Any] | None = Field(default=None, alias="Global")

    @model_validator(mode="after")
    def _check_exclusive(self) -> "ServiceMode":
        if self.replicated is not None and self.global_ is not None:
            raise ValueError("service mode cannot be both replicated and global")
        return self

    @property
    def is_replicated(self) -> bool:
        return self.replicated is not None

    @property
    def is_global(self) -> bool:
        return self.global_ is not None


class ServiceSpec(_WireModel):
    name: str = Field(default="", alias="Name")
    labels: dict[str, str] = Field(default_factory=dict, alias="Labels")
    task_template: TaskTemplate = Field(default_factory=TaskTemplate, alias="TaskTemplate")
    mode: ServiceMode = Field(default_factory=ServiceMode, alias="Mode")

    @property
    def container(self) -> ContainerSpec:
        return self.task_template.container_spec

    @property
    def resources(self) -> Resources | None:
        return self.task_template.resources


class Version(_WireModel):
    index: int | None = Field(default=None, alias="Index")


class UpdateStatus(_WireModel):
    state: str | None = Field(default=None, alias="State")
    message: str | None = Field(default=None, alias="Message")


class SpecSelector(str, Enum):
    """Which spec snapshot of a service to look at."""

    CURRENT = "current"
    PREVIOUS = "previous"

    @classmethod
    def from_flag(cls, previous: bool) -> "SpecSelector":
        return cls.PREVIOUS if previous else cls.CURRENT


class Service(_WireModel):
    """A service with its current and previous spec snapshots."""

    id: str = Field(..., min_length=1, alias="ID")
    version: Version | None = Field(default=None, alias="Version")
    spec: ServiceSpec = Field(default_factory=ServiceSpec, alias="Spec")
    previous_spec: ServiceSpec | None = Field(default=None, alias="PreviousSpec")
    update_status: UpdateStatus | None = Field(default=None, alias="UpdateStatus")

    @property
    def version_index(self) -> int | None:
        return self.version.index if self.version else None

    def spec_for(self, selector: SpecSelector) -> ServiceSpec | None:
        """Return the snapshot picked by selector (previous may be absent)."""
        if selector is SpecSelector.PREVIOUS:
            return self.previous_spec
        return self.spec


# =============================================================================
# Tasks and nodes
# =============================================================================


class TaskStatus(_WireModel):
    state: str | None = Field(default=None, alias="State")
    message: str | None = Field(default=None, alias="Message")
    timestamp: str | None = Field(default=None, alias="Timestamp")


class NetworkSpec(_WireModel):
    name: str = Field(default="", alias="Name")


class Network(_WireModel):
    id: str = Field(default="", alias="ID")
    spec: NetworkSpec = Field(default_factory=NetworkSpec, alias="Spec")


class NetworkAttachment(_WireModel):
    network: Network = Field(default_factory=Network, alias="Network")
    addresses: list[str] = Field(default_factory=list, alias="Addresses")

    @property
    def label(self) -> str:
        name = self.network.spec.name or self.network.id
        if not self.addresses:
            return name
        return f"{name}={','.join(self.addresses)}"


class Task(_WireModel):
    id: str = Field(..., min_length=1, alias="ID")
    service_id: str = Field(default="", alias="ServiceID")
    node_id: str | None = Field(default=None, alias="NodeID")
    slot: int | None = Field(default=None, alias="Slot")
    desired_state: str | None = Field(default=None, alias="DesiredState")
    status: TaskStatus = Field(default_factory=TaskStatus, alias="Status")
    networks_attachments: list[NetworkAttachment] = Field(
        default_factory=list, alias="NetworksAttachments",
    )

    @field_validator("networks_attachments", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def state(self) -> str | None:
        return self.status.state


class NodeDescription(_WireModel):
    hostname: str = Field(default="", alias="Hostname")


class NodeStatus(_WireModel):
    state: str | None = Field(default=None, alias="State")
    addr: str | None = Field(default=None, alias="Addr")


class NodeSpec(_WireModel):
    role: str | None = Field(default=None, alias="Role")
    availability: str | None = Field(default=None, alias="Availability")


class Node(_WireModel):
    id: str = Field(..., min_length=1, alias="ID")
    description: NodeDescription = Field(default_factory=NodeDescription, alias="Description")
    status: NodeStatus = Field(default_factory=NodeStatus, alias="Status")
    spec: NodeSpec = Field(default_factory=NodeSpec, alias="Spec")

    @property
    def hostname(self) -> str:
        return self.description.hostname


# =============================================================================
# Queries and resolved views
# =============================================================================


class ServiceQuery(BaseModel):
    """Service name plus display flags, built once per invocation."""

    service_name: str = Field(..., min_length=1, description="Service to examine")
    show_id: bool = Field(default=False, description="Display task ID")
    show_networks: bool = Field(default=False, description="Display task network attachments")
    show_state: bool = Field(default=False, description="Display task state")
    show_node: bool = Field(default=False, description="Display node running the task")
    resolve_names: bool = Field(default=False, description="Resolve IDs to human readable names")

    model_config = ConfigDict(frozen=True)


class ResolvedTaskView(BaseModel):
    """A task plus the names resolved for it (when resolution was requested)."""

    task: Task
    service_name: str | None = None
    node_name: str | None = None
    node_unresolved: bool = False

    @property
    def service_label(self) -> str:
        return self.service_name or self.task.service_id

    @property
    def node_label(self) -> str:
        if self.node_name:
            return self.node_name
        node_id = self.task.node_id or ""
        if self.node_unresolved:
            return f"{node_id} (unresolved)"
        return node_id

    @property
    def name(self) -> str:
        """Task name as the engine shows it: <service>.<slot> or <service>.<node>."""
        suffix = self.task.slot if self.task.slot is not None else self.task.node_id
        if suffix is None:
            return self.service_label
        return f"{self.service_label}.{suffix}"
