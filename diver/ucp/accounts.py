"""
Access Control Models.

Accounts, teams, roles, collections and grants as returned by the UCP
authorization API (camelCase wire names, mapped through aliases).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

KUBERNETES_NAMESPACES_OBJECT = "kubernetesnamespaces"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Account(_WireModel):
    """A user or organisation account. The password field is never read."""

    id: str = Field(default="", alias="id")
    name: str = Field(default="", alias="name")
    full_name: str = Field(default="", alias="fullName")
    is_active: bool = Field(default=False, alias="isActive")
    is_admin: bool = Field(default=False, alias="isAdmin")
    is_org: bool = Field(default=False, alias="isOrg")


class AccountList(_WireModel):
    accounts: list[Account] = Field(default_factory=list)
    next_page_start: str | None = Field(default=None, alias="nextPageStart")


class Team(_WireModel):
    id: str = ""
    name: str = ""
    description: str = ""
    members_count: int = Field(default=0, alias="membersCount")
    org_id: str = Field(default="", alias="orgID")


class TeamList(_WireModel):
    teams: list[Team] = Field(default_factory=list)
    next_page_start: str | None = Field(default=None, alias="nextPageStart")
    resource_count: int | None = Field(default=None, alias="resourceCount")


class Role(_WireModel):
    id: str = ""
    name: str = ""
    system_role: bool = False


class Collection(_WireModel):
    id: str = ""
    name: str = ""
    path: str = ""


class Grant(_WireModel):
    """Subject has role on object."""

    object_id: str = Field(default="", alias="objectID")
    role_id: str = Field(default="", alias="roleID")
    subject_id: str = Field(default="", alias="subjectID")


class GrantList(_WireModel):
    grants: list[Grant] = Field(default_factory=list)


class GrantObjectKind(str, Enum):
    """The kind of object a grant targets. Exactly one applies per grant."""

    COLLECTION = "collection"
    NAMESPACE = "namespace"
    OBJECT = "grantobject"


def classify_grant(grant: Grant, collection_ids: set[str] | None = None) -> GrantObjectKind:
    """
    Work out which kind of object a grant targets.

    The all-namespaces object is a grant object. With a collection lookup at
    hand, anything that is not a collection is a namespace; without one the
    kind defaults to collection.
    """
    if grant.object_id == KUBERNETES_NAMESPACES_OBJECT:
        return GrantObjectKind.OBJECT
    if collection_ids is None or grant.object_id in collection_ids:
        return GrantObjectKind.COLLECTION
    return GrantObjectKind.NAMESPACE


class ResolvedGrantView(BaseModel):
    grant: Grant
    kind: GrantObjectKind = GrantObjectKind.COLLECTION
    subject_name: str | None = None
    role_name: str | None = None
    object_name: str | None = None

    @property
    def subject_label(self) -> str:
        return self.subject_name or self.grant.subject_id

    @property
    def role_label(self) -> str:
        return self.role_name or self.grant.role_id

    @property
    def object_label(self) -> str:
        return self.object_name or self.grant.object_id
