"""Directory graph types: resource types, resources, entitlements, grants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

TRAIT_USER = "user"
TRAIT_GROUP = "group"
TRAIT_ROLE = "role"

PURPOSE_PERMISSION = "permission"
PURPOSE_ASSIGNMENT = "assignment"

STATUS_ENABLED = "enabled"
STATUS_DISABLED = "disabled"
STATUS_UNSPECIFIED = "unspecified"

MEMBER_ENTITLEMENT = "member"


@dataclass(frozen=True)
class ResourceType:
    id: str
    display_name: str
    traits: tuple[str, ...] = ()


RESOURCE_TYPE_ACCOUNT = ResourceType("account", "Account")
RESOURCE_TYPE_USER = ResourceType("user", "User", (TRAIT_USER,))
RESOURCE_TYPE_GROUP = ResourceType("group", "Group", (TRAIT_GROUP,))
RESOURCE_TYPE_ADMIN = ResourceType("admin", "Admin", (TRAIT_USER,))
RESOURCE_TYPE_ROLE = ResourceType("role", "Role", (TRAIT_ROLE,))

RESOURCE_TYPES = (
    RESOURCE_TYPE_ACCOUNT,
    RESOURCE_TYPE_USER,
    RESOURCE_TYPE_GROUP,
    RESOURCE_TYPE_ADMIN,
    RESOURCE_TYPE_ROLE,
)


@dataclass(frozen=True)
class ResourceId:
    resource_type: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource_type}:{self.resource}"


@dataclass(frozen=True)
class Resource:
    id: ResourceId
    display_name: str
    parent_id: Optional[ResourceId] = None
    trait: Optional[str] = None
    profile: dict[str, Any] = field(default_factory=dict)
    email: Optional[str] = None
    status: Optional[str] = None
    child_resource_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class Entitlement:
    id: str
    resource: Resource
    slug: str
    purpose: str
    display_name: str = ""
    description: str = ""
    grantable_to: tuple[str, ...] = ()


@dataclass(frozen=True)
class Grant:
    id: str
    entitlement: Entitlement
    principal: ResourceId


def entitlement_id(resource: Resource, slug: str) -> str:
    return f"{resource.id.resource_type}:{resource.id.resource}:{slug}"


def new_permission_entitlement(
    resource: Resource,
    slug: str,
    display_name: str = "",
    description: str = "",
    grantable_to: tuple[ResourceType, ...] = (),
) -> Entitlement:
    return Entitlement(
        id=entitlement_id(resource, slug),
        resource=resource,
        slug=slug,
        purpose=PURPOSE_PERMISSION,
        display_name=display_name,
        description=description,
        grantable_to=tuple(rt.id for rt in grantable_to),
    )


def new_assignment_entitlement(
    resource: Resource,
    slug: str,
    display_name: str = "",
    description: str = "",
    grantable_to: tuple[ResourceType, ...] = (),
) -> Entitlement:
    return Entitlement(
        id=entitlement_id(resource, slug),
        resource=resource,
        slug=slug,
        purpose=PURPOSE_ASSIGNMENT,
        display_name=display_name,
        description=description,
        grantable_to=tuple(rt.id for rt in grantable_to),
    )


def new_grant(resource: Resource, slug: str, principal: ResourceId) -> Grant:
    """Grant ``principal`` the entitlement ``slug`` on ``resource``."""
    ent = Entitlement(
        id=entitlement_id(resource, slug),
        resource=resource,
        slug=slug,
        purpose="",
    )
    return Grant(
        id=f"{ent.id}:{principal.resource_type}:{principal.resource}",
        entitlement=ent,
        principal=principal,
    )
