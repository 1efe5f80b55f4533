"""Pure transforms from Duo records to directory graph resources."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from duo_sync.api_models import Account, Admin, Group, User
from duo_sync.graph import (
    RESOURCE_TYPE_ACCOUNT,
    RESOURCE_TYPE_ADMIN,
    RESOURCE_TYPE_GROUP,
    RESOURCE_TYPE_ROLE,
    RESOURCE_TYPE_USER,
    STATUS_DISABLED,
    STATUS_ENABLED,
    STATUS_UNSPECIFIED,
    TRAIT_GROUP,
    TRAIT_ROLE,
    TRAIT_USER,
    Resource,
    ResourceId,
)

# Duo console role label -> canonical role id. Labels match exactly.
ROLE_LABELS: Mapping[str, str] = MappingProxyType({
    "Owner": "owner",
    "Administrator": "administrator",
    "Application Manager": "application manager",
    "User Manager": "user manager",
    "Help Desk": "help desk",
    "Billing": "billing",
    "Phishing Manager": "phishing manager",
    "Read-only": "readonly",
})

ROLES: tuple[str, ...] = tuple(ROLE_LABELS.values())

_ROLE_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType(
    {role: label for label, role in ROLE_LABELS.items()}
)

_USER_STATUSES: Mapping[str, str] = MappingProxyType({
    "active": STATUS_ENABLED,
    "bypass": STATUS_ENABLED,
    "disabled": STATUS_DISABLED,
    "locked out": STATUS_DISABLED,
    "pending deletion": STATUS_DISABLED,
})


def resolve_role(label: str) -> Optional[str]:
    """Canonical role id for a Duo role label, or None when the label is unknown."""
    return ROLE_LABELS.get(label)


def role_display_name(role: str) -> str:
    """Human label for a canonical role id (``readonly`` -> ``Read-only``)."""
    return _ROLE_DISPLAY_NAMES.get(role, role.title())


def split_name(name: str) -> tuple[str, str]:
    """Split on the first whitespace run: first token, then the remainder."""
    parts = name.split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def account_resource(account: Account, integration_key: str) -> Resource:
    """Duo settings carry no stable id; the integration key stands in."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_ACCOUNT.id, integration_key),
        display_name=account.name,
        child_resource_types=(
            RESOURCE_TYPE_USER.id,
            RESOURCE_TYPE_GROUP.id,
            RESOURCE_TYPE_ADMIN.id,
            RESOURCE_TYPE_ROLE.id,
        ),
    )


def user_resource(user: User, parent_id: Optional[ResourceId] = None) -> Resource:
    first_name, last_name = split_name(user.realname)
    profile = {
        "first_name": first_name,
        "last_name": last_name,
        "login": user.email,
        "user_id": user.user_id,
        "username": user.username,
        "status": user.status,
    }
    return Resource(
        id=ResourceId(RESOURCE_TYPE_USER.id, user.user_id),
        display_name=user.realname or user.username,
        parent_id=parent_id,
        trait=TRAIT_USER,
        profile=profile,
        email=user.email or None,
        status=_USER_STATUSES.get(user.status.lower(), STATUS_UNSPECIFIED),
    )


def group_resource(group: Group, parent_id: Optional[ResourceId] = None) -> Resource:
    profile = {
        "group_id": group.group_id,
        "group_name": group.name,
        "description": group.desc,
        "status": group.status,
    }
    return Resource(
        id=ResourceId(RESOURCE_TYPE_GROUP.id, group.group_id),
        display_name=group.name,
        parent_id=parent_id,
        trait=TRAIT_GROUP,
        profile=profile,
    )


def admin_resource(admin: Admin, parent_id: Optional[ResourceId] = None) -> Resource:
    first_name, last_name = split_name(admin.name)
    profile = {
        "first_name": first_name,
        "last_name": last_name,
        "login": admin.email,
        "user_id": admin.admin_id,
        "role": admin.role,
    }
    return Resource(
        id=ResourceId(RESOURCE_TYPE_ADMIN.id, admin.admin_id),
        display_name=admin.name,
        parent_id=parent_id,
        trait=TRAIT_USER,
        profile=profile,
        email=admin.email or None,
    )


def role_resource(role: str, parent_id: Optional[ResourceId] = None) -> Resource:
    display_name = role_display_name(role)
    return Resource(
        id=ResourceId(RESOURCE_TYPE_ROLE.id, role),
        display_name=display_name,
        parent_id=parent_id,
        trait=TRAIT_ROLE,
        profile={"role_name": display_name, "role_id": role},
    )
