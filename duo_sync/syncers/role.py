"""Role syncer: the eight fixed Duo admin roles and which admins hold them."""

from __future__ import annotations

import logging
from typing import Optional

from duo_sync.base_syncer import BaseSyncer, Page
from duo_sync.graph import (
    MEMBER_ENTITLEMENT,
    RESOURCE_TYPE_ADMIN,
    RESOURCE_TYPE_ROLE,
    Entitlement,
    Grant,
    Resource,
    ResourceId,
    new_assignment_entitlement,
    new_grant,
)
from duo_sync.mappers import ROLES, admin_resource, resolve_role, role_resource

logger = logging.getLogger("duo_sync.syncer.role")

# Unknown labels are reported while paging this role only, once per admin.
_REPORTING_ROLE = ROLES[0]


class RoleSyncer(BaseSyncer):
    RESOURCE_TYPE = RESOURCE_TYPE_ROLE

    def list(self, parent_id: Optional[ResourceId], token: str = "") -> Page[Resource]:
        if parent_id is None:
            return [], ""
        return [role_resource(role, parent_id) for role in ROLES], ""

    def entitlements(self, resource: Resource, token: str = "") -> Page[Entitlement]:
        en = new_assignment_entitlement(
            resource,
            MEMBER_ENTITLEMENT,
            display_name=f"{resource.display_name} Role {MEMBER_ENTITLEMENT}",
            description=f"{resource.display_name} Duo role",
            grantable_to=(RESOURCE_TYPE_ADMIN,),
        )
        return [en], ""

    def grants(self, resource: Resource, token: str = "") -> Page[Grant]:
        cursor = self._cursor(token)
        admins, next_offset = self.client.get_admins(cursor.page_offset())
        reporting = resource.id.resource == _REPORTING_ROLE

        rv: list[Grant] = []
        for admin in admins:
            if reporting and resolve_role(admin.role) is None:
                logger.warning(
                    "Unknown Duo role name, skipping",
                    extra={
                        "resource_type": self.RESOURCE_TYPE.id,
                        "role_name": admin.role,
                        "admin_id": admin.admin_id,
                        "admin_name": admin.name,
                    },
                )
            if admin.role != resource.display_name:
                continue
            principal = admin_resource(admin, resource.id)
            rv.append(new_grant(resource, MEMBER_ENTITLEMENT, principal.id))
        logger.debug(
            "Matched %d admins to role %s",
            len(rv),
            resource.id.resource,
            extra={"resource_type": self.RESOURCE_TYPE.id, "records": len(rv)},
        )
        return rv, cursor.next_token(next_offset)
