"""Account syncer: the Duo account root, its role permissions, and admin grants."""

from __future__ import annotations

import logging
from typing import Optional

from duo_sync.base_syncer import BaseSyncer, Page
from duo_sync.client import DuoClient
from duo_sync.graph import (
    RESOURCE_TYPE_ACCOUNT,
    RESOURCE_TYPE_ADMIN,
    Entitlement,
    Grant,
    Resource,
    ResourceId,
    new_grant,
    new_permission_entitlement,
)
from duo_sync.mappers import ROLES, account_resource, admin_resource, resolve_role

logger = logging.getLogger("duo_sync.syncer.account")


class AccountSyncer(BaseSyncer):
    RESOURCE_TYPE = RESOURCE_TYPE_ACCOUNT

    def __init__(self, client: DuoClient, integration_key: str) -> None:
        super().__init__(client)
        self.integration_key = integration_key

    def list(self, parent_id: Optional[ResourceId], token: str = "") -> Page[Resource]:
        account = self.client.get_account()
        return [account_resource(account, self.integration_key)], ""

    def entitlements(self, resource: Resource, token: str = "") -> Page[Entitlement]:
        rv = [
            new_permission_entitlement(
                resource,
                role,
                display_name=f"{resource.display_name} Account {role}",
                description=f"Role in {resource.display_name} Duo account",
                grantable_to=(RESOURCE_TYPE_ADMIN,),
            )
            for role in ROLES
        ]
        return rv, ""

    def grants(self, resource: Resource, token: str = "") -> Page[Grant]:
        cursor = self._cursor(token)
        admins, next_offset = self.client.get_admins(cursor.page_offset())

        rv: list[Grant] = []
        for admin in admins:
            role = resolve_role(admin.role)
            if role is None:
                logger.warning(
                    "Unknown Duo role name, skipping",
                    extra={
                        "resource_type": self.RESOURCE_TYPE.id,
                        "role_name": admin.role,
                        "admin_id": admin.admin_id,
                        "admin_name": admin.name,
                    },
                )
                continue
            principal = admin_resource(admin, resource.id)
            rv.append(new_grant(resource, role, principal.id))
        return rv, cursor.next_token(next_offset)
