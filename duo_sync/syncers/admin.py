"""Admin syncer: Duo console administrators.

Admins are grant targets only. Their roles are exposed through the account's
permission entitlements and the role resource type.
"""

from __future__ import annotations

from typing import Optional

from duo_sync.base_syncer import BaseSyncer, Page
from duo_sync.graph import RESOURCE_TYPE_ADMIN, Resource, ResourceId
from duo_sync.mappers import admin_resource


class AdminSyncer(BaseSyncer):
    RESOURCE_TYPE = RESOURCE_TYPE_ADMIN

    def list(self, parent_id: Optional[ResourceId], token: str = "") -> Page[Resource]:
        cursor = self._cursor(token)
        admins, next_offset = self.client.get_admins(cursor.page_offset())
        return (
            [admin_resource(a, parent_id) for a in admins],
            cursor.next_token(next_offset),
        )
