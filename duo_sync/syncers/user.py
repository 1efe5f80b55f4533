"""User syncer: Duo end-user directory accounts."""

from __future__ import annotations

from typing import Optional

from duo_sync.base_syncer import BaseSyncer, Page
from duo_sync.graph import RESOURCE_TYPE_USER, Resource, ResourceId
from duo_sync.mappers import user_resource


class UserSyncer(BaseSyncer):
    RESOURCE_TYPE = RESOURCE_TYPE_USER

    def list(self, parent_id: Optional[ResourceId], token: str = "") -> Page[Resource]:
        if parent_id is None:
            return [], ""

        cursor = self._cursor(token)
        users, next_offset = self.client.get_users(cursor.page_offset())
        return (
            [user_resource(u, parent_id) for u in users],
            cursor.next_token(next_offset),
        )
