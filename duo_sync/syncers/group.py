"""Group syncer: groups, their member entitlement, and membership grants."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from duo_sync.api_models import User
from duo_sync.base_syncer import BaseSyncer, Page
from duo_sync.client import DuoClient
from duo_sync.graph import (
    MEMBER_ENTITLEMENT,
    RESOURCE_TYPE_GROUP,
    RESOURCE_TYPE_USER,
    Entitlement,
    Grant,
    Resource,
    ResourceId,
    new_assignment_entitlement,
    new_grant,
)
from duo_sync.mappers import group_resource, user_resource

logger = logging.getLogger("duo_sync.syncer.group")


class GroupSyncer(BaseSyncer):
    """Groups and their membership.

    With ``member_fetch_workers > 1`` the member re-fetch threads share the
    client's ``requests.Session``. Only plain GETs go through it and the
    urllib3 connection pool underneath is thread-safe, but requests makes no
    such promise for Session itself. Callers that mount adapters or change
    session state mid-sync should keep the default of one worker.
    """

    RESOURCE_TYPE = RESOURCE_TYPE_GROUP

    def __init__(self, client: DuoClient, member_fetch_workers: int = 1) -> None:
        super().__init__(client)
        self.member_fetch_workers = max(1, member_fetch_workers)

    def list(self, parent_id: Optional[ResourceId], token: str = "") -> Page[Resource]:
        if parent_id is None:
            return [], ""

        cursor = self._cursor(token)
        groups, next_offset = self.client.get_groups(cursor.page_offset())
        return (
            [group_resource(g, parent_id) for g in groups],
            cursor.next_token(next_offset),
        )

    def entitlements(self, resource: Resource, token: str = "") -> Page[Entitlement]:
        en = new_assignment_entitlement(
            resource,
            MEMBER_ENTITLEMENT,
            display_name=f"{resource.display_name} Group {MEMBER_ENTITLEMENT}",
            description=f"Member of {resource.display_name} Group in Duo",
            grantable_to=(RESOURCE_TYPE_USER,),
        )
        return [en], ""

    def grants(self, resource: Resource, token: str = "") -> Page[Grant]:
        cursor = self._cursor(token)
        stubs, next_offset = self.client.get_group_users(
            resource.id.resource, cursor.page_offset()
        )

        # Group listings return partial users; fetch each full record.
        members = self._fetch_members([s.user_id for s in stubs])

        rv: list[Grant] = []
        for user in members:
            principal = user_resource(user, resource.id)
            rv.append(new_grant(resource, MEMBER_ENTITLEMENT, principal.id))
        return rv, cursor.next_token(next_offset)

    def _fetch_members(self, user_ids: list[str]) -> list[User]:
        """Full user records in ``user_ids`` order."""
        if self.member_fetch_workers == 1 or len(user_ids) <= 1:
            return [self.client.get_user(uid) for uid in user_ids]

        workers = min(self.member_fetch_workers, len(user_ids))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission order
            return list(pool.map(self.client.get_user, user_ids))
