"""Abstract base class for per-resource-type syncers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional, TypeVar

from duo_sync.client import DuoClient
from duo_sync.graph import Entitlement, Grant, Resource, ResourceId, ResourceType
from duo_sync.pagination import Cursor, parse_page_token

logger = logging.getLogger("duo_sync.syncer")

T = TypeVar("T")

Page = tuple[list[T], str]


class BaseSyncer(ABC):
    """Each syncer declares RESOURCE_TYPE and implements the three sync operations.

    Every operation takes the continuation token of the previous call ("" for the
    first) and returns ``(items, next_token)``; an empty ``next_token`` ends it.
    """

    RESOURCE_TYPE: ResourceType

    def __init__(self, client: DuoClient) -> None:
        self.client = client

    @abstractmethod
    def list(self, parent_id: Optional[ResourceId], token: str = "") -> Page[Resource]:
        """One page of resources of this type."""

    def entitlements(self, resource: Resource, token: str = "") -> Page[Entitlement]:
        return [], ""

    def grants(self, resource: Resource, token: str = "") -> Page[Grant]:
        return [], ""

    # ------------------------------------------------------------------
    # Pagination helpers
    # ------------------------------------------------------------------

    def _cursor(self, token: str, scope: Optional[ResourceType] = None) -> Cursor:
        """Parse ``token`` for this syncer's resource type (or ``scope``)."""
        return parse_page_token(token, (scope or self.RESOURCE_TYPE).id)

    def list_all(self, parent_id: Optional[ResourceId]) -> Iterator[Resource]:
        return _drain(lambda token: self.list(parent_id, token))

    def entitlements_all(self, resource: Resource) -> Iterator[Entitlement]:
        return _drain(lambda token: self.entitlements(resource, token))

    def grants_all(self, resource: Resource) -> Iterator[Grant]:
        return _drain(lambda token: self.grants(resource, token))


def _drain(fetch: Callable[[str], Page[T]]) -> Iterator[T]:
    """Follow continuation tokens until one comes back empty."""
    token = ""
    pages = 0
    while True:
        items, token = fetch(token)
        pages += 1
        yield from items
        if not token:
            break
    logger.debug("Drained %d pages", pages)
