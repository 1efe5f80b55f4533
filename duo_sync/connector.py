"""Duo connector: wires the syncers together and drives a full graph sync."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Optional

import requests

from duo_sync.base_syncer import BaseSyncer
from duo_sync.client import DuoClient
from duo_sync.config import DuoConfig, validate_credentials
from duo_sync.errors import DuoApiError, DuoSyncError, PaginationError, TransportError
from duo_sync.graph import (
    RESOURCE_TYPE_ACCOUNT,
    RESOURCE_TYPES,
    Entitlement,
    Grant,
    Resource,
)
from duo_sync.syncers.account import AccountSyncer
from duo_sync.syncers.admin import AdminSyncer
from duo_sync.syncers.group import GroupSyncer
from duo_sync.syncers.role import RoleSyncer
from duo_sync.syncers.user import UserSyncer

logger = logging.getLogger("duo_sync.connector")

RESOURCE_TYPE_IDS = tuple(rt.id for rt in RESOURCE_TYPES)

# Failures confined to one resource type; anything else propagates.
_TYPE_FAILURES = (DuoApiError, TransportError, PaginationError)


@dataclass
class SyncReport:
    run_id: str
    resources: list[Resource] = field(default_factory=list)
    entitlements: list[Entitlement] = field(default_factory=list)
    grants: list[Grant] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def counts(self) -> dict[str, int]:
        """{resource_type: n} plus entitlement and grant totals."""
        rv: dict[str, int] = {}
        for res in self.resources:
            key = res.id.resource_type
            rv[key] = rv.get(key, 0) + 1
        rv["entitlements"] = len(self.entitlements)
        rv["grants"] = len(self.grants)
        return rv


class DuoConnector:
    def __init__(self, client: DuoClient, member_fetch_workers: int = 1) -> None:
        self.client = client
        self.integration_key = client.integration_key
        self._syncers: dict[str, BaseSyncer] = {
            s.RESOURCE_TYPE.id: s
            for s in (
                UserSyncer(client),
                GroupSyncer(client, member_fetch_workers),
                AdminSyncer(client),
                AccountSyncer(client, self.integration_key),
                RoleSyncer(client),
            )
        }

    @classmethod
    def from_config(
        cls,
        config: DuoConfig,
        session: Optional[requests.Session] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> "DuoConnector":
        validate_credentials(config.integration_key, config.secret_key, config.api_hostname)
        client = DuoClient(
            config.integration_key,
            config.secret_key,
            config.api_hostname,
            session=session,
            timeout=config.request_timeout,
            cancel_event=cancel_event,
        )
        return cls(client, member_fetch_workers=config.member_fetch_workers)

    def resource_syncers(self) -> list[BaseSyncer]:
        return list(self._syncers.values())

    def syncer(self, resource_type: str) -> BaseSyncer:
        return self._syncers[resource_type]

    def metadata(self) -> dict[str, str]:
        return {"display_name": "Duo", "description": "Duo Security Admin API"}

    def validate(self) -> None:
        """Hit the integration endpoint to check the credentials."""
        try:
            self.client.get_integration()
        except DuoSyncError as exc:
            raise DuoSyncError(f"error fetching integration by credentials: {exc}") from exc

    # ------------------------------------------------------------------
    # Full sync
    # ------------------------------------------------------------------

    def sync(self, resource_types: Optional[Iterable[str]] = None) -> SyncReport:
        """List the account, then every child type under it.

        A failure inside one resource type is recorded in the report and the
        remaining types still run. Child types need the account id, so a failed
        account listing skips them.
        """
        wanted = set(resource_types or RESOURCE_TYPE_IDS)
        unknown = wanted - set(RESOURCE_TYPE_IDS)
        if unknown:
            raise ValueError(f"unknown resource types: {sorted(unknown)}")

        report = SyncReport(run_id=str(uuid.uuid4()))
        started = time.monotonic()
        logger.info("Sync started", extra={"run_id": report.run_id})

        account_syncer = self._syncers[RESOURCE_TYPE_ACCOUNT.id]
        accounts = self._sync_type(
            report, account_syncer, None, emit=RESOURCE_TYPE_ACCOUNT.id in wanted
        )
        if accounts is None:
            for type_id in wanted - {RESOURCE_TYPE_ACCOUNT.id}:
                report.failures.setdefault(type_id, "skipped: account listing failed")

        for account in accounts or []:
            for type_id in account.child_resource_types:
                if type_id in wanted:
                    self._sync_type(report, self._syncers[type_id], account)

        logger.info(
            "Sync complete",
            extra={
                "run_id": report.run_id,
                "records": len(report.resources),
                "duration_s": round(time.monotonic() - started, 3),
            },
        )
        return report

    def _sync_type(
        self,
        report: SyncReport,
        syncer: BaseSyncer,
        parent: Optional[Resource],
        emit: bool = True,
    ) -> Optional[list[Resource]]:
        """Sync one resource type into ``report``; returns its resources, or None on failure."""
        type_id = syncer.RESOURCE_TYPE.id
        started = time.monotonic()
        resources: list[Resource] = []
        entitlements: list[Entitlement] = []
        grants: list[Grant] = []
        try:
            resources = list(syncer.list_all(parent.id if parent else None))
            if emit:
                for res in resources:
                    entitlements.extend(syncer.entitlements_all(res))
                    grants.extend(syncer.grants_all(res))
        except _TYPE_FAILURES as exc:
            report.failures[type_id] = str(exc)
            logger.error(
                "Sync failed: %s",
                exc,
                extra={"resource_type": type_id, "run_id": report.run_id},
            )
            return None

        if emit:
            report.resources.extend(resources)
            report.entitlements.extend(entitlements)
            report.grants.extend(grants)
            logger.info(
                "Synced %s",
                type_id,
                extra={
                    "resource_type": type_id,
                    "records": len(resources),
                    "run_id": report.run_id,
                    "duration_s": round(time.monotonic() - started, 3),
                },
            )
        return resources
