"""Write a sync report to disk as a JSON document."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from duo_sync.connector import SyncReport
from duo_sync.graph import Entitlement, Grant

logger = logging.getLogger("duo_sync.output")


def _entitlement_row(ent: Entitlement) -> dict[str, Any]:
    row = asdict(ent)
    # The owning resource is already listed; keep only its id.
    row["resource"] = str(ent.resource.id)
    return row


def _grant_row(grant: Grant) -> dict[str, Any]:
    return {
        "id": grant.id,
        "entitlement": grant.entitlement.id,
        "principal": asdict(grant.principal),
    }


def report_to_dict(report: SyncReport) -> dict[str, Any]:
    return {
        "run_id": report.run_id,
        "synced_at": datetime.now(timezone.utc).isoformat(),
        "resources": [asdict(r) for r in report.resources],
        "entitlements": [_entitlement_row(e) for e in report.entitlements],
        "grants": [_grant_row(g) for g in report.grants],
        "counts": report.counts(),
        "failures": dict(report.failures),
    }


def write_report(report: SyncReport, path: str) -> None:
    """Write atomically: a temp file in the target directory, then rename."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".duo-sync-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(report_to_dict(report), fh, indent=2, sort_keys=True)
        os.replace(tmp_path, path)
    except Exception:
        os.unlink(tmp_path)
        raise
    logger.info(
        "Wrote sync report to %s",
        path,
        extra={"run_id": report.run_id, "records": len(report.resources)},
    )
