"""AWS Lambda handler for the Duo sync.

Deployed as a Lambda function triggered by an EventBridge rule. Each
invocation syncs one resource type, or all of them.

Event format:
  {}                              -> all resource types
  {"resource_type": "group"}
  {"resource_type": "all", "output_path": "/tmp/duo-sync.json"}
"""

from __future__ import annotations

import json
import logging

from duo_sync.cli import RESOURCE_TYPE_CHOICES, run_sync
from duo_sync.config import load_config
from duo_sync.errors import DuoSyncError
from duo_sync.logging_config import configure_logging

logger = logging.getLogger("duo_sync.lambda")

# Lambda only allows writes under /tmp.
DEFAULT_OUTPUT_PATH = "/tmp/duo-sync.json"


def handler(event: dict, context) -> dict:
    """Lambda entry point."""
    configure_logging()

    resource_type = event.get("resource_type") or "all"
    if resource_type not in RESOURCE_TYPE_CHOICES:
        return {"statusCode": 400, "body": f"Unknown resource_type {resource_type!r}"}

    logger.info("Lambda invoked for resource_type=%s", resource_type)

    try:
        config = load_config()
        report = run_sync(
            config,
            resource_type,
            event.get("output_path") or DEFAULT_OUTPUT_PATH,
        )
    except DuoSyncError as exc:
        logger.error("Sync failed for %s: %s", resource_type, exc, exc_info=True)
        return {
            "statusCode": 500,
            "body": json.dumps({"resource_type": resource_type, "error": str(exc)}),
        }

    body = {
        "resource_type": resource_type,
        "run_id": report.run_id,
        "counts": report.counts(),
        "failures": report.failures,
    }
    return {"statusCode": 200 if report.ok else 500, "body": json.dumps(body)}
