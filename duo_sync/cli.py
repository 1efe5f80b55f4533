"""CLI entry point: sync, validate, scheduler."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from duo_sync.config import SyncConfig, load_config
from duo_sync.connector import RESOURCE_TYPE_IDS, DuoConnector, SyncReport
from duo_sync.errors import ConfigError, DuoSyncError
from duo_sync.logging_config import configure_logging
from duo_sync.output import write_report

logger = logging.getLogger("duo_sync.cli")

RESOURCE_TYPE_CHOICES = ["all", *RESOURCE_TYPE_IDS]


def run_sync(
    config: SyncConfig,
    resource_type: str = "all",
    output_path: Optional[str] = None,
) -> SyncReport:
    """Sync one resource type (or all) and write the report."""
    connector = DuoConnector.from_config(config.duo)
    types = None if resource_type == "all" else [resource_type]

    report = connector.sync(types)
    write_report(report, output_path or config.output_path)
    logger.info("Sync results: %s", report.counts(), extra={"run_id": report.run_id})
    for type_id, error in report.failures.items():
        logger.error("%s failed: %s", type_id, error, extra={"resource_type": type_id})
    return report


def cmd_sync(args: argparse.Namespace) -> int:
    """Run a one-shot sync."""
    config = load_config()
    report = run_sync(config, args.resource_type, args.output)
    return 0 if report.ok else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Check the credentials against the integration endpoint."""
    config = load_config()
    connector = DuoConnector.from_config(config.duo)
    connector.validate()
    print("Credentials OK.")
    return 0


def cmd_scheduler(args: argparse.Namespace) -> int:
    """Start the APScheduler-based scheduling loop."""
    from duo_sync.scheduler import start_scheduler

    config = load_config()
    start_scheduler(config)
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    configure_logging()

    parser = argparse.ArgumentParser(
        prog="duo-sync",
        description="Sync Duo accounts, users, groups, admins and roles into a directory graph",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Run one-shot sync")
    sync_parser.add_argument(
        "--resource-type", "-r",
        choices=RESOURCE_TYPE_CHOICES,
        default="all",
        help="Resource type to sync (default: all)",
    )
    sync_parser.add_argument(
        "--output", "-o",
        default=None,
        help="Report path (default: $SYNC_OUTPUT_PATH or duo-sync.json)",
    )
    sync_parser.set_defaults(func=cmd_sync)

    validate_parser = subparsers.add_parser("validate", help="Validate Duo credentials")
    validate_parser.set_defaults(func=cmd_validate)

    sched_parser = subparsers.add_parser("scheduler", help="Start scheduled sync loop")
    sched_parser.set_defaults(func=cmd_scheduler)

    args = parser.parse_args(argv)
    try:
        code = args.func(args)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(2)
    except DuoSyncError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
