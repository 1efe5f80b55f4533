"""Configuration via environment variables with cloud-native secret support.

Supports:
  - Environment variables (local dev)
  - .env files (python-dotenv)
  - AWS Secrets Manager (aws-secret://name#key) for the secret key
  - GCP Secret Manager (gcp-secret://name) for the secret key
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from duo_sync.errors import ConfigError
from duo_sync.secrets import resolve_secret


@dataclass(frozen=True)
class DuoConfig:
    integration_key: str
    secret_key: str
    api_hostname: str
    request_timeout: Optional[float] = 30.0
    member_fetch_workers: int = 1

    def __post_init__(self) -> None:
        validate_credentials(self.integration_key, self.secret_key, self.api_hostname)


@dataclass(frozen=True)
class SchedulerConfig:
    interval_min: int = 60
    misfire_grace_time: int = 300


@dataclass(frozen=True)
class SyncConfig:
    duo: DuoConfig
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    output_path: str = "duo-sync.json"


def validate_credentials(integration_key: str, secret_key: str, api_hostname: str) -> None:
    """Fail before any network call when a credential is missing."""
    if not integration_key:
        raise ConfigError("integration key is missing")
    if not secret_key:
        raise ConfigError("secret key is missing")
    if not api_hostname:
        raise ConfigError("api host name is missing")


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _timeout_env(name: str, default: float) -> Optional[float]:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from exc
    # 0 disables the timeout
    return value or None


def load_config() -> SyncConfig:
    """Load configuration from environment variables.

    The secret key may be a cloud secret reference; it is resolved here so the
    rest of the sync only ever sees plaintext.
    """
    load_dotenv()

    secret_raw = os.environ.get("DUO_SECRET_KEY", "")
    duo = DuoConfig(
        integration_key=os.environ.get("DUO_INTEGRATION_KEY", ""),
        secret_key=resolve_secret(secret_raw) if secret_raw else "",
        api_hostname=os.environ.get("DUO_API_HOSTNAME", ""),
        request_timeout=_timeout_env("DUO_REQUEST_TIMEOUT", 30.0),
        member_fetch_workers=_int_env("DUO_MEMBER_FETCH_WORKERS", 1),
    )

    scheduler = SchedulerConfig(
        interval_min=_int_env("SYNC_INTERVAL_MIN", 60),
        misfire_grace_time=_int_env("SYNC_MISFIRE_GRACE_TIME", 300),
    )

    return SyncConfig(
        duo=duo,
        scheduler=scheduler,
        output_path=os.environ.get("SYNC_OUTPUT_PATH", "duo-sync.json"),
    )
