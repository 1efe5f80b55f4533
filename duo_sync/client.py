"""Signed, read-only client for the Duo Admin API."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Callable, Optional, TypeVar
from urllib.parse import quote

import requests

from duo_sync.api_models import Account, Admin, Envelope, Group, Integration, User
from duo_sync.errors import DuoApiError, TransportError
from duo_sync.signer import QueryParams, canon_params, sign

logger = logging.getLogger("duo_sync.client")

PAGINATION_LIMIT = "100"

T = TypeVar("T")


def pagination_query(offset: str) -> dict[str, list[str]]:
    """Query parameters for one page; an empty offset means the first page."""
    return {"offset": [offset or "0"], "limit": [PAGINATION_LIMIT]}


def rfc1123_now() -> str:
    """Current UTC time as e.g. ``Tue, 21 Aug 2012 17:29:18 +0000``."""
    return format_datetime(datetime.now(timezone.utc))


class DuoClient:
    """One signed GET per call, decoded into typed records.

    The session, timeout and cancellation event belong to the caller; the
    client adds no retries of its own.
    """

    def __init__(
        self,
        integration_key: str,
        secret_key: str,
        api_hostname: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self._integration_key = integration_key
        self._secret_key = secret_key
        self._host = api_hostname
        self._base = f"https://{api_hostname}"
        self._timeout = timeout
        self._cancel_event = cancel_event
        self._session = session or requests.Session()

    @property
    def integration_key(self) -> str:
        return self._integration_key

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_users(self, offset: str = "") -> tuple[list[User], str]:
        return self._list("list users", "/admin/v1/users", offset, User.from_dict)

    def get_groups(self, offset: str = "") -> tuple[list[Group], str]:
        return self._list("list groups", "/admin/v1/groups", offset, Group.from_dict)

    def get_group_users(self, group_id: str, offset: str = "") -> tuple[list[User], str]:
        uri = f"/admin/v2/groups/{quote(group_id, safe='')}/users"
        return self._list("list group users", uri, offset, User.from_dict)

    def get_admins(self, offset: str = "") -> tuple[list[Admin], str]:
        return self._list("list admins", "/admin/v1/admins", offset, Admin.from_dict)

    def get_user(self, user_id: str) -> User:
        uri = f"/admin/v1/users/{quote(user_id, safe='')}"
        env = self._get("get user", uri)
        return User.from_dict(env.response or {})

    def get_account(self) -> Account:
        env = self._get("get account", "/admin/v1/settings")
        return Account.from_dict(env.response or {})

    def get_integration(self) -> Integration:
        uri = f"/admin/v1/integrations/{quote(self._integration_key, safe='')}"
        env = self._get("get integration", uri)
        return Integration.from_dict(env.response or {})

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _list(
        self,
        operation: str,
        uri: str,
        offset: str,
        parse: Callable[[dict], T],
    ) -> tuple[list[T], str]:
        env = self._get(operation, uri, pagination_query(offset))
        records = [parse(item) for item in env.response or []]
        logger.debug(
            "Fetched %d records for %s",
            len(records),
            operation,
            extra={"operation": operation, "offset": offset or "0", "records": len(records)},
        )
        return records, env.next_offset

    def _get(
        self,
        operation: str,
        uri: str,
        params: Optional[QueryParams] = None,
    ) -> Envelope:
        self._check_cancelled(operation)

        date = rfc1123_now()
        headers = {
            "Authorization": sign(
                self._integration_key,
                self._secret_key,
                "GET",
                self._host,
                uri,
                date,
                params,
            ),
            "Date": date,
            "Accept": "application/json",
        }
        # Send exactly the query string that was signed.
        url = self._base + uri
        query = canon_params(params)
        if query:
            url = f"{url}?{query}"

        try:
            resp = self._session.get(url, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(operation, str(exc)) from exc

        self._check_cancelled(operation)

        try:
            body = resp.json()
        except ValueError as exc:
            raise TransportError(
                operation,
                f"undecodable response body (HTTP {resp.status_code})",
            ) from exc
        if not isinstance(body, dict):
            raise TransportError(
                operation,
                f"unexpected response shape (HTTP {resp.status_code})",
            )

        env = Envelope.from_dict(body)
        if env.failed:
            raise DuoApiError(operation, env.code, env.message, env.message_detail)
        return env

    def _check_cancelled(self, operation: str) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise TransportError(operation, "request cancelled")
