"""Shared test fixtures for the Duo sync tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from duo_sync.api_models import Admin, User
from duo_sync.client import DuoClient
from duo_sync.graph import ResourceId

INTEGRATION_KEY = "DIWJ8X6AEYOR5OMC6TQ1"
SECRET_KEY = "Zh5eGmUq9zpfQnyUIu5OL9iWoMMv5ZNmk3zLJ4Ep"
API_HOSTNAME = "api-xxxxxxxx.duosecurity.com"

ACCOUNT_ID = ResourceId("account", INTEGRATION_KEY)


def make_response(body, status_code: int = 200) -> MagicMock:
    """A requests.Response stand-in whose .json() returns ``body``."""
    resp = MagicMock()
    resp.status_code = status_code
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def ok(response, metadata=None) -> dict:
    body = {"stat": "OK", "response": response}
    if metadata is not None:
        body["metadata"] = metadata
    return body


@pytest.fixture
def session() -> MagicMock:
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture
def duo_client(session) -> DuoClient:
    return DuoClient(INTEGRATION_KEY, SECRET_KEY, API_HOSTNAME, session=session, timeout=5)


@pytest.fixture
def fake_client() -> MagicMock:
    """Stand-in for DuoClient at the syncer level."""
    client = MagicMock(spec=DuoClient)
    client.integration_key = INTEGRATION_KEY
    return client


@pytest.fixture
def admins() -> list[Admin]:
    return [
        Admin(admin_id="DEOWNER", name="Ada Lovelace", email="ada@example.com", role="Owner"),
        Admin(admin_id="DEHELP", name="Grace Hopper", email="grace@example.com", role="Help Desk"),
        Admin(admin_id="DEWEIRD", name="Madonna", email="m@example.com", role="Unknown Thing"),
        Admin(admin_id="DEREAD", name="Alan Turing", email="alan@example.com", role="Read-only"),
    ]


@pytest.fixture
def users() -> list[User]:
    return [
        User(user_id="DU1", username="ada", realname="Ada Lovelace", email="ada@example.com", status="active"),
        User(user_id="DU2", username="grace", realname="Grace Hopper", email="grace@example.com", status="disabled"),
    ]
