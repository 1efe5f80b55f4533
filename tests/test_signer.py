"""Tests for Duo request signing."""

from __future__ import annotations

import base64

from duo_sync.signer import canon_params, canonicalize, sign
from tests.conftest import API_HOSTNAME, INTEGRATION_KEY, SECRET_KEY

DATE = "Tue, 21 Aug 2012 17:29:18 -0000"
PARAMS = {"realname": ["First Last"], "username": ["root"]}

EXPECTED_SIG = (
    "a2c781990efe0a72a515271f7c8a3efa331b9a15701efbf1197a94e1355d9b1f"
    "3a8d8e889228cfe366d6cb63e55214f3d3ce39ebd020aa65abc5ed25f75abd90"
)
EXPECTED_HEADER = (
    "Basic RElXSjhYNkFFWU9SNU9NQzZUUTE6YTJjNzgxOTkwZWZlMGE3MmE1MTUyNzFmN2M4YTNlZmEzMzFi"
    "OWExNTcwMWVmYmYxMTk3YTk0ZTEzNTVkOWIxZjNhOGQ4ZTg4OTIyOGNmZTM2NmQ2Y2I2M2U1NTIxNGYz"
    "ZDNjZTM5ZWJkMDIwYWE2NWFiYzVlZDI1Zjc1YWJkOTA="
)


class TestCanonParams:
    def test_values_sorted_per_key(self) -> None:
        assert canon_params({"a": ["2", "1"]}) == "a=1&a=2"

    def test_keys_sorted(self) -> None:
        assert canon_params({"offset": ["0"], "limit": ["100"]}) == "limit=100&offset=0"

    def test_space_is_percent_20(self) -> None:
        assert canon_params({"realname": ["First Last"]}) == "realname=First%20Last"

    def test_literal_plus_stays_escaped(self) -> None:
        assert canon_params({"q": ["a+b"]}) == "q=a%2Bb"

    def test_empty(self) -> None:
        assert canon_params(None) == ""
        assert canon_params({}) == ""


class TestCanonicalize:
    def test_line_order_and_casing(self) -> None:
        canon = canonicalize("post", "API-XXXXXXXX.DuoSecurity.com", "/admin/v1/users", PARAMS, DATE)
        assert canon.split("\n") == [
            DATE,
            "POST",
            API_HOSTNAME,
            "/admin/v1/users",
            "realname=First%20Last&username=root",
        ]

    def test_no_params_leaves_empty_last_line(self) -> None:
        canon = canonicalize("GET", API_HOSTNAME, "/admin/v1/settings", None, DATE)
        assert canon.endswith("/admin/v1/settings\n")


class TestSign:
    def test_known_vector(self) -> None:
        header = sign(INTEGRATION_KEY, SECRET_KEY, "POST", API_HOSTNAME, "/admin/v1/users", DATE, PARAMS)
        assert header == EXPECTED_HEADER

    def test_header_wraps_ikey_and_hex_digest(self) -> None:
        header = sign(INTEGRATION_KEY, SECRET_KEY, "POST", API_HOSTNAME, "/admin/v1/users", DATE, PARAMS)
        assert header.startswith("Basic ")
        decoded = base64.b64decode(header[len("Basic "):]).decode()
        assert decoded == f"{INTEGRATION_KEY}:{EXPECTED_SIG}"

    def test_deterministic(self) -> None:
        args = (INTEGRATION_KEY, SECRET_KEY, "GET", API_HOSTNAME, "/admin/v1/users", DATE, {"offset": ["0"]})
        assert sign(*args) == sign(*args)

    def test_date_changes_signature(self) -> None:
        a = sign(INTEGRATION_KEY, SECRET_KEY, "GET", API_HOSTNAME, "/admin/v1/users", DATE)
        b = sign(INTEGRATION_KEY, SECRET_KEY, "GET", API_HOSTNAME, "/admin/v1/users", "Wed, 22 Aug 2012 17:29:18 -0000")
        assert a != b
