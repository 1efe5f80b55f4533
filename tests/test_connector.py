"""Tests for the connector's full-sync driver."""

from __future__ import annotations

import logging

import pytest

from duo_sync.api_models import Account, Group, User
from duo_sync.config import DuoConfig
from duo_sync.connector import DuoConnector
from duo_sync.errors import ConfigError, DuoApiError, DuoSyncError, TransportError
from tests.conftest import API_HOSTNAME, INTEGRATION_KEY, SECRET_KEY


@pytest.fixture
def populated_client(fake_client, admins, users):
    fake_client.get_account.return_value = Account(name="Acme")
    fake_client.get_users.return_value = (users, "")
    fake_client.get_groups.return_value = ([Group(group_id="DG1", name="Eng")], "")
    fake_client.get_group_users.return_value = ([User(user_id="DU1")], "")
    fake_client.get_user.side_effect = lambda uid: {u.user_id: u for u in users}[uid]
    fake_client.get_admins.return_value = (admins, "")
    return fake_client


class TestSync:
    def test_full_graph(self, populated_client) -> None:
        report = DuoConnector(populated_client).sync()

        assert report.ok
        counts = report.counts()
        assert counts["account"] == 1
        assert counts["user"] == 2
        assert counts["group"] == 1
        assert counts["admin"] == 4
        assert counts["role"] == 8
        # 8 account permissions + 1 group member + 8 role members
        assert counts["entitlements"] == 17
        # 3 account permission grants + 1 membership + 3 role memberships
        assert counts["grants"] == 7

    def test_children_hang_off_account(self, populated_client) -> None:
        report = DuoConnector(populated_client).sync()
        account = next(r for r in report.resources if r.id.resource_type == "account")
        children = [r for r in report.resources if r.id.resource_type != "account"]
        assert all(r.parent_id == account.id for r in children)

    def test_single_resource_type(self, populated_client) -> None:
        report = DuoConnector(populated_client).sync(["group"])
        assert {r.id.resource_type for r in report.resources} == {"group"}
        assert len(report.grants) == 1
        populated_client.get_users.assert_not_called()

    def test_role_only_sync_flags_unknown_label(self, populated_client, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="duo_sync"):
            report = DuoConnector(populated_client).sync(["role"])

        assert sorted(g.principal.resource for g in report.grants) == ["DEHELP", "DEOWNER", "DEREAD"]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert [w.admin_id for w in warnings] == ["DEWEIRD"]
        assert warnings[0].role_name == "Unknown Thing"

    def test_unknown_resource_type(self, populated_client) -> None:
        with pytest.raises(ValueError):
            DuoConnector(populated_client).sync(["device"])

    def test_failure_is_confined_to_one_type(self, populated_client) -> None:
        populated_client.get_groups.side_effect = DuoApiError("list groups", 50000, "Server error")
        report = DuoConnector(populated_client).sync()

        assert not report.ok
        assert set(report.failures) == {"group"}
        assert "Server error" in report.failures["group"]
        types = {r.id.resource_type for r in report.resources}
        assert types == {"account", "user", "admin", "role"}

    def test_account_failure_skips_children(self, populated_client) -> None:
        populated_client.get_account.side_effect = TransportError("get account", "timed out")
        report = DuoConnector(populated_client).sync()

        assert report.resources == []
        assert set(report.failures) == {"account", "user", "group", "admin", "role"}
        populated_client.get_users.assert_not_called()


class TestSetup:
    def test_validate_wraps_error(self, fake_client) -> None:
        fake_client.get_integration.side_effect = DuoApiError("get integration", 40103, "Invalid signature")
        with pytest.raises(DuoSyncError, match="error fetching integration by credentials"):
            DuoConnector(fake_client).validate()

    def test_missing_credentials_fail_before_any_call(self) -> None:
        with pytest.raises(ConfigError, match="secret key"):
            DuoConfig(integration_key=INTEGRATION_KEY, secret_key="", api_hostname=API_HOSTNAME)

    def test_from_config(self, session) -> None:
        config = DuoConfig(INTEGRATION_KEY, SECRET_KEY, API_HOSTNAME, member_fetch_workers=3)
        connector = DuoConnector.from_config(config, session=session)
        assert connector.integration_key == INTEGRATION_KEY
        assert connector.syncer("group").member_fetch_workers == 3
        assert [s.RESOURCE_TYPE.id for s in connector.resource_syncers()] == [
            "user", "group", "admin", "account", "role",
        ]
        session.get.assert_not_called()
