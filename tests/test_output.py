"""Tests for the JSON report writer and the CLI / Lambda / scheduler wrappers."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from duo_sync import cli
from duo_sync.api_models import Account
from duo_sync.config import DuoConfig, SyncConfig
from duo_sync.connector import DuoConnector, SyncReport
from duo_sync.entrypoints import aws_lambda
from duo_sync.errors import ConfigError
from duo_sync.logging_config import JsonFormatter
from duo_sync.output import report_to_dict, write_report
from duo_sync.scheduler import JOB_ID, build_scheduler
from tests.conftest import API_HOSTNAME, INTEGRATION_KEY, SECRET_KEY


@pytest.fixture
def report(fake_client, admins) -> SyncReport:
    fake_client.get_account.return_value = Account(name="Acme")
    fake_client.get_admins.return_value = (admins, "")
    return DuoConnector(fake_client).sync(["account", "role"])


@pytest.fixture
def sync_config(tmp_path) -> SyncConfig:
    return SyncConfig(
        duo=DuoConfig(INTEGRATION_KEY, SECRET_KEY, API_HOSTNAME),
        output_path=str(tmp_path / "out.json"),
    )


class TestReport:
    def test_dict_shape(self, report) -> None:
        data = report_to_dict(report)
        assert data["run_id"] == report.run_id
        assert data["counts"]["role"] == 8
        assert data["failures"] == {}
        grant = data["grants"][0]
        assert set(grant) == {"id", "entitlement", "principal"}
        assert grant["principal"]["resource_type"] == "admin"
        assert data["entitlements"][0]["resource"] == f"account:{INTEGRATION_KEY}"

    def test_write_is_valid_json(self, report, tmp_path) -> None:
        path = tmp_path / "nested" / "duo.json"
        write_report(report, str(path))
        data = json.loads(path.read_text())
        assert len(data["resources"]) == 9
        assert list(tmp_path.joinpath("nested").iterdir()) == [path]


class TestRunSync:
    def test_writes_report(self, sync_config, monkeypatch, report) -> None:
        connector = MagicMock()
        connector.sync.return_value = report
        monkeypatch.setattr(cli.DuoConnector, "from_config", lambda cfg: connector)

        result = cli.run_sync(sync_config, "role")

        connector.sync.assert_called_once_with(["role"])
        assert result is report
        with open(sync_config.output_path) as fh:
            assert json.load(fh)["run_id"] == report.run_id

    def test_all_means_every_type(self, sync_config, monkeypatch, report) -> None:
        connector = MagicMock()
        connector.sync.return_value = report
        monkeypatch.setattr(cli.DuoConnector, "from_config", lambda cfg: connector)
        cli.run_sync(sync_config)
        connector.sync.assert_called_once_with(None)


class TestLambda:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(aws_lambda, "configure_logging", lambda: None)

    def test_rejects_unknown_type(self) -> None:
        assert aws_lambda.handler({"resource_type": "device"}, None)["statusCode"] == 400

    def test_success(self, monkeypatch, sync_config, report) -> None:
        monkeypatch.setattr(aws_lambda, "load_config", lambda: sync_config)
        monkeypatch.setattr(aws_lambda, "run_sync", lambda cfg, rt, path: report)
        resp = aws_lambda.handler({}, None)
        assert resp["statusCode"] == 200
        assert json.loads(resp["body"])["counts"]["role"] == 8

    def test_partial_failure_is_500(self, monkeypatch, sync_config, report) -> None:
        report.failures["group"] = "list groups failed: boom"
        monkeypatch.setattr(aws_lambda, "load_config", lambda: sync_config)
        monkeypatch.setattr(aws_lambda, "run_sync", lambda cfg, rt, path: report)
        assert aws_lambda.handler({"resource_type": "all"}, None)["statusCode"] == 500

    def test_config_error(self, monkeypatch) -> None:
        def _boom():
            raise ConfigError("secret key is missing")

        monkeypatch.setattr(aws_lambda, "load_config", _boom)
        resp = aws_lambda.handler({"resource_type": "user"}, None)
        assert resp["statusCode"] == 500
        assert "secret key is missing" in resp["body"]


class TestScheduler:
    def test_single_interval_job(self, sync_config) -> None:
        scheduler = build_scheduler(sync_config)
        jobs = scheduler.get_jobs()
        assert [j.id for j in jobs] == [JOB_ID]
        assert jobs[0].max_instances == 1


class TestJsonFormatter:
    def test_extra_fields_are_kept(self) -> None:
        record = logging.LogRecord("duo_sync.syncer.account", logging.WARNING, __file__, 1,
                                   "Unknown Duo role name, skipping", None, None)
        record.role_name = "Unknown Thing"
        record.admin_id = "DEWEIRD"
        line = json.loads(JsonFormatter().format(record))
        assert line["level"] == "WARNING"
        assert line["role_name"] == "Unknown Thing"
        assert line["admin_id"] == "DEWEIRD"
        assert "run_id" not in line
