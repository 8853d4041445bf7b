from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx
import pytest
import respx

from onesignal_client import cli
from onesignal_client.config.validate import ConfigValidationError, ConfigValidationIssue

API_URL = "https://onesignal.example/api/v1"


@pytest.fixture
def cli_settings(monkeypatch, settings_factory):
    settings = settings_factory()
    monkeypatch.setattr(cli, "load_settings", lambda: settings)
    monkeypatch.setattr(cli, "configure_logging", lambda **_kwargs: None)
    return settings


def test_main_without_command_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "onesignal-client" in capsys.readouterr().out


def test_validate_config_success(cli_settings, capsys) -> None:
    rc = cli.cmd_validate_config(argparse.Namespace())
    assert rc == 0
    out = capsys.readouterr().out
    assert "Configuration is valid" in out
    assert "app-123" in out


def test_validate_config_failure(monkeypatch, capsys) -> None:
    def _fail():
        raise ConfigValidationError([ConfigValidationIssue("onesignal.app_id", "Field required")])

    monkeypatch.setattr(cli, "load_settings", _fail)
    rc = cli.cmd_validate_config(argparse.Namespace())
    assert rc == 1
    assert "onesignal.app_id" in capsys.readouterr().err


def test_dump_config_redacts_api_key(cli_settings, capsys) -> None:
    rc = cli.cmd_dump_config(argparse.Namespace())
    assert rc == 0
    out = capsys.readouterr().out
    parsed = json.loads(out)
    assert parsed["onesignal"]["app_id"] == "app-123"
    assert "rest-key-456" not in out


def test_fetch_notifications_prints_json(cli_settings, capsys) -> None:
    with respx.mock:
        route = respx.get(f"{API_URL}/notifications").mock(
            return_value=httpx.Response(200, json={"total_count": 0, "notifications": []})
        )
        rc = cli.main(["fetch-notifications", "--limit", "10", "--kind", "1"])

        params = route.calls.last.request.url.params
        assert params["limit"] == "10"
        assert params["offset"] == "0"
        assert params["kind"] == "1"

    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"total_count": 0, "notifications": []}


def test_create_notification_from_file(cli_settings, capsys, tmp_path: Path) -> None:
    payload_path = tmp_path / "notification.json"
    payload_path.write_text(json.dumps({"contents": {"en": "Hi"}}), encoding="utf-8")

    with respx.mock:
        route = respx.post(f"{API_URL}/notifications").mock(
            return_value=httpx.Response(200, json={"id": "n-1"})
        )
        rc = cli.main(["create-notification", "--payload", f"@{payload_path}"])

        body = json.loads(route.calls.last.request.content)
        assert body == {"contents": {"en": "Hi"}, "app_id": "app-123"}

    assert rc == 0


def test_create_notification_rejects_invalid_payload(cli_settings, capsys) -> None:
    rc = cli.main(["create-notification", "--payload", "[1, 2]"])
    assert rc == 1
    assert "Invalid notification payload" in capsys.readouterr().err


def test_csv_export_arguments(cli_settings, capsys) -> None:
    with respx.mock:
        route = respx.post(f"{API_URL}/players/csv_export").mock(
            return_value=httpx.Response(200, json={"csv_file_url": "https://cdn.example/a.csv.gz"})
        )
        rc = cli.main(
            [
                "csv-export",
                "--extra-field",
                "location",
                "--extra-field",
                "country",
                "--last-active-since",
                "1704164645",
            ]
        )

        request = route.calls.last.request
        assert request.url.params["app_id"] == "app-123"
        assert json.loads(request.content) == {
            "extra_fields": ["location", "country"],
            "last_active_since": "1704164645",
            "app_id": "app-123",
        }

    assert rc == 0


def test_api_error_exit_code_and_message(cli_settings, capsys) -> None:
    with respx.mock:
        respx.delete(f"{API_URL}/players/p-1").mock(
            return_value=httpx.Response(400, json={"errors": [["invalid_player_ids", "unknown"]]})
        )
        rc = cli.main(["delete-player", "p-1"])

    assert rc == 1
    err = capsys.readouterr().err
    assert "invalid_player_ids" in err
    assert "unknown" in err


def test_transport_error_exit_code(cli_settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{API_URL}/players").mock(side_effect=httpx.ConnectError("refused"))
        rc = cli.main(["fetch-players"])

    assert rc == 1
    assert "Request to OneSignal failed" in capsys.readouterr().err


def test_non_json_response_is_printed_raw(cli_settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{API_URL}/players/p-1").mock(return_value=httpx.Response(200, text="ok"))
        rc = cli.main(["fetch-player", "p-1"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "ok"
