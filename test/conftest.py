from __future__ import annotations

import os
import socket
from copy import deepcopy
from typing import Any

import pytest

from onesignal_client.config.settings import Settings
from onesignal_client.observability.logger import configure_logging

API_URL = "https://onesignal.example/api/v1"
APP_ID = "app-123"
API_KEY = "rest-key-456"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def make_settings(overrides: dict[str, Any] | None = None) -> Settings:
    data: dict[str, Any] = {
        "onesignal": {"app_id": APP_ID, "api_key": API_KEY, "api_url": API_URL},
    }
    if overrides:
        data = _deep_merge(data, overrides)
    return Settings.from_mapping(data)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Prevent accidental real network calls in unit tests.

    Respx mocks should still work because they intercept at the HTTP client layer.
    """
    if (os.environ.get("ALLOW_NETWORK_TESTS") or "").strip().lower() in {"1", "true", "yes"}:
        return

    def _blocked(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError(
            "Network access is disabled in tests (set ALLOW_NETWORK_TESTS=1 to override)."
        )

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked, raising=True)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture(autouse=True)
def _route_logs_to_stderr() -> None:
    # Unconfigured structlog prints to stdout, which CLI tests parse.
    configure_logging(log_level="INFO", log_format="json")
