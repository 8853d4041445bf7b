"""Flat environment variable names for nested settings.

pydantic-settings understands `ONESIGNAL__APP_ID`; this module additionally maps
the conventional single-underscore names (`ONESIGNAL_APP_ID`, `LOG_LEVEL`, ...).
"""
from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any


def _set_nested(data: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    node = data
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[path[-1]] = value


def _apply_alias_mappings(
    env: Mapping[str, str],
    data: dict[str, Any],
    mappings: Iterable[tuple[str, tuple[str, ...]]],
) -> None:
    for env_name, path in mappings:
        value = env.get(env_name)
        if value:
            _set_nested(data, path, value)


_CANONICAL_MAPPINGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # OneSignal
    ("ONESIGNAL_APP_ID", ("onesignal", "app_id")),
    ("ONESIGNAL_API_KEY", ("onesignal", "api_key")),
    ("ONESIGNAL_API_URL", ("onesignal", "api_url")),
    ("ONESIGNAL_TIMEOUT_SECONDS", ("onesignal", "timeout_seconds")),
    ("ONESIGNAL_VERIFY_TLS", ("onesignal", "verify_tls")),
    # Observability
    ("LOG_LEVEL", ("observability", "log_level")),
    ("LOG_FORMAT", ("observability", "log_format")),
    # Hardening
    ("HARDENING_TRANSPORT_TRUST_ENV", ("hardening", "transport", "trust_env")),
    (
        "HARDENING_TRANSPORT_ALLOW_INSECURE_HTTP",
        ("hardening", "transport", "allow_insecure_http"),
    ),
    (
        "HARDENING_TRANSPORT_ALLOW_INSECURE_TLS",
        ("hardening", "transport", "allow_insecure_tls"),
    ),
)


def get_flat_env_settings_source() -> dict[str, Any]:
    data: dict[str, Any] = {}
    _apply_alias_mappings(os.environ, data, _CANONICAL_MAPPINGS)
    return data
