from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import SecretStr

REDACTED_VALUE = "[redacted]"

_EXPLICIT_SENSITIVE_KEYS = frozenset(
    {
        # Env-var style keys (can appear in logs or config dumps).
        "onesignal_api_key",
        # Config-key style names.
        "api_key",
        "rest_api_key",
    }
)

_SENSITIVE_KEY_FRAGMENTS = ("password", "token", "secret", "authorization", "api_key", "apikey")

_AUTHZ_SCHEME_RE = re.compile(
    r"(?i)\b(authorization)\s*[:=]\s*(bearer|token|basic)\s+([^\s,;]+)"
)
_BASIC_CREDENTIAL_RE = re.compile(r"\bBasic\s+([A-Za-z0-9+/=_\-]{8,})")
_COMMON_KV_SECRET_RE = re.compile(
    r"(?i)\b("
    r"api[_-]?key|rest[_-]?api[_-]?key|token|api[_-]?token|access[_-]?token|"
    r"secret|password|passwd"
    r")\s*[:=]\s*([^\s,;]+)"
)
_COMMON_QUERY_SECRET_RE = re.compile(
    r"(?i)([?&](?:api[_-]?key|api[_-]?token|access[_-]?token|token|secret)=)([^&\s]+)"
)


def scrub_secrets_in_text(text: str) -> str:
    """
    Best-effort redaction for secrets embedded in free-form text (exceptions, warnings).

    Targets common credential formats while keeping logs readable.
    """
    if not text:
        return text

    out = text

    # Authorization: Bearer <...> / Token <...> / Basic <...>
    out = _AUTHZ_SCHEME_RE.sub(r"\1: \2 " + REDACTED_VALUE, out)

    # Bare "Basic <key>" as sent by this client.
    out = _BASIC_CREDENTIAL_RE.sub("Basic " + REDACTED_VALUE, out)

    # Common key=value or key: value patterns.
    out = _COMMON_KV_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED_VALUE}", out)

    # Query parameters.
    out = _COMMON_QUERY_SECRET_RE.sub(lambda m: f"{m.group(1)}{REDACTED_VALUE}", out)

    return out


def _is_sensitive_key(key: str) -> bool:
    normalized = key.strip().lower()
    if normalized in _EXPLICIT_SENSITIVE_KEYS:
        return True
    return any(fragment in normalized for fragment in _SENSITIVE_KEY_FRAGMENTS)


def _redact_value(value: Any) -> Any:
    if isinstance(value, SecretStr):
        return REDACTED_VALUE
    if isinstance(value, str):
        return scrub_secrets_in_text(value)
    if isinstance(value, Mapping):
        return redact_settings_dict(value)
    if isinstance(value, list):
        return [_redact_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_redact_value(item) for item in value)
    return value


def redact_settings_dict(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Returns a deep-redacted copy of `data` (does not mutate input).

    Redaction rules:
    - Any value under a sensitive key is replaced with `REDACTED_VALUE`.
    - Any `pydantic.SecretStr` value is replaced with `REDACTED_VALUE` even if the key is not known.
    """
    scrubbed: dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive_key(str(key)):
            scrubbed[str(key)] = REDACTED_VALUE
        else:
            scrubbed[str(key)] = _redact_value(value)
    return scrubbed
