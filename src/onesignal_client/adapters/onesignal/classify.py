"""Map OneSignal HTTP responses onto the error taxonomy.

OneSignal reports failures through both the status code and an ``errors``
field in the JSON body. The field is loosely shaped: usually a list of plain
strings, sometimes a list of ``[code, message]`` pairs or an object keyed by
error code. Entries are normalised into ``ErrorEntry`` values first so the
classification rules never inspect raw JSON.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

import httpx
import structlog

from onesignal_client.adapters.onesignal.errors import (
    KNOWN_ERROR_CODES,
    ApiError,
    ClientError,
    ServerError,
    build_error,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BareEntry:
    code: str

    @property
    def text(self) -> str | None:
        return self.code


@dataclass(frozen=True, slots=True)
class PairEntry:
    code: str
    message: str

    @property
    def text(self) -> str | None:
        return self.message


@dataclass(frozen=True, slots=True)
class OtherEntry:
    raw: Any

    @property
    def text(self) -> str | None:
        if self.raw is None:
            return None
        if isinstance(self.raw, str):
            return self.raw
        return json.dumps(self.raw)


ErrorEntry = BareEntry | PairEntry | OtherEntry


def _body_text(body: str | bytes | None) -> str | None:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def parse_error_body(body: str | bytes | None) -> dict[str, Any]:
    """Parse a response body, degrading to ``{}`` when it is not a JSON object."""
    if not body:
        return {}
    try:
        parsed = json.loads(body)
    except (ValueError, TypeError):
        return {}
    if not isinstance(parsed, dict):
        return {}
    return parsed


def _entry_from_item(item: Any) -> ErrorEntry:
    if isinstance(item, str):
        return BareEntry(item)
    if isinstance(item, list) and len(item) == 2 and isinstance(item[0], str):
        return PairEntry(item[0], _as_message(item[1]))
    if isinstance(item, Mapping) and len(item) == 1:
        ((code, message),) = item.items()
        if isinstance(code, str):
            return PairEntry(code, _as_message(message))
    return OtherEntry(item)


def _as_message(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def error_entries(parsed: Mapping[str, Any]) -> list[ErrorEntry]:
    raw = parsed.get("errors", [])
    if isinstance(raw, list):
        return [_entry_from_item(item) for item in raw]
    if isinstance(raw, Mapping):
        return [_entry_from_item({key: value}) for key, value in raw.items()]
    if isinstance(raw, str):
        return [BareEntry(raw)]
    return []


def _find_known(entries: list[ErrorEntry]) -> BareEntry | PairEntry | None:
    for entry in entries:
        if isinstance(entry, (BareEntry, PairEntry)) and entry.code in KNOWN_ERROR_CODES:
            return entry
    return None


def classify(status_code: int, body: str | bytes | None) -> ApiError | None:
    """
    Returns the error described by a response, or None when the call succeeded.

    Precedence:
    - 5xx is always a ServerError (first entry text or "Error code <status>").
    - Any ``errors`` entries (at any status below 500) fail the call: a known
      error code picks its specific kind, otherwise a generic ClientError with
      the first entry's text.
    - 4xx without entries is a ClientError carrying the status and raw body.
    """
    text = _body_text(body)
    entries = error_entries(parse_error_body(text))
    first = entries[0].text if entries else None

    if status_code > 499:
        return ServerError(
            first if first is not None else f"Error code {status_code}",
            status_code=status_code,
            body=text,
        )

    if entries:
        known = _find_known(entries)
        if isinstance(known, PairEntry):
            return build_error(
                KNOWN_ERROR_CODES[known.code],
                known.message,
                status_code=status_code,
                body=text,
            )
        if isinstance(known, BareEntry):
            return build_error(
                KNOWN_ERROR_CODES[known.code],
                known.code,
                status_code=status_code,
                body=text,
            )
        return ClientError(
            first if first is not None else f"Error code {status_code}",
            status_code=status_code,
            body=text,
        )

    if status_code > 399:
        message = " ".join(part for part in (f"Error code {status_code}", text) if part)
        return ClientError(message, status_code=status_code, body=text)

    return None


def raise_for_errors(status_code: int, body: str | bytes | None) -> None:
    error = classify(status_code, body)
    if error is not None:
        raise error


def _raise(error: ApiError) -> NoReturn:
    log.warning(
        "onesignal.request_failed",
        status_code=error.status_code,
        kind=error.kind.value,
        error=error.message,
    )
    raise error


def handle_errors(response: httpx.Response) -> httpx.Response:
    """Return ``response`` unchanged if it succeeded, else raise its ApiError."""
    error = classify(response.status_code, response.text or None)
    if error is not None:
        _raise(error)
    return response
