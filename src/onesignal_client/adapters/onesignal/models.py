from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from pydantic import BaseModel

APP_ID_FIELD = "app_id"

DEFAULT_PAGE_LIMIT = 50
DEFAULT_PAGE_OFFSET = 0


@dataclass(frozen=True, slots=True)
class NotificationsQuery:
    page_limit: int = DEFAULT_PAGE_LIMIT
    page_offset: int = DEFAULT_PAGE_OFFSET
    kind: int | None = None

    def resolve(
        self,
        *,
        page_limit: int | None = None,
        page_offset: int | None = None,
        kind: int | None = None,
    ) -> NotificationsQuery:
        """Apply call-site overrides; None keeps the current value."""
        return replace(
            self,
            page_limit=self.page_limit if page_limit is None else page_limit,
            page_offset=self.page_offset if page_offset is None else page_offset,
            kind=self.kind if kind is None else kind,
        )

    def path(self) -> str:
        url = f"notifications?limit={self.page_limit}&offset={self.page_offset}"
        if self.kind is not None:
            url = f"{url}&kind={self.kind}"
        return url


def epoch_seconds(value: datetime | int | float | str) -> str:
    """Render a point in time as whole epoch seconds, e.g. '1700000000'."""
    if isinstance(value, datetime):
        return str(int(value.timestamp()))
    if isinstance(value, str):
        return str(int(float(value.strip())))
    return str(int(value))


@dataclass(frozen=True, slots=True)
class CsvExportRequest:
    extra_fields: Sequence[str] | None = None
    last_active_since: datetime | int | float | str | None = None
    segment_name: str | None = None

    def payload(self) -> dict[str, Any]:
        return {
            "extra_fields": list(self.extra_fields) if self.extra_fields is not None else None,
            "last_active_since": (
                epoch_seconds(self.last_active_since)
                if self.last_active_since is not None
                else None
            ),
            "segment_name": self.segment_name,
        }


def build_body(payload: Mapping[str, Any] | BaseModel | None, app_id: str) -> dict[str, Any]:
    """
    Returns the JSON body for a POST: None-valued fields dropped, `app_id` set.

    A caller-supplied `app_id` is overwritten so the field appears exactly once.
    """
    if payload is None:
        data: Mapping[str, Any] = {}
    elif isinstance(payload, BaseModel):
        data = payload.model_dump(mode="json", by_alias=True)
    else:
        data = payload

    body = {str(key): value for key, value in data.items() if value is not None}
    body[APP_ID_FIELD] = app_id
    return body
