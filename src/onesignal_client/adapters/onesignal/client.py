from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel

from onesignal_client.adapters.onesignal.classify import handle_errors
from onesignal_client.adapters.onesignal.models import (
    APP_ID_FIELD,
    CsvExportRequest,
    NotificationsQuery,
)
from onesignal_client.adapters.onesignal.transport import OneSignalTransport

if TYPE_CHECKING:
    from onesignal_client.config.settings import Settings


class OneSignalClient:
    """
    Synchronous client for the OneSignal REST API.

    Every operation is one HTTP call followed by error classification; the raw
    `httpx.Response` is returned on success and an `ApiError` subclass is raised
    otherwise.
    """

    def __init__(
        self,
        app_id: str,
        api_key: str,
        api_url: str,
        *,
        timeout_seconds: float = 10.0,
        verify_tls: bool = True,
        trust_env: bool = False,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._app_id = app_id
        self._api_url = api_url
        self._transport = OneSignalTransport(
            base_url=api_url,
            app_id=app_id,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            verify_tls=verify_tls,
            trust_env=trust_env,
            http_client=http_client,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, http_client: httpx.Client | None = None
    ) -> OneSignalClient:
        onesignal = settings.onesignal
        return cls(
            onesignal.app_id,
            onesignal.api_key.get_secret_value(),
            str(onesignal.api_url),
            timeout_seconds=onesignal.timeout_seconds,
            verify_tls=onesignal.verify_tls,
            trust_env=settings.hardening.transport.trust_env,
            http_client=http_client,
        )

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def api_url(self) -> str:
        return self._api_url

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> OneSignalClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        self.close()

    def create_notification(self, notification: Mapping[str, Any] | BaseModel) -> httpx.Response:
        return self._post("notifications", notification)

    def fetch_notification(self, notification_id: str) -> httpx.Response:
        return self._get(f"notifications/{notification_id}")

    def fetch_notifications(
        self,
        page_limit: int | None = None,
        page_offset: int | None = None,
        kind: int | None = None,
    ) -> httpx.Response:
        query = NotificationsQuery().resolve(
            page_limit=page_limit, page_offset=page_offset, kind=kind
        )
        return self._get(query.path())

    def fetch_players(self) -> httpx.Response:
        return self._get("players")

    def fetch_player(self, player_id: str) -> httpx.Response:
        return self._get(f"players/{player_id}")

    def delete_player(self, player_id: str) -> httpx.Response:
        return self._delete(f"players/{player_id}")

    def csv_export(
        self,
        extra_fields: Sequence[str] | None = None,
        last_active_since: datetime | int | float | str | None = None,
        segment_name: str | None = None,
    ) -> httpx.Response:
        request = CsvExportRequest(
            extra_fields=extra_fields,
            last_active_since=last_active_since,
            segment_name=segment_name,
        )
        # OneSignal expects the app id in the query string here as well as in the body.
        return self._post(f"players/csv_export?{APP_ID_FIELD}={self._app_id}", request.payload())

    def _get(self, path: str) -> httpx.Response:
        return handle_errors(self._transport.get(path))

    def _post(self, path: str, payload: Mapping[str, Any] | BaseModel | None) -> httpx.Response:
        return handle_errors(self._transport.post(path, payload))

    def _delete(self, path: str) -> httpx.Response:
        return handle_errors(self._transport.delete(path))
