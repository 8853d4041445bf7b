from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

import httpx
import structlog
from pydantic import BaseModel

from onesignal_client.adapters.http_util import timeouts_for
from onesignal_client.adapters.onesignal.models import APP_ID_FIELD, build_body

log = structlog.get_logger(__name__)

_JSON_CONTENT_TYPE = "application/json"


class OneSignalTransport:
    """
    Performs single HTTP calls against the OneSignal REST API.

    Responses are returned as-is; status handling happens in the classifier.
    There are no retries: one method call is exactly one outbound request.
    """

    def __init__(
        self,
        *,
        base_url: str,
        app_id: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        verify_tls: bool = True,
        trust_env: bool = False,
        http_client: httpx.Client | None = None,
    ) -> None:
        url = httpx.URL(base_url)
        if not url.scheme or not url.host:
            raise ValueError("base_url must include scheme and host, e.g. https://onesignal.com/api/v1")

        # Ensure a trailing slash so relative paths join under the API prefix.
        base_path = url.path.rstrip("/") + "/"
        self._base_url = url.copy_with(path=base_path)
        self._app_id = app_id
        self._auth_headers = {"Authorization": f"Basic {api_key}"}

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(
            timeout=timeouts_for(timeout_seconds),
            verify=verify_tls,
            trust_env=trust_env,
            follow_redirects=False,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> OneSignalTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        self.close()

    def get(self, path: str) -> httpx.Response:
        return self._request(
            "GET",
            path,
            params={APP_ID_FIELD: self._app_id},
            headers={"Content-Type": _JSON_CONTENT_TYPE},
        )

    def delete(self, path: str) -> httpx.Response:
        return self._request("DELETE", path, params={APP_ID_FIELD: self._app_id})

    def post(self, path: str, payload: Mapping[str, Any] | BaseModel | None) -> httpx.Response:
        return self._request(
            "POST",
            path,
            json=build_body(payload, self._app_id),
            headers={"Content-Type": _JSON_CONTENT_TYPE},
        )

    def _request(
        self,
        method: Literal["GET", "POST", "DELETE"],
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        # httpx replaces an existing query string when `params=` is given; merge by hand.
        url = self._base_url.join(path)
        if params:
            url = url.copy_merge_params(params)
        response = self._http.request(
            method,
            url,
            json=json,
            headers={**self._auth_headers, **(headers or {})},
        )
        log.debug(
            "onesignal.request",
            method=method,
            path=path.split("?", 1)[0],
            status_code=response.status_code,
        )
        return response
