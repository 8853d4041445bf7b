from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Closed set of failure kinds a OneSignal call can surface."""

    API = "api"
    SERVER = "server"
    CLIENT = "client"
    API_RATE_LIMIT = "api_rate_limit"
    INVALID_EXTERNAL_USER_IDS = "invalid_external_user_ids"
    INVALID_PLAYER_IDS = "invalid_player_ids"
    TAGS_LIMIT = "tags_limit"


class ApiError(Exception):
    """Base class for OneSignal API errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.API

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class ServerError(ApiError):
    """OneSignal answered with HTTP 5xx."""

    kind = ErrorKind.SERVER


class ClientError(ApiError):
    """Request rejected by OneSignal (HTTP 4xx or an `errors` payload)."""

    kind = ErrorKind.CLIENT


class ApiRateLimitError(ClientError):
    kind = ErrorKind.API_RATE_LIMIT


class InvalidExternalUserIdsError(ClientError):
    kind = ErrorKind.INVALID_EXTERNAL_USER_IDS


class InvalidPlayerIdsError(ClientError):
    kind = ErrorKind.INVALID_PLAYER_IDS


class TagsLimitError(ClientError):
    # No error code maps here yet; only raised when constructed directly.
    kind = ErrorKind.TAGS_LIMIT


_ERROR_CLASSES: dict[ErrorKind, type[ApiError]] = {
    cls.kind: cls
    for cls in (
        ApiError,
        ServerError,
        ClientError,
        ApiRateLimitError,
        InvalidExternalUserIdsError,
        InvalidPlayerIdsError,
        TagsLimitError,
    )
}

# Error codes (or literal messages) OneSignal puts in the `errors` field.
KNOWN_ERROR_CODES: dict[str, ErrorKind] = {
    "API rate limit exceeded": ErrorKind.API_RATE_LIMIT,
    "invalid_external_user_ids": ErrorKind.INVALID_EXTERNAL_USER_IDS,
    "invalid_player_ids": ErrorKind.INVALID_PLAYER_IDS,
}


def error_class_for(kind: ErrorKind) -> type[ApiError]:
    return _ERROR_CLASSES[ErrorKind(kind)]


def build_error(
    kind: ErrorKind,
    message: str,
    *,
    status_code: int | None = None,
    body: str | None = None,
) -> ApiError:
    return error_class_for(kind)(message, status_code=status_code, body=body)
