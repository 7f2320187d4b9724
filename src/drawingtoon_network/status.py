"""Status-code classification into the typed error taxonomy."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from .exceptions import (
    ClientError,
    HTTPStatusError,
    RedirectionError,
    ServerError,
    UnknownHTTPError,
)


class HTTPStatusCategory(str, Enum):
    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


STATUS_MESSAGES: Mapping[int, str] = {
    400: "bad request",
    401: "authentication required",
    403: "access forbidden",
    404: "resource not found",
    405: "method not allowed",
    408: "request timeout",
    429: "too many requests",
    500: "internal server error",
    502: "bad gateway",
    503: "service unavailable",
    504: "gateway timeout",
}

_ERRORS_BY_CATEGORY: Mapping[HTTPStatusCategory, type[HTTPStatusError]] = {
    HTTPStatusCategory.REDIRECTION: RedirectionError,
    HTTPStatusCategory.CLIENT_ERROR: ClientError,
    HTTPStatusCategory.SERVER_ERROR: ServerError,
    HTTPStatusCategory.UNKNOWN: UnknownHTTPError,
}


def status_category(status_code: int) -> HTTPStatusCategory:
    if 100 <= status_code < 200:
        return HTTPStatusCategory.INFORMATIONAL
    if 200 <= status_code < 300:
        return HTTPStatusCategory.SUCCESS
    if 300 <= status_code < 400:
        return HTTPStatusCategory.REDIRECTION
    if 400 <= status_code < 500:
        return HTTPStatusCategory.CLIENT_ERROR
    if 500 <= status_code < 600:
        return HTTPStatusCategory.SERVER_ERROR
    return HTTPStatusCategory.UNKNOWN


def body_text(body: bytes | None) -> str | None:
    """Decode a body as UTF-8, returning ``None`` when absent or undecodable."""

    if body is None:
        return None
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return None


def classify(status_code: int, body: bytes | None = None) -> HTTPStatusError | None:
    """Return the error for a failing status, or ``None`` for 1xx and 2xx."""

    category = status_category(status_code)
    error_type = _ERRORS_BY_CATEGORY.get(category)
    if error_type is None:
        return None
    return error_type(
        status_code,
        body_text(body) or None,
        fallback_message=STATUS_MESSAGES.get(status_code),
    )


def ensure_success(status_code: int, body: bytes | None = None) -> None:
    """Raise the classified error if ``status_code`` signals a failure."""

    error = classify(status_code, body)
    if error is not None:
        raise error


__all__ = [
    "HTTPStatusCategory",
    "STATUS_MESSAGES",
    "body_text",
    "classify",
    "ensure_success",
    "status_category",
]
