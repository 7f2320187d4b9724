"""Custom exception hierarchy for the Drawingtoon network core."""
from __future__ import annotations

from typing import Any, ClassVar


class DrawingtoonNetworkError(RuntimeError):
    """Base error for every failure raised by the network core."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    def describe(self) -> str:
        """Return a human-readable message suitable for end users."""
        return str(self)


class ConfigurationError(DrawingtoonNetworkError):
    """Raised when a required configuration value is missing or unusable."""


class NetworkError(DrawingtoonNetworkError):
    """Raised while building a request or interpreting its response."""


class InvalidURLError(NetworkError):
    """Raised when a URL-like value cannot be resolved to an absolute URL."""

    def __init__(self, url: Any, reason: str | None = None) -> None:
        message = f"Invalid URL: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, details=reason)
        self.url = url


class DecodingError(NetworkError):
    """Raised when a response body cannot be decoded into the requested shape."""

    def __init__(self, cause: BaseException | str, *, message: str | None = None) -> None:
        reason = str(cause) or cause.__class__.__name__
        super().__init__(message or f"Failed to decode response: {reason}", details=reason)
        self.cause = cause


class NoDataError(DecodingError):
    """Raised when a response carried no body where one was required."""

    def __init__(self, message: str = "Response contained no data") -> None:
        super().__init__(message, message=message)


class ParameterEncodingError(NetworkError):
    """Raised when parameters cannot be merged into a request."""


class HTTPStatusError(NetworkError):
    """Base for errors derived from a non-successful status code."""

    label: ClassVar[str] = "HTTP error"
    default_message: ClassVar[str] = "unknown error"

    def __init__(
        self,
        status_code: int,
        body: str | None = None,
        *,
        fallback_message: str | None = None,
    ) -> None:
        self.body = body
        self.message = body if body else (fallback_message or self.default_message)
        super().__init__(
            f"{self.label} ({status_code}): {self.message}",
            status_code=status_code,
            details=body,
        )


class InformationalError(HTTPStatusError):
    """Status in [100, 200) surfaced as an error."""

    label = "Informational response"
    default_message = "unexpected informational response"


class RedirectionError(HTTPStatusError):
    """Status in [300, 400)."""

    label = "Redirection error"
    default_message = "redirection required"


class ClientError(HTTPStatusError):
    """Status in [400, 500)."""

    label = "Client error"
    default_message = "client error"


class ServerError(HTTPStatusError):
    """Status in [500, 600)."""

    label = "Server error"
    default_message = "server error"


class UnknownHTTPError(HTTPStatusError):
    """Status outside every known range."""

    label = "Unknown HTTP error"


class TransportError(DrawingtoonNetworkError):
    """Raised when a request never produced an HTTP response."""


class TransportTimeoutError(TransportError):
    """Raised when the transport gave up waiting for the server."""


class RequestCancelled(DrawingtoonNetworkError):
    """Raised when the caller cancelled a request before it completed."""

    def __init__(self, message: str = "Request was cancelled") -> None:
        super().__init__(message)
