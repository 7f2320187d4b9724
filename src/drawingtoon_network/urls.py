"""Resolve URL-like values into validated absolute URLs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias
from urllib.parse import SplitResult, quote, urljoin, urlsplit, urlunsplit

from .exceptions import InvalidURLError
from .http import JSONValue
from .query import encode_query

DEFAULT_PORTS: Mapping[str, int] = {"http": 80, "https": 443}
LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})
LOCAL_DEFAULT_PORT = 8080

_PATH_SAFE = "/%:@!$&'()*+,;="


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Structured description of a target URL."""

    host: str
    path: str = "/"
    scheme: str = "https"
    port: int | None = None
    query: Mapping[str, JSONValue] | None = None

    def resolved_port(self) -> int:
        if self.port is not None:
            return self.port
        if self.host.strip().lower() in LOCAL_HOSTS:
            return LOCAL_DEFAULT_PORT
        return DEFAULT_PORTS.get(self.scheme.lower(), DEFAULT_PORTS["https"])

    def components(self) -> SplitResult:
        scheme = self.scheme.lower()
        if scheme not in DEFAULT_PORTS:
            raise InvalidURLError(self, f"unsupported scheme {self.scheme!r}")
        host = self.host.strip()
        if not host:
            raise InvalidURLError(self, "missing host")
        port = self.resolved_port()
        if not 0 < port < 65536:
            raise InvalidURLError(self, f"port {port} out of range")
        host_part = f"[{host}]" if ":" in host else host
        netloc = host_part if port == DEFAULT_PORTS[scheme] else f"{host_part}:{port}"
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        try:
            query = encode_query(self.query) if self.query else ""
        except TypeError as exc:
            raise InvalidURLError(self, str(exc)) from exc
        return SplitResult(scheme, netloc, quote(path, safe=_PATH_SAFE), query, "")


URLConvertible: TypeAlias = str | Endpoint | SplitResult


def resolve_url(value: URLConvertible) -> str:
    """Return a validated absolute URL for a string, ``Endpoint`` or ``SplitResult``.

    Valid absolute strings come back unchanged.
    """

    if isinstance(value, Endpoint):
        return _validate(urlunsplit(value.components()), value)
    if isinstance(value, SplitResult):
        return _validate(urlunsplit(value), value)
    if isinstance(value, str):
        return _validate(value, value)
    raise InvalidURLError(value, f"unsupported URL type {type(value).__name__}")


def is_absolute(url: str) -> bool:
    parsed = urlsplit(url)
    return bool(parsed.scheme and parsed.netloc)


def join_url(base_url: str, path: str) -> str:
    """Join a relative path onto a base URL, keeping the base path prefix."""

    if is_absolute(path):
        return path
    return urljoin(f"{base_url.rstrip('/')}/", path.lstrip("/"))


def _validate(url: str, original: object) -> str:
    if not url or not url.strip():
        raise InvalidURLError(original, "empty URL")
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise InvalidURLError(original, "contains whitespace or control characters")
    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018 - raises ValueError for a malformed port
    except ValueError as exc:
        raise InvalidURLError(original, str(exc)) from exc
    if parts.scheme.lower() not in DEFAULT_PORTS:
        raise InvalidURLError(original, "URL must be absolute http(s)")
    if not parts.hostname:
        raise InvalidURLError(original, "missing host")
    return url


__all__ = [
    "DEFAULT_PORTS",
    "Endpoint",
    "LOCAL_DEFAULT_PORT",
    "URLConvertible",
    "is_absolute",
    "join_url",
    "resolve_url",
]
