"""Request and response models shared across the network pipeline."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias

JSONValue: TypeAlias = (
    str | int | float | bool | None | list["JSONValue"] | dict[str, "JSONValue"]
)
Parameters: TypeAlias = Mapping[str, JSONValue]


class HTTPMethod(str, Enum):
    """Canonical HTTP methods understood by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value


def normalize_method(method: HTTPMethod | str) -> str:
    """Return the upper-case method name for an enum member or raw string."""

    if isinstance(method, HTTPMethod):
        return method.value
    name = str(method).strip().upper()
    if not name:
        raise ValueError("HTTP method must not be empty")
    return name


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Immutable description of a single outbound request."""

    url: str
    method: str = HTTPMethod.GET.value
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", normalize_method(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def replace(self, **changes: Any) -> RequestDescriptor:
        return dataclasses.replace(self, **changes)

    def with_headers(self, headers: Mapping[str, str]) -> RequestDescriptor:
        merged = dict(self.headers)
        merged.update(headers)
        return self.replace(headers=merged)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Undecoded response body together with its status metadata."""

    request: RequestDescriptor
    status_code: int
    headers: Mapping[str, str]
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str | None:
        """Body decoded as UTF-8, or ``None`` when the bytes are not valid UTF-8."""
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError:
            return None


__all__ = [
    "HTTPMethod",
    "JSONValue",
    "Parameters",
    "RawResponse",
    "RequestDescriptor",
    "normalize_method",
]
