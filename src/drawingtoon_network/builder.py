"""Compose resolved URLs, headers and parameters into request descriptors."""

from __future__ import annotations

from collections.abc import Mapping

from .encoding import ParameterEncoding, URLEncoding
from .http import HTTPMethod, Parameters, RequestDescriptor, normalize_method
from .urls import URLConvertible, resolve_url

JSON_MEDIA_TYPE = "application/json"


def default_headers(*, has_body: bool) -> dict[str, str]:
    headers = {"Accept": JSON_MEDIA_TYPE}
    if has_body:
        headers["Content-Type"] = JSON_MEDIA_TYPE
    return headers


def build_request(
    url: URLConvertible,
    method: HTTPMethod | str = HTTPMethod.GET,
    *,
    parameters: Parameters | None = None,
    headers: Mapping[str, str] | None = None,
    body: bytes | None = None,
    encoding: ParameterEncoding | None = None,
) -> RequestDescriptor:
    """Build an immutable request.

    Defaults are ``Accept: application/json`` and, when ``body`` is given,
    ``Content-Type: application/json``. Caller headers are applied on top of
    the defaults, so they win for identical keys. Parameters go through
    ``encoding`` (``URLEncoding()`` when omitted).
    """

    resolved = resolve_url(url)
    merged = default_headers(has_body=body is not None)
    if headers:
        merged.update(headers)
    request = RequestDescriptor(
        url=resolved,
        method=normalize_method(method),
        headers=merged,
        body=body,
    )
    if parameters is None:
        return request
    strategy = encoding or URLEncoding()
    return strategy.encode(request, parameters)


__all__ = ["JSON_MEDIA_TYPE", "build_request", "default_headers"]
