"""Parameter encoding strategies."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from urllib.parse import SplitResult, urlsplit, urlunsplit

from .exceptions import ParameterEncodingError
from .http import Parameters, RequestDescriptor
from .query import merge_query
from .redact import redact_url

logger = logging.getLogger(__name__)

QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE"})


class ParameterEncoding(ABC):
    """Interface each parameter encoding strategy must implement."""

    @abstractmethod
    def encode(
        self, request: RequestDescriptor, parameters: Parameters | None
    ) -> RequestDescriptor:
        """Return a new request with ``parameters`` applied."""


class URLEncoding(ParameterEncoding):
    """Encode parameters into the URL query string.

    With the default ``method_dependent`` destination only GET, HEAD and
    DELETE requests receive the parameters; other methods are returned
    untouched, since their parameters belong in a body encoded by
    :class:`JSONEncoding`. The ``query_string`` destination always uses the
    query string.
    """

    METHOD_DEPENDENT = "method_dependent"
    QUERY_STRING = "query_string"

    def __init__(self, destination: str = METHOD_DEPENDENT) -> None:
        if destination not in {self.METHOD_DEPENDENT, self.QUERY_STRING}:
            raise ValueError(f"Unknown URL encoding destination: {destination!r}")
        self.destination = destination

    @classmethod
    def query_string(cls) -> URLEncoding:
        return cls(cls.QUERY_STRING)

    def encode(
        self, request: RequestDescriptor, parameters: Parameters | None
    ) -> RequestDescriptor:
        parts = _split_request_url(request)
        if not parameters:
            return request
        if self.destination == self.METHOD_DEPENDENT and request.method not in QUERY_METHODS:
            logger.warning(
                "Query parameters ignored for %s %s; use JSONEncoding to send them as a body",
                request.method,
                redact_url(request.url),
            )
            return request
        try:
            query = merge_query(parts.query, parameters)
        except TypeError as exc:
            raise ParameterEncodingError(str(exc)) from exc
        return request.replace(url=urlunsplit(parts._replace(query=query)))

    def __repr__(self) -> str:
        return f"URLEncoding(destination={self.destination!r})"


class JSONEncoding(ParameterEncoding):
    """Encode parameters as a JSON request body."""

    def __init__(self, *, sort_keys: bool = False) -> None:
        self.sort_keys = sort_keys

    def encode(
        self, request: RequestDescriptor, parameters: Parameters | None
    ) -> RequestDescriptor:
        _split_request_url(request)
        if parameters is None:
            return request
        if request.body is not None:
            raise ParameterEncodingError(
                "Request already carries a body; parameters cannot also be encoded into it"
            )
        try:
            body = json.dumps(
                parameters, sort_keys=self.sort_keys, separators=(",", ":")
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise ParameterEncodingError(f"Parameters are not JSON encodable: {exc}") from exc
        headers = dict(request.headers)
        if not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = "application/json"
        return request.replace(body=body, headers=headers)

    def __repr__(self) -> str:
        return f"JSONEncoding(sort_keys={self.sort_keys!r})"


def _split_request_url(request: RequestDescriptor) -> SplitResult:
    if not request.url:
        raise ParameterEncodingError("Request has no URL to encode parameters into")
    try:
        parts = urlsplit(request.url)
    except ValueError as exc:
        raise ParameterEncodingError(f"Request URL cannot be parsed: {exc}") from exc
    if not (parts.scheme and parts.netloc):
        raise ParameterEncodingError(f"Request URL is not absolute: {request.url!r}")
    return parts


__all__ = ["JSONEncoding", "ParameterEncoding", "QUERY_METHODS", "URLEncoding"]
