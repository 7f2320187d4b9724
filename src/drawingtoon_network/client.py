"""High-level request facade for the Drawingtoon network core."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .auth.base import AuthStrategy
from .builder import build_request
from .config import DEFAULT_TIMEOUT, ClientConfig
from .decoding import DEFAULT_TEXT_ENCODING, decode_json_object, decode_string, decode_typed
from .encoding import ParameterEncoding, URLEncoding
from .http import HTTPMethod, Parameters, RawResponse, RequestDescriptor
from .redact import redact_headers, redact_url
from .status import ensure_success
from .transport import CancellationToken, Transport
from .urls import URLConvertible, is_absolute, join_url, resolve_url

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NetworkManager:
    """Build, send, classify and decode HTTP requests.

    Managers are constructed and owned by the caller; nothing is cached
    between calls apart from the configuration and the underlying session.
    Parameters go into the query string for every method unless another
    ``parameter_encoding`` is supplied.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        auth_strategy: AuthStrategy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool | str = True,
        follow_redirects: bool = True,
        default_headers: Mapping[str, str] | None = None,
        parameter_encoding: ParameterEncoding | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if base_url is not None:
            base_url = resolve_url(base_url).rstrip("/")
        self.config = ClientConfig(
            base_url=base_url,
            timeout=timeout,
            verify_ssl=verify_ssl,
            follow_redirects=follow_redirects,
            default_headers=default_headers,
        )
        self._suppress_insecure_warning_if_needed()
        self._auth = auth_strategy
        self.parameter_encoding = parameter_encoding or URLEncoding.query_string()
        self._transport = Transport(
            session,
            verify=verify_ssl,
            follow_redirects=follow_redirects,
        )

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> NetworkManager:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Public API --------------------------------------------------------------
    def build(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestDescriptor:
        """Return the request descriptor a call with these arguments would send."""

        return build_request(
            self._resolve_target(url),
            method,
            parameters=parameters,
            headers=self._prepare_headers(headers),
            body=body,
            encoding=self.parameter_encoding,
        )

    def request_raw(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> RawResponse:
        request = self.build(url, method, parameters=parameters, body=body, headers=headers)
        self._log_request(request)
        response = self._transport.execute(
            request,
            timeout=self.config.timeout,
            cancel_token=cancel_token,
        )
        ensure_success(response.status_code, response.content)
        return RawResponse(
            request=request,
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
        )

    def request_typed(
        self,
        shape: type[T],
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> T:
        raw = self.request_raw(
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
            cancel_token=cancel_token,
        )
        return decode_typed(raw.content, shape)

    def request_json(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        raw = self.request_raw(
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
            cancel_token=cancel_token,
        )
        return decode_json_object(raw.content)

    def request_string(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        encoding: str = DEFAULT_TEXT_ENCODING,
        cancel_token: CancellationToken | None = None,
    ) -> str:
        raw = self.request_raw(
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
            cancel_token=cancel_token,
        )
        return decode_string(raw.content, encoding)

    def close(self) -> None:
        self._transport.close()

    # Internal helpers -------------------------------------------------------
    def _resolve_target(self, url: URLConvertible) -> URLConvertible:
        if isinstance(url, str) and self.config.base_url and url and not is_absolute(url):
            return join_url(self.config.base_url, url)
        return url

    def _prepare_headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        merged = self.config.resolved_headers()
        if self._auth is not None:
            self._auth.apply(merged)
        if headers:
            merged.update(headers)
        return merged

    def _log_request(self, request: RequestDescriptor) -> None:
        logger.info("Network request %s %s", request.method, redact_url(request.url))
        logger.debug("Request headers: %s", redact_headers(request.headers))

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)


class AsyncNetworkManager:
    """Coroutine facade over :class:`NetworkManager`.

    Each call runs the blocking pipeline in a worker thread. Cancelling the
    awaiting task trips the call's :class:`CancellationToken`, which aborts
    the pending transfer once its response head has arrived, and
    ``asyncio.CancelledError`` propagates to the caller.
    """

    def __init__(self, manager: NetworkManager | None = None, **kwargs: Any) -> None:
        if manager is not None and kwargs:
            raise TypeError("Pass either an existing manager or constructor options, not both")
        self.manager = manager or NetworkManager(**kwargs)

    async def __aenter__(self) -> AsyncNetworkManager:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def request_raw(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        return await self._run(
            self.manager.request_raw,
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
        )

    async def request_typed(
        self,
        shape: type[T],
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> T:
        return await self._run(
            self.manager.request_typed,
            shape,
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
        )

    async def request_json(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._run(
            self.manager.request_json,
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
        )

    async def request_string(
        self,
        url: URLConvertible,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        parameters: Parameters | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        encoding: str = DEFAULT_TEXT_ENCODING,
    ) -> str:
        return await self._run(
            self.manager.request_string,
            url,
            method,
            parameters=parameters,
            body=body,
            headers=headers,
            encoding=encoding,
        )

    def close(self) -> None:
        self.manager.close()

    @staticmethod
    async def _run(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        token = CancellationToken()
        try:
            return await asyncio.to_thread(func, *args, cancel_token=token, **kwargs)
        except asyncio.CancelledError:
            token.cancel()
            raise
