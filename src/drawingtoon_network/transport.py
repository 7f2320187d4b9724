"""Blocking HTTP transport built on a requests session."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass

import requests
from requests.structures import CaseInsensitiveDict
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from .exceptions import RequestCancelled, TransportError, TransportTimeoutError
from .http import RequestDescriptor
from .redact import redact_url

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class CancellationToken:
    """Thread-safe flag used to abort a pending request.

    Callbacks registered with :meth:`add_callback` run once, on the thread
    that calls :meth:`cancel`.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelled()

    def add_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Bytes and status metadata produced by one network round trip."""

    status_code: int
    headers: Mapping[str, str]
    content: bytes


class Transport:
    """Execute request descriptors over a ``requests.Session``.

    No retries are attempted; every failure that prevents an HTTP response
    from arriving surfaces as :class:`TransportError`.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        verify: bool | str = True,
        follow_redirects: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._session = session or requests.Session()
        self.verify = verify
        self.follow_redirects = follow_redirects
        self.chunk_size = chunk_size

    def execute(
        self,
        request: RequestDescriptor,
        *,
        timeout: float | None,
        cancel_token: CancellationToken | None = None,
    ) -> TransportResponse:
        """Send ``request`` and read the whole body.

        ``cancel_token`` is checked before dispatch, once the response head
        arrives, and between body chunks; cancelling closes the streamed
        response. requests offers no way to abort a connection that is still
        waiting for the response head, so a cancel in that window takes effect
        when the head arrives or ``timeout`` expires, whichever comes first.
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        try:
            response = self._session.request(
                method=request.method,
                url=request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=timeout,
                verify=self.verify,
                allow_redirects=self.follow_redirects,
                stream=True,
            )
        except requests.Timeout as exc:
            raise TransportTimeoutError(
                f"Request to {redact_url(request.url)} timed out after {timeout}s",
                details=_reason(exc),
            ) from exc
        except requests.RequestException as exc:
            reason = _reason(exc)
            raise TransportError(
                f"Failed to communicate with {redact_url(request.url)}: {reason}",
                details=reason,
            ) from exc

        try:
            content = self._read_body(response, request, cancel_token)
        finally:
            response.close()
        logger.debug(
            "Received %s from %s (%d bytes)",
            response.status_code,
            redact_url(request.url),
            len(content),
        )
        return TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            content=content,
        )

    def close(self) -> None:
        self._session.close()

    def _read_body(
        self,
        response: requests.Response,
        request: RequestDescriptor,
        cancel_token: CancellationToken | None,
    ) -> bytes:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
            cancel_token.add_callback(response.close)
        chunks: list[bytes] = []
        try:
            for chunk in response.iter_content(self.chunk_size):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                chunks.append(chunk)
        except (requests.RequestException, Urllib3HTTPError, OSError, ValueError) as exc:
            # closing the response from another thread breaks the read
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            if isinstance(exc, requests.Timeout):
                raise TransportTimeoutError(
                    f"Reading response from {redact_url(request.url)} timed out",
                    details=_reason(exc),
                ) from exc
            reason = _reason(exc)
            raise TransportError(
                f"Failed to read response from {redact_url(request.url)}: {reason}",
                details=reason,
            ) from exc
        finally:
            if cancel_token is not None:
                cancel_token.remove_callback(response.close)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return b"".join(chunks)


def _reason(exc: BaseException) -> str:
    return str(exc).strip() or exc.__class__.__name__


__all__ = ["CancellationToken", "Transport", "TransportResponse"]
