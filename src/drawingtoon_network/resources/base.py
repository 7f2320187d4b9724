"""Common helpers for resource wrappers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypeVar

from ..client import NetworkManager
from ..http import HTTPMethod

T = TypeVar("T")


class ResourceBase:
    """Provide shared helpers for resource modules."""

    def __init__(self, manager: NetworkManager) -> None:
        self._manager = manager

    def _headers(self) -> dict[str, str]:
        return {}

    def _post_typed(
        self,
        shape: type[T],
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> T:
        merged = self._headers()
        if headers:
            merged.update(headers)
        return self._manager.request_typed(
            shape,
            url,
            HTTPMethod.POST,
            body=json.dumps(payload).encode("utf-8"),
            headers=merged,
        )
