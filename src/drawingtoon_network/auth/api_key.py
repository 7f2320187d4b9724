"""API key header authentication."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field

from .base import AuthStrategy

GOOGLE_API_KEY_HEADER = "x-goog-api-key"


@dataclass(slots=True)
class APIKeyAuth(AuthStrategy):
    """Send a static API key in a request header."""

    api_key: str = field(repr=False)
    header_name: str = GOOGLE_API_KEY_HEADER

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers[self.header_name] = self.api_key
