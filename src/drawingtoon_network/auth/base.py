"""Strategy interface for request credentials."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import MutableMapping


class AuthStrategy(ABC):
    """Adds credentials to the headers of an outbound request."""

    @abstractmethod
    def apply(self, headers: MutableMapping[str, str]) -> None:
        """Write the credential headers into ``headers``."""

    def headers(self) -> dict[str, str]:
        """Return the credential headers as a new mapping."""
        headers: dict[str, str] = {}
        self.apply(headers)
        return headers
