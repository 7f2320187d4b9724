"""HTTP Basic credentials."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field

from requests.auth import _basic_auth_str

from .base import AuthStrategy


@dataclass(slots=True)
class BasicAuth(AuthStrategy):
    """Send ``Authorization: Basic`` built from a username and password."""

    username: str
    password: str = field(repr=False)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers["Authorization"] = _basic_auth_str(self.username, self.password)
