"""Configuration helpers for the network core."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_TIMEOUT = 30.0

DEFAULT_GENERATIVE_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash"


@dataclass(slots=True)
class ClientConfig:
    """Typed configuration for `NetworkManager`."""

    base_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool | str = True
    follow_redirects: bool = True
    default_headers: Mapping[str, str] | None = None

    def resolved_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": "application/json"}
        if self.default_headers:
            headers.update(self.default_headers)
        return headers


@dataclass(slots=True)
class GenerativeConfig:
    """Settings for the generative image API, supplied by the caller."""

    api_key: str
    model: str = DEFAULT_IMAGE_MODEL
    endpoint: str = DEFAULT_GENERATIVE_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    text_model: str | None = DEFAULT_TEXT_MODEL

    def model_url(self, model: str | None = None) -> str:
        return f"{self.endpoint.rstrip('/')}/models/{model or self.model}:generateContent"
