"""Generative Language API wrapper used by the cartoonize feature."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from ..auth.api_key import APIKeyAuth
from ..client import NetworkManager
from ..config import GenerativeConfig
from ..exceptions import ConfigurationError, DecodingError, NoDataError
from .base import ResourceBase

logger = logging.getLogger(__name__)

PING_PROMPT = "Say: pong (short)"
NO_TEXT = "(no text)"
IMAGE_ONLY_SUFFIX = " Return the output as an image only (no text)."
PROBE_PROMPT = "Stylize this photo into clean comic style." + IMAGE_ONLY_SUFFIX
IMAGE_MODALITIES = ("IMAGE", "TEXT")


class CartoonStyle(str, Enum):
    COMIC = "comic"
    MONO_SKETCH = "mono_sketch"
    NOIR = "noir"
    EDGE_WORK = "edge_work"


STYLE_PROMPTS: dict[CartoonStyle, str] = {
    CartoonStyle.COMIC: (
        "Convert the input photo into a clean comic/cartoon style with bold outlines "
        "and simplified shading."
    ),
    CartoonStyle.MONO_SKETCH: (
        "Convert the input photo into a monochrome sketch style with strong edges "
        "and pencil-like strokes."
    ),
    CartoonStyle.NOIR: (
        "Convert the input photo into a noir black-and-white high-contrast comic style."
    ),
    CartoonStyle.EDGE_WORK: (
        "Convert the input photo emphasizing edges with stylized line work."
    ),
}


@dataclass(slots=True)
class CartoonizeOptions:
    """Style selection for a cartoonize call; intensity is clamped to [0, 1]."""

    style: CartoonStyle = CartoonStyle.COMIC
    intensity: float = 0.7

    def __post_init__(self) -> None:
        self.style = CartoonStyle(self.style)
        self.intensity = max(0.0, min(1.0, float(self.intensity)))

    def prompt(self) -> str:
        strength = round(self.intensity * 100)
        return (
            f"{STYLE_PROMPTS[self.style]} Apply the effect at {strength}% strength."
            f"{IMAGE_ONLY_SUFFIX}"
        )


class InlineData(BaseModel):
    mime_type: str = Field(validation_alias=AliasChoices("mime_type", "mimeType"))
    data: str


class Part(BaseModel):
    text: str | None = None
    inline_data: InlineData | None = Field(
        default=None, validation_alias=AliasChoices("inline_data", "inlineData")
    )


class Content(BaseModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)


class Candidate(BaseModel):
    content: Content | None = None


class GenerateContentResponse(BaseModel):
    """Subset of the generateContent response needed to pull out text and images."""

    candidates: list[Candidate] = Field(default_factory=list)

    def parts(self) -> Iterator[Part]:
        for candidate in self.candidates:
            if candidate.content is not None:
                yield from candidate.content.parts

    def first_text(self) -> str | None:
        return next((part.text for part in self.parts() if part.text), None)

    def first_image(self) -> InlineData | None:
        return next(
            (
                part.inline_data
                for part in self.parts()
                if part.inline_data is not None and part.inline_data.mime_type.startswith("image/")
            ),
            None,
        )


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def inline_image_part(image: bytes, mime_type: str = "image/jpeg") -> dict[str, Any]:
    return {
        "inline_data": {
            "mime_type": mime_type,
            "data": base64.b64encode(image).decode("ascii"),
        }
    }


class GenerativeImageResource(ResourceBase):
    """Call ``models/{model}:generateContent`` for text pings and image stylization."""

    def __init__(self, config: GenerativeConfig, manager: NetworkManager | None = None) -> None:
        super().__init__(manager or NetworkManager(timeout=config.timeout))
        self.config = config

    def __enter__(self) -> GenerativeImageResource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._manager.close()

    def generate_content(
        self,
        parts: Sequence[dict[str, Any]],
        *,
        response_modalities: Sequence[str] | None = None,
        model: str | None = None,
    ) -> GenerateContentResponse:
        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": list(parts)}]}
        if response_modalities:
            payload["generationConfig"] = {"responseModalities": list(response_modalities)}
        target_model = model or self.config.model
        logger.debug("generateContent with %d part(s) on model %s", len(parts), target_model)
        return self._post_typed(
            GenerateContentResponse,
            self.config.model_url(target_model),
            payload,
        )

    def text_ping(self, prompt: str = PING_PROMPT) -> str:
        response = self.generate_content(
            [text_part(prompt)],
            model=self.config.text_model or self.config.model,
        )
        return response.first_text() or NO_TEXT

    def cartoonize(
        self,
        image: bytes,
        options: CartoonizeOptions | None = None,
        *,
        mime_type: str = "image/jpeg",
    ) -> bytes:
        """Return the stylized image bytes produced for ``image``."""

        if not image:
            raise ValueError("image must not be empty")
        options = options or CartoonizeOptions()
        response = self.generate_content(
            [text_part(options.prompt()), inline_image_part(image, mime_type)],
            response_modalities=IMAGE_MODALITIES,
        )
        blob = response.first_image()
        if blob is None:
            raise NoDataError("Response did not contain an image")
        try:
            return base64.b64decode(blob.data, validate=True)
        except binascii.Error as exc:
            raise DecodingError(exc) from exc

    def image_probe(self, image: bytes, *, mime_type: str = "image/jpeg") -> bool:
        """Report whether the model answers an image prompt with an image."""

        response = self.generate_content(
            [text_part(PROBE_PROMPT), inline_image_part(image, mime_type)],
            response_modalities=IMAGE_MODALITIES,
        )
        return response.first_image() is not None

    def _headers(self) -> dict[str, str]:
        if not self.config.api_key:
            raise ConfigurationError("Missing API key for the generative image API")
        return APIKeyAuth(self.config.api_key).headers()


__all__ = [
    "CartoonStyle",
    "CartoonizeOptions",
    "GenerateContentResponse",
    "GenerativeImageResource",
    "inline_image_part",
    "text_part",
]
