"""Response body decoders."""

from __future__ import annotations

import codecs
import json
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from .exceptions import DecodingError, NoDataError

T = TypeVar("T")

DEFAULT_TEXT_ENCODING = "utf-8"


def decode_typed(content: bytes, shape: type[T]) -> T:
    """Validate a JSON body against ``shape``.

    ``shape`` may be anything pydantic can adapt: models, dataclasses,
    TypedDicts or builtin containers. Validation is strict, so ``"1"`` does
    not satisfy an ``int`` field, while ISO-8601 strings still populate
    ``datetime`` and ``date`` fields.
    """

    if not content:
        raise NoDataError()
    adapter: TypeAdapter[T] = TypeAdapter(shape)
    try:
        return adapter.validate_json(content, strict=True)
    except ValidationError as exc:
        raise DecodingError(exc) from exc


def decode_json_object(content: bytes) -> dict[str, Any]:
    """Parse a body that must hold a JSON object at the top level."""

    if not content:
        raise NoDataError()
    try:
        payload = json.loads(content)
    except ValueError as exc:
        raise DecodingError(exc) from exc
    if not isinstance(payload, dict):
        raise DecodingError(
            f"Expected a JSON object at the top level, got {type(payload).__name__}"
        )
    return payload


def decode_string(content: bytes, encoding: str = DEFAULT_TEXT_ENCODING) -> str:
    try:
        codec = codecs.lookup(encoding)
    except LookupError as exc:
        raise DecodingError(exc) from exc
    try:
        text = codec.decode(content, "strict")[0]
    except ValueError as exc:
        raise DecodingError(exc) from exc
    if not isinstance(text, str):
        raise DecodingError(f"{encoding!r} is not a text encoding")
    return text


__all__ = ["DEFAULT_TEXT_ENCODING", "decode_json_object", "decode_string", "decode_typed"]
