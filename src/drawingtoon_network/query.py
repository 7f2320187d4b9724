"""Query-string serialization for parameter mappings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from operator import itemgetter
from urllib.parse import quote, unquote_plus

from .http import JSONValue, Parameters

QueryPair = tuple[str, str]


def query_pairs(parameters: Parameters) -> list[QueryPair]:
    """Flatten parameters into ``(key, value)`` pairs sorted by key.

    Lists contribute one pair per element under the same key and nested
    mappings contribute ``key[sub]`` pairs per leaf value.
    """

    pairs: list[QueryPair] = []
    for key, value in parameters.items():
        _flatten(str(key), value, pairs)
    return sorted(pairs, key=itemgetter(0))


def encode_pairs(pairs: Iterable[QueryPair]) -> str:
    return "&".join(_encode_pair(key, value) for key, value in pairs)


def encode_query(parameters: Parameters) -> str:
    return encode_pairs(query_pairs(parameters))


def merge_query(existing: str, parameters: Parameters) -> str:
    """Merge parameters into an existing query string, sorting every pair by key.

    Existing segments are kept as written, so valueless keys such as
    ``flag`` and ``+``-encoded spaces survive the merge.
    """

    segments = [
        (unquote_plus(segment.split("=", 1)[0]), segment)
        for segment in existing.split("&")
        if segment
    ]
    segments.extend((key, _encode_pair(key, value)) for key, value in query_pairs(parameters))
    return "&".join(segment for _, segment in sorted(segments, key=itemgetter(0)))


def _encode_pair(key: str, value: str) -> str:
    return f"{quote(key, safe='[]')}={quote(value, safe='')}"


def _flatten(key: str, value: JSONValue, pairs: list[QueryPair]) -> None:
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _flatten(key, item, pairs)
    else:
        pairs.append((key, _scalar(value)))


def _scalar(value: JSONValue) -> str:
    if value is None:
        return ""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"Unsupported query parameter value of type {type(value).__name__}")


__all__ = ["encode_pairs", "encode_query", "merge_query", "query_pairs"]
