"""Redaction helpers that keep credentials out of log records."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "proxy-authorization",
        "set-cookie",
        "x-api-key",
        "x-goog-api-key",
    }
)

SENSITIVE_QUERY_KEYS = frozenset({"key", "api_key", "apikey", "access_token", "token"})

REDACTED_VALUE = "[REDACTED]"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with credential values replaced."""

    return {
        name: REDACTED_VALUE if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def redact_url(url: str) -> str:
    """Mask userinfo and credential-bearing query parameters in ``url``."""

    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{REDACTED_VALUE}@{netloc.rsplit('@', 1)[1]}"
    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        if any(key.lower() in SENSITIVE_QUERY_KEYS for key, _ in pairs):
            query = urlencode(
                [
                    (key, REDACTED_VALUE if key.lower() in SENSITIVE_QUERY_KEYS else value)
                    for key, value in pairs
                ],
                safe="[]",
            )
    return urlunsplit(parts._replace(netloc=netloc, query=query))


__all__ = ["REDACTED_VALUE", "redact_headers", "redact_url"]
