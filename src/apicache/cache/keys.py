"""Cache key derivation.

A cache key is a URL query string built from the caller's discriminators
followed by ``method`` and ``url``::

    >>> derive_cache_key("GET", "/upload?page=1", {"user": 7})
    'user=7&method=GET&url=/upload?page=1'

Discriminators are sorted by name so that two dicts holding the same pairs
in a different order produce the same key. ``method`` and ``url`` always
come last and always win over discriminators of the same name.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

# Only the url value keeps these readable; "&" is still escaped there.
_URL_SAFE_CHARS = "/?=:"


def _stringify(value: Any) -> str:
    """Render a discriminator value the way a query string would carry it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def derive_cache_key(
    method: str,
    url: str,
    discriminators: Optional[Mapping[str, Any]] = None,
) -> str:
    """Build the cache key for a request.

    Args:
        method: HTTP method, upper-cased in the key.
        url: The request URL, query string included.
        discriminators: Extra caller-supplied pairs that split the cache.

    Returns:
        A deterministic query-string key.
    """
    pairs = [
        f"{quote_plus(name, safe='')}={quote_plus(_stringify(value), safe='')}"
        for name, value in sorted((discriminators or {}).items())
        if name not in ("method", "url")
    ]
    pairs.append(f"method={quote_plus(method.upper(), safe='')}")
    pairs.append(f"url={quote_plus(url, safe=_URL_SAFE_CHARS)}")
    return "&".join(pairs)
