"""Human-readable duration parsing for cache TTLs.

Accepts the same forms as the ``ms`` package used by many JavaScript
tools: a bare number of milliseconds (``"1500"``), or a number followed by
a unit (``"90s"``, ``"5m"``, ``"1.5 hours"``, ``"2d"``). Unit names are
case-insensitive and may be abbreviated or spelled out.

A TTL that cannot be parsed becomes ``0``, which the caching client treats
as "caching disabled". Parsing never raises.
"""

from __future__ import annotations

import re
from typing import Any

_SECOND = 1000
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24
_WEEK = _DAY * 7
_YEAR = _DAY * 365.25

_UNITS: dict[str, float] = {
    "years": _YEAR, "year": _YEAR, "yrs": _YEAR, "yr": _YEAR, "y": _YEAR,
    "weeks": _WEEK, "week": _WEEK, "w": _WEEK,
    "days": _DAY, "day": _DAY, "d": _DAY,
    "hours": _HOUR, "hour": _HOUR, "hrs": _HOUR, "hr": _HOUR, "h": _HOUR,
    "minutes": _MINUTE, "minute": _MINUTE, "mins": _MINUTE, "min": _MINUTE, "m": _MINUTE,
    "seconds": _SECOND, "second": _SECOND, "secs": _SECOND, "sec": _SECOND, "s": _SECOND,
    "milliseconds": 1, "millisecond": 1, "msecs": 1, "msec": 1, "ms": 1,
}

_DURATION_RE = re.compile(
    r"^(?P<value>-?\d*\.?\d+) *(?P<unit>[a-z]+)?$",
    re.IGNORECASE,
)

# Longer strings are rejected outright.
_MAX_LENGTH = 100


def parse_duration(text: str) -> float | None:
    """Parse a duration string into milliseconds.

    Args:
        text: A duration such as ``"5m"``, ``"10 seconds"`` or ``"250"``.

    Returns:
        The duration in milliseconds, or ``None`` if *text* is not a
        recognised duration.

    Example::

        >>> parse_duration("5m")
        300000.0
        >>> parse_duration("soon") is None
        True
    """
    text = text.strip()
    if not text or len(text) > _MAX_LENGTH:
        return None
    match = _DURATION_RE.match(text)
    if match is None:
        return None

    unit = (match.group("unit") or "ms").lower()
    factor = _UNITS.get(unit)
    if factor is None:
        return None
    return float(match.group("value")) * factor


def parse_ttl(ttl: Any) -> float:
    """Normalise a TTL given as milliseconds or as a duration string.

    Numbers pass through unchanged. Strings go through
    :func:`parse_duration`; anything unparsable, and any other type,
    yields ``0``.

    Args:
        ttl: Milliseconds (``int`` / ``float``) or a duration string.

    Returns:
        The TTL in milliseconds. ``0`` or less means caching is disabled.
    """
    if isinstance(ttl, bool):
        return 0
    if isinstance(ttl, (int, float)):
        return ttl
    if isinstance(ttl, str):
        return parse_duration(ttl) or 0
    return 0
