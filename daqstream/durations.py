"""Parsing of durations written as an unsigned count followed by a time unit."""

from __future__ import annotations

import re

_PATTERN = re.compile(r"\s*\+?(\d+)\s*(\S+)")

_NANOSECONDS_PER_UNIT = {
    "s": 1_000_000_000,
    "ms": 1_000_000,
    "\u00b5s": 1_000,
    "ns": 1,
}


def duration_from_string(text: str, default: int) -> int:
    """Return the duration in nanoseconds described by ``text``.

    ``text`` holds an unsigned integer and one of the units s, ms, µs or ns.
    ``default`` is returned when the text can not be read or the unit is unknown.
    """
    match = _PATTERN.match(text)
    if match is None:
        return default
    scale = _NANOSECONDS_PER_UNIT.get(match.group(2))
    if scale is None:
        return default
    return int(match.group(1)) * scale