"""Utilities to normalize user-entered time and quantity text."""

from __future__ import annotations

import math
import re
from typing import Optional, Union

_INTEGER_PREFIX_PATTERN = re.compile(r"\s*([+-]?\d+)")


def parse_int_prefix(value: Optional[str]) -> Optional[int]:
    """Parse the leading base-10 integer of ``value``.

    Leading whitespace and a sign are accepted and anything after the digits
    is ignored, so ``"12 images"`` yields 12. Returns ``None`` when no digits
    are found.
    """
    if not value:
        return None
    match = _INTEGER_PREFIX_PATTERN.match(value)
    if not match:
        return None
    return int(match.group(1))


def coerce_quantity(value: Union[int, float, str, None]) -> int:
    """Turn the quantity input into an integer, falling back to 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    return parse_int_prefix(value) or 0


def parse_time(value: Optional[str]) -> int:
    """Convert ``HH:MM:SS`` text into seconds.

    Unparseable or missing components count as zero.
    """
    parts = [parse_int_prefix(part) or 0 for part in (value or "").split(":")]
    parts = (parts + [0, 0, 0])[:3]
    hours, minutes, seconds = parts
    return max(hours * 3600 + minutes * 60 + seconds, 0)
