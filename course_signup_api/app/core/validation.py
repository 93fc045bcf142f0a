"""
Input sanitization helpers.

Numeric inputs are clamped into range instead of being rejected and
strings are truncated and trimmed.  A clamped value equal to the
``default`` sentinel (``0`` unless stated otherwise) means the raw
value was not a number at all; callers check for it explicitly.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clamp_int(raw: Any, minimum: int, maximum: int, default: int = 0) -> int:
    """Parse ``raw`` as an integer and clamp it to ``[minimum, maximum]``.

    Strings are parsed from their leading digits (``"12abc"`` gives 12,
    ``"3.7"`` gives 3).  Anything that yields no integer returns
    ``default`` unclamped.
    """
    if isinstance(raw, bool) or raw is None:
        return default
    if isinstance(raw, int):
        parsed = raw
    elif isinstance(raw, float):
        if math.isnan(raw) or math.isinf(raw):
            return default
        parsed = int(raw)
    elif isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        if not match:
            return default
        parsed = int(match.group(1))
    else:
        return default
    if parsed < minimum:
        return minimum
    if parsed > maximum:
        return maximum
    return parsed


def clip_string(raw: Any, max_len: int) -> str:
    """Truncate ``raw`` to ``max_len`` characters and strip whitespace.

    Non-string values become the empty string.
    """
    if not isinstance(raw, str):
        return ""
    return raw[:max_len].strip()


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC ``datetime``.

    A trailing ``Z`` is accepted and values without an offset are
    taken as UTC.  Returns ``None`` when ``raw`` cannot be parsed.
    """
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_valid_timestamp(raw: Any) -> bool:
    return parse_timestamp(raw) is not None


def format_timestamp(value: datetime) -> str:
    """Render ``value`` the way timestamps are stored: ``2025-01-15T10:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
