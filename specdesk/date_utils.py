"""Shared timestamp parsing and formatting helpers."""
from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_rfc3339() -> str:
    """Current time as an RFC 3339 string with an explicit UTC offset."""
    return utc_now().isoformat()


def _parse_datetime_token(token: str) -> datetime | None:
    cleaned = token.strip()
    if not cleaned:
        return None
    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in ("%Y/%m/%d", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a frontmatter timestamp into an aware UTC datetime.

    Returns ``None`` for missing or unparseable values; callers treat both
    the same way.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        token = value.strip().strip("'\"")
        if not token:
            return None
        if _DATE_ONLY_RE.match(token):
            try:
                day = date.fromisoformat(token)
            except ValueError:
                return None
            parsed = datetime(day.year, day.month, day.day)
        else:
            parsed = _parse_datetime_token(token)
            if parsed is None:
                return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # shifting to UTC left the representable range
        return None


def scalar_to_string(value: Any) -> str | None:
    """Render a YAML scalar as the string form it had in the document."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (str, int, float)):
        return str(value)
    return None
