from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any

# 400 Gregorian years / 4800 months
_DAYS_PER_MONTH = 146097 / 4800


def parse_timestamp(raw: Any) -> datetime | None:
    """Coerce an engine timestamp into an aware UTC datetime.

    Accepts epoch milliseconds (what the monitoring engine emits), datetime
    objects and ISO 8601 strings. Returns None for anything else.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        if raw.tzinfo is None:
            return raw.replace(tzinfo=timezone.utc)
        return raw.astimezone(timezone.utc)
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(raw, str):
        text = raw.strip()
        if text.lstrip("-").isdigit():
            return parse_timestamp(int(text))
        try:
            return parse_timestamp(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def humanize(delta: timedelta) -> str:
    """Render a duration the way moment.js ``duration.humanize()`` does.

    Each unit is rounded half up on its own, and the first threshold that
    matches picks the phrase.
    """
    total = abs(delta.total_seconds())
    seconds = _round_half_up(total)
    minutes = _round_half_up(total / 60)
    hours = _round_half_up(total / 3600)
    days = _round_half_up(total / 86400)
    months = _round_half_up(total / 86400 / _DAYS_PER_MONTH)
    years = _round_half_up(total / 86400 / _DAYS_PER_MONTH / 12)

    if seconds < 45:
        return "a few seconds"
    if minutes <= 1:
        return "a minute"
    if minutes < 45:
        return f"{minutes} minutes"
    if hours <= 1:
        return "an hour"
    if hours < 22:
        return f"{hours} hours"
    if days <= 1:
        return "a day"
    if days < 26:
        return f"{days} days"
    if months <= 1:
        return "a month"
    if months < 11:
        return f"{months} months"
    if years <= 1:
        return "a year"
    return f"{years} years"


def from_now(moment: datetime, now: datetime) -> str:
    """Relative phrase such as '3 minutes ago' or 'in an hour'."""
    delta = now - moment
    text = humanize(delta)
    return f"{text} ago" if delta >= timedelta(0) else f"in {text}"
