# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Input checks and the deletion time-gate.
Pure functions; callers supply the clock.
"""

import re
from datetime import datetime, timezone
from typing import Any

MIN_MEMBERSHIP_AGE_MS = 60_000

# Hangul jamo, compatibility jamo (ㄱ-ㅎ, ㅏ-ㅣ) and precomposed syllables (가-힣)
_HANGUL = re.compile("[ᄀ-ᇿㄱ-ㅎㅏ-ㅣ가-힣]")


def has_disallowed_script(text: Any) -> bool:
    if not isinstance(text, str):
        return False
    return _HANGUL.search(text) is not None


def is_valid_email_shape(value: Any) -> bool:
    """Deliberately permissive: a non-empty string with an ``@`` anywhere."""
    return isinstance(value, str) and bool(value) and "@" in value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def coerce_timestamp(value: Any) -> datetime:
    """
    Normalise a stored ``created_at`` into an aware datetime.
    Accepts datetimes, ISO-8601 strings and epoch milliseconds.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, bool):
        raise ValueError(f"Unreadable timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"Timestamp out of range: {value!r}") from exc
    if isinstance(value, str):
        return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise ValueError(f"Unreadable timestamp: {value!r}")


def has_age_elapsed(created_at: datetime, min_duration_ms: int, now: datetime) -> bool:
    elapsed = _as_utc(now) - _as_utc(created_at)
    return elapsed.total_seconds() * 1000 >= min_duration_ms
