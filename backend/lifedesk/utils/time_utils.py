"""
Time and date normalization for voice actions.
Converts user-local wall-clock times into the UTC values the services store.
"""
import re
from datetime import date, datetime, timezone as dt_timezone
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lifedesk.core.constants import LimitsConstants

TIME_RE = re.compile(r"^\d{1,2}:\d{2}$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_time(raw: Any) -> Optional[str]:
    """
    Validate a loose "H:MM" / "HH:MM" time string.

    Returns the time as zero-padded "HH:MM" when it matches, None otherwise.
    Malformed values are never coerced ("9" or "9:5" are rejected).
    """
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if not TIME_RE.match(value):
        return None
    hour, minute = (int(part) for part in value.split(":"))
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def is_valid_date_str(value: Any) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not isinstance(value, str) or not DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_timezone(value: Any) -> bool:
    """True when value names an IANA timezone known to the system."""
    if not isinstance(value, str) or not value or len(value) > LimitsConstants.TIMEZONE_MAX_LENGTH:
        return False
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def parse_date(value: Any, today: str) -> str:
    """Return value if it is a valid YYYY-MM-DD date, else today."""
    if isinstance(value, str) and is_valid_date_str(value.strip()):
        return value.strip()
    return today


def today_str(timezone: Optional[str] = None) -> str:
    """Current date as YYYY-MM-DD, in timezone when one is given, else UTC."""
    tz = ZoneInfo(timezone) if timezone and is_valid_timezone(timezone) else dt_timezone.utc
    return datetime.now(tz).date().isoformat()


def _combine(date_str: str, time_str: str) -> Optional[datetime]:
    if not is_valid_date_str(date_str) or normalize_time(time_str) is None:
        return None
    hour, minute = (int(part) for part in time_str.split(":"))
    return datetime.combine(date.fromisoformat(date_str), datetime.min.time()).replace(
        hour=hour, minute=minute
    )


def local_to_utc(date_str: str, time_str: str, timezone: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Convert a local date + HH:MM time in an IANA timezone to UTC.

    Args:
        date_str: Local date (YYYY-MM-DD)
        time_str: Local time (H:MM or HH:MM)
        timezone: IANA zone name, e.g. "Asia/Jerusalem"

    Returns:
        (utc_date, utc_time) with utc_time as zero-padded HH:MM, or None when the
        timezone is missing/unknown or the date/time cannot form an instant.
        Callers keep the original values (treated as UTC) on None.
    """
    if not timezone or not is_valid_timezone(timezone):
        return None
    naive = _combine(date_str, time_str)
    if naive is None:
        return None
    local = naive.replace(tzinfo=ZoneInfo(timezone))
    utc = local.astimezone(dt_timezone.utc)
    return utc.date().isoformat(), utc.strftime("%H:%M")


def utc_to_local(date_str: str, time_str: str, timezone: Optional[str]) -> Optional[Tuple[str, str]]:
    """Inverse of local_to_utc: UTC date + HH:MM to wall-clock time in timezone."""
    if not timezone or not is_valid_timezone(timezone):
        return None
    naive = _combine(date_str, time_str)
    if naive is None:
        return None
    local = naive.replace(tzinfo=dt_timezone.utc).astimezone(ZoneInfo(timezone))
    return local.date().isoformat(), local.strftime("%H:%M")
