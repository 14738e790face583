from __future__ import annotations

import re
from datetime import date, datetime, timezone, tzinfo
from typing import Optional

import pytz


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every datetime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_utc_offset(timezone_str: str) -> Optional[int]:
    """
    Parse a "UTC+3" / "UTC-5" style string into an offset in minutes.

    Args:
        timezone_str: String such as UTC+3, UTC-5 or UTC+5:30

    Returns:
        Offset in minutes, or None if the format is not recognised
    """
    match = re.match(r"^UTC([+-])(\d{1,2})(?::(\d{2}))?$", timezone_str)
    if not match:
        return None

    sign, hours, minutes = match.group(1), int(match.group(2)), int(match.group(3) or 0)
    if hours > 14 or minutes >= 60:
        return None

    total = hours * 60 + minutes
    return -total if sign == "-" else total


def resolve_timezone(user_timezone: Optional[str], default: str = "UTC") -> tzinfo:
    """Resolve "Europe/Moscow" or "UTC+3" style names; unknown names fall back to the default."""
    for name in (user_timezone, default):
        if not name:
            continue
        if name.startswith("UTC") and name != "UTC":
            offset = parse_utc_offset(name)
            if offset is not None:
                return pytz.FixedOffset(offset)
            continue
        try:
            return pytz.timezone(name)
        except pytz.exceptions.UnknownTimeZoneError:
            continue
    return pytz.utc


def get_user_local_time(
    user_timezone: Optional[str],
    now: Optional[datetime] = None,
    default: str = "UTC",
) -> datetime:
    """
    Current (or given) time in the user's timezone.
    Naive datetimes are treated as UTC.
    """
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(resolve_timezone(user_timezone, default))


def local_date(
    moment: Optional[datetime],
    user_timezone: Optional[str],
    default: str = "UTC",
) -> Optional[date]:
    """Calendar day of a stored UTC timestamp as seen by the user."""
    if moment is None:
        return None
    return get_user_local_time(user_timezone, moment, default).date()


COMMON_TIMEZONES = {
    "Europe/Paris": "Paris (UTC+1/+2)",
    "Europe/London": "London (UTC+0/+1)",
    "Europe/Berlin": "Berlin (UTC+1/+2)",
    "Europe/Moscow": "Moscow (UTC+3)",
    "America/New_York": "New York (UTC-5/-4)",
    "America/Los_Angeles": "Los Angeles (UTC-8/-7)",
    "America/Sao_Paulo": "São Paulo (UTC-3)",
    "Asia/Dubai": "Dubai (UTC+4)",
    "Asia/Kolkata": "Mumbai (UTC+5:30)",
    "Asia/Tokyo": "Tokyo (UTC+9)",
    "Australia/Sydney": "Sydney (UTC+10/+11)",
}


def get_timezone_display_name(timezone_str: str) -> str:
    return COMMON_TIMEZONES.get(timezone_str, timezone_str)


def validate_timezone(timezone_str: str) -> bool:
    """
    Whether the string is a usable timezone: an IANA name or the UTC+3 form.
    """
    if timezone_str.startswith("UTC") and timezone_str != "UTC":
        return parse_utc_offset(timezone_str) is not None

    try:
        pytz.timezone(timezone_str)
        return True
    except pytz.exceptions.UnknownTimeZoneError:
        return False
