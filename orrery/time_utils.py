#!/usr/bin/env python3
"""
Julian Day conversions (Meeus, Astronomical Algorithms, ch. 7).

Naive datetimes are taken to be UTC. Dates before 1582-10-15 use the Julian calendar.
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from .constants import DAYS_PER_CENTURY, J2000

_DATE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d")

# First Julian Day number of the Gregorian calendar (1582-10-15)
_GREGORIAN_START_JDN = 2299161


def datetime_to_julian_day(dt: datetime) -> float:
    """Convert a datetime to a Julian Day."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    year, month = dt.year, dt.month
    if month <= 2:
        year -= 1
        month += 12

    is_gregorian = (dt.year, dt.month, dt.day) >= (1582, 10, 15)
    b = 0
    if is_gregorian:
        a = year // 100
        b = 2 - a + a // 4

    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + dt.day + b - 1524.5
    day_fraction = (dt.hour + dt.minute / 60.0 + dt.second / 3600.0 + dt.microsecond / 3.6e9) / 24.0
    return jd + day_fraction


def julian_day_to_datetime(julian_day: float) -> datetime:
    """Convert a Julian Day to an aware UTC datetime (microsecond resolution)."""
    jd = julian_day + 0.5
    z = math.floor(jd)
    f = jd - z

    a = z
    if z >= _GREGORIAN_START_JDN:
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - alpha // 4

    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    midnight = datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
    return midnight + timedelta(microseconds=round(f * 86400e6))


def julian_centuries(julian_day: float) -> float:
    """Julian centuries elapsed since J2000."""
    return (julian_day - J2000) / DAYS_PER_CENTURY


def now_julian_day(now: Optional[datetime] = None) -> float:
    return datetime_to_julian_day(now or datetime.now(timezone.utc))


def format_julian_day(julian_day: float) -> str:
    """ISO 8601 UTC timestamp for a Julian Day, to the second."""
    return julian_day_to_datetime(julian_day).replace(microsecond=0).isoformat()


def parse_date(text: str) -> datetime:
    """
    Parse "YYYY-MM-DD" or "YYYY-MM-DD HH:MM" into an aware UTC datetime.

    Raises:
        ValueError: when the text matches none of the accepted formats
    """
    text = text.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date {text!r}; expected YYYY-MM-DD or YYYY-MM-DD HH:MM")
