"""Date utilities for placing timestamps on the shift rota."""

from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta
from calendar import monthrange

import pytz

from app.models.cycle import Period


# Wall-clock hours at which each period starts
MORNING_START = 7
AFTERNOON_START = 15
NIGHT_START = 23

# A picked calendar date stands for this instant when one is needed
NOON = time(12, 0)

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def classify_period(timestamp: datetime) -> Period:
    """Return the period a wall-clock timestamp falls in.

    07:00 <= t < 15:00 is morning, 15:00 <= t < 23:00 is afternoon and
    everything else (23:00 to 06:59:59) is night.
    """
    hour = timestamp.hour
    if MORNING_START <= hour < AFTERNOON_START:
        return Period.MORNING
    if AFTERNOON_START <= hour < NIGHT_START:
        return Period.AFTERNOON
    return Period.NIGHT


def attributed_date(timestamp: datetime, period: Period) -> date:
    """Return the calendar date that owns the period of `timestamp`.

    The early-morning tail of a night (00:00-06:59) belongs to the night
    that started at 23:00 the previous day.

    Raises:
        ValueError: for the night tail of 0001-01-01, whose owning day is
            before the first representable date
    """
    if period == Period.NIGHT and timestamp.hour < MORNING_START:
        if timestamp.date() == date.min:
            raise ValueError(
                f"{timestamp.isoformat()} belongs to a night that starts before {date.min.isoformat()}"
            )
        return timestamp.date() - timedelta(days=1)
    return timestamp.date()


def days_of_month(year: int, month: int) -> list[date]:
    """All calendar days of a month, in order."""
    _, days_in_month = monthrange(year, month)
    return [date(year, month, day) for day in range(1, days_in_month + 1)]


def get_day_of_week(d: date) -> str:
    return WEEKDAY_NAMES[d.weekday()]


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse a month string into year and month.

    Args:
        month_str: Month in "YYYY-MM" format

    Returns:
        Tuple of (year, month)

    Raises:
        ValueError: if the string is not a valid month
    """
    parts = month_str.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid month {month_str!r}, expected YYYY-MM")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {month_str!r}, month must be 01-12")
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"Invalid month {month_str!r}, year must be {MINYEAR}-{MAXYEAR}")
    return year, month


def parse_date(date_str: str) -> date:
    """Parse a "YYYY-MM-DD" string."""
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        raise ValueError(f"Invalid date {date_str!r}, expected YYYY-MM-DD") from None


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp.

    A bare date is taken at noon so it never lands on a period boundary.
    A trailing "Z" is accepted as UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return datetime.combine(date.fromisoformat(text), NOON)
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid timestamp {value!r}, expected ISO 8601") from None


def get_timezone(name: str):
    """Look up a tz database zone, raising ValueError for unknown names."""
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone {name!r}") from None


def local_now(tz) -> datetime:
    """Current wall-clock time in `tz`, as a naive datetime."""
    return datetime.now(tz).replace(tzinfo=None)


def to_local(timestamp: datetime, tz) -> datetime:
    """Convert an aware timestamp to naive wall-clock time in `tz`.

    Naive timestamps are already wall-clock time and are returned unchanged.
    Raises ValueError when the converted time falls outside the datetime range.
    """
    if timestamp.tzinfo is None:
        return timestamp
    try:
        return timestamp.astimezone(tz).replace(tzinfo=None)
    except OverflowError:
        raise ValueError(f"Timestamp {timestamp.isoformat()} is out of range in {tz}") from None
