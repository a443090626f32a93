"""Calendar-month helpers shared by the aggregations and the front end.

Months are plain ``"YYYY-MM"`` strings and dates are ``"YYYY-MM-DD"``
strings, compared literally (no timezone conversion). Nothing here reads
the clock: callers pass the reference month in.
"""
import calendar
import re
from datetime import date
from functools import lru_cache

from engine.errors import InvalidRecordError

# ASCII digits only, matched against the whole string
_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})(T.*)?")
_MONTH_RE = re.compile(r"([0-9]{4})-([0-9]{2})")


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string (a trailing ``T...`` time part is ignored)."""
    m = _DATE_RE.fullmatch(value) if isinstance(value, str) else None
    if not m:
        raise InvalidRecordError(f"Invalid date {value!r}, expected YYYY-MM-DD", field="date")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as e:
        raise InvalidRecordError(f"Invalid date {value!r}: {e}", field="date") from None


def parse_month(value: str) -> tuple[int, int]:
    m = _MONTH_RE.fullmatch(value) if isinstance(value, str) else None
    if not m or int(m.group(1)) == 0 or not 1 <= int(m.group(2)) <= 12:
        raise InvalidRecordError(f"Invalid month {value!r}, expected YYYY-MM", field="month")
    return int(m.group(1)), int(m.group(2))


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_of(date_string: str) -> str:
    d = parse_date(date_string)
    return format_month(d.year, d.month)


def current_month(today: date) -> str:
    return format_month(today.year, today.month)


def shift_month(month: str, offset: int) -> str:
    year, mon = parse_month(month)
    index = year * 12 + (mon - 1) + offset
    return format_month(index // 12, index % 12 + 1)


def days_in_month(month: str) -> int:
    year, mon = parse_month(month)
    return calendar.monthrange(year, mon)[1]


@lru_cache(maxsize=128)
def months_from(start_month: str, count: int) -> tuple[str, ...]:
    if count <= 0:
        raise ValueError(f"count must be a positive integer, got {count}")
    return tuple(shift_month(start_month, i) for i in range(count))


def month_window(end_month: str, count: int) -> tuple[str, ...]:
    """The ``count`` consecutive months ending at ``end_month``, oldest first."""
    if count <= 0:
        raise ValueError(f"count must be a positive integer, got {count}")
    return months_from(shift_month(end_month, -(count - 1)), count)


def month_options(reference_month: str, before: int = 0, after: int = 11) -> tuple[str, ...]:
    """Month picker values: ``before`` months back through ``after`` months ahead."""
    return months_from(shift_month(reference_month, -before), before + after + 1)
