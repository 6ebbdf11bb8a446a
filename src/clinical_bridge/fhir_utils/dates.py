# ============================================================================
# src/clinical_bridge/fhir_utils/dates.py
# ============================================================================
"""
Date/Value Normalizer

Turns the date strings found in upstream payloads into absolute,
timezone-aware UTC datetimes.

Accepted, in order of preference:
1. Timestamp with offset        2024-02-01T08:32:00+01:00, ...Z, any fraction
2. Local date-time (no offset)  2024-02-01T08:32:00          -> read as UTC
3. Bare year                    1950        -> Jan 1 00:00:00 / Dec 31 23:59:59
4. Year-month                   1950-06     -> first / last day of month
5. Plain date                   1950-06-15  -> 00:00:00 / 23:59:59

Partial dates are expanded according to a Boundary (START or END).
"""

from calendar import monthrange
from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Union
import logging
import re

from ..utils.exceptions import InvalidDateFormat

logger = logging.getLogger(__name__)


class Boundary(str, Enum):
    START = "start"
    END = "end"


_DATETIME_RE = re.compile(
    r'^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})'
    r'[T ](?P<hour>\d{2}):(?P<minute>\d{2})'
    r'(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d+))?)?'
    r'(?P<offset>Z|[+-]\d{2}:?\d{2})?$'
)
_YEAR_RE = re.compile(r'^(?P<year>\d{4})$')
_YEAR_MONTH_RE = re.compile(r'^(?P<year>\d{4})-(?P<month>\d{2})$')
_DATE_RE = re.compile(r'^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})$')

_END_OF_DAY = time(23, 59, 59)


def normalize(raw: str, boundary: Union[Boundary, str] = Boundary.START) -> datetime:
    """
    Parse an upstream date string into a UTC datetime.

    Args:
        raw: Date text as found upstream
        boundary: START or END, used when a partial date must be widened
                  into a single instant

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        InvalidDateFormat: when no supported pattern matches
    """
    if raw is None:
        raise InvalidDateFormat(raw)
    text = str(raw).strip()
    boundary = Boundary(boundary)

    try:
        match = _DATETIME_RE.match(text)
        if match:
            return _from_datetime_match(match)

        match = _YEAR_RE.match(text)
        if match:
            year = int(match["year"])
            if boundary is Boundary.END:
                return _at(year, 12, 31, _END_OF_DAY)
            return _at(year, 1, 1, time.min)

        match = _YEAR_MONTH_RE.match(text)
        if match:
            year, month = int(match["year"]), int(match["month"])
            if boundary is Boundary.END:
                return _at(year, month, monthrange(year, month)[1], _END_OF_DAY)
            return _at(year, month, 1, time.min)

        match = _DATE_RE.match(text)
        if match:
            year, month, day = int(match["year"]), int(match["month"]), int(match["day"])
            return _at(year, month, day, _END_OF_DAY if boundary is Boundary.END else time.min)
    except ValueError as e:
        # Pattern matched but the calendar values are out of range
        raise InvalidDateFormat(text) from e

    raise InvalidDateFormat(text)


def normalize_or_none(
    raw: Optional[str],
    boundary: Union[Boundary, str] = Boundary.START,
    field_name: str = "date"
) -> Optional[datetime]:
    """
    Tolerant variant of normalize() for optional fields.

    Blank input returns None silently; unparseable input is logged and
    returns None so the caller can omit the field.
    """
    if raw is None or not str(raw).strip():
        return None
    try:
        return normalize(raw, boundary)
    except InvalidDateFormat as e:
        logger.debug(f"Omitting {field_name}: {e}")
        return None


def _at(year: int, month: int, day: int, at_time: time) -> datetime:
    return datetime.combine(datetime(year, month, day).date(), at_time, tzinfo=timezone.utc)


def _from_datetime_match(match: re.Match) -> datetime:
    fraction = match["fraction"] or ""
    # Upstream sends up to 7 fractional digits; datetime keeps 6
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

    value = datetime(
        int(match["year"]),
        int(match["month"]),
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        int(match["second"] or 0),
        microsecond,
        tzinfo=_parse_offset(match["offset"]),
    )
    return value.astimezone(timezone.utc)


def _parse_offset(offset: Optional[str]) -> timezone:
    if not offset or offset == "Z":
        return timezone.utc
    sign = -1 if offset[0] == "-" else 1
    digits = offset[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        raise ValueError(f"Offset out of range: {offset}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def as_utc(value) -> Optional[datetime]:
    """
    Coerce a FHIR date/dateTime/instant value to a UTC datetime.

    Accepts datetime (naive values are read as UTC), date, or the string
    form; returns None when nothing usable is present.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if hasattr(value, "year") and hasattr(value, "day"):
        return _at(value.year, value.month, value.day, time.min)
    return normalize_or_none(str(value), Boundary.START)
