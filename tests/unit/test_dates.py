# ============================================================================
# FILE: tests/unit/test_dates.py
# ============================================================================
"""
Unit tests for the date normalizer
"""

from datetime import date, datetime, timezone

import pytest

from clinical_bridge.fhir_utils.dates import Boundary, as_utc, normalize, normalize_or_none
from clinical_bridge.utils.exceptions import InvalidDateFormat


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_bare_year_boundaries():
    """Test year-only dates widen to the first/last second of the year"""
    assert normalize("1950", Boundary.START) == utc(1950, 1, 1, 0, 0, 0)
    assert normalize("1950", Boundary.END) == utc(1950, 12, 31, 23, 59, 59)


def test_year_month_boundaries():
    """Test year-month dates widen to the first/last day of the month"""
    assert normalize("1950-06", Boundary.START) == utc(1950, 6, 1, 0, 0, 0)
    assert normalize("1950-06", Boundary.END) == utc(1950, 6, 30, 23, 59, 59)
    # Leap year February
    assert normalize("2024-02", Boundary.END) == utc(2024, 2, 29, 23, 59, 59)


def test_plain_date_boundaries():
    assert normalize("2024-01-15") == utc(2024, 1, 15)
    assert normalize("2024-01-15", "end") == utc(2024, 1, 15, 23, 59, 59)


def test_offset_timestamp_converted_to_utc():
    """Test offset timestamps keep their instant and ignore the boundary"""
    value = normalize("2024-02-01T08:32:00+01:00", Boundary.END)
    assert value == utc(2024, 2, 1, 7, 32, 0)
    assert value.tzinfo == timezone.utc


def test_zulu_and_long_fraction():
    """Test Z suffix and seven fractional digits as sent upstream"""
    assert normalize("2024-03-01T12:00:00Z") == utc(2024, 3, 1, 12)
    assert normalize("1981-06-12T00:00:00.0000000+02:00") == utc(1981, 6, 11, 22)
    assert normalize("2020-01-01T00:00:00.1234567Z").microsecond == 123456


def test_local_datetime_read_as_utc():
    assert normalize("2024-02-01T08:32:00") == utc(2024, 2, 1, 8, 32)


def test_invalid_dates_raise():
    """Test unparseable and impossible dates"""
    for raw in ("garbage", "15-01-2024", "2023-02-30", "2024-13", ""):
        with pytest.raises(InvalidDateFormat):
            normalize(raw)


def test_invalid_date_is_value_error():
    with pytest.raises(ValueError):
        normalize("not a date")


def test_normalize_or_none_tolerates_bad_input():
    """Test tolerated-field policy: blank or bad text yields None"""
    assert normalize_or_none(None) is None
    assert normalize_or_none("   ") is None
    assert normalize_or_none("yesterday") is None
    assert normalize_or_none("1950", Boundary.END) == utc(1950, 12, 31, 23, 59, 59)


def test_as_utc_accepts_fhir_value_shapes():
    assert as_utc(None) is None
    assert as_utc(datetime(2024, 1, 1, 10, 0)) == utc(2024, 1, 1, 10)
    assert as_utc(date(2024, 1, 1)) == utc(2024, 1, 1)
    assert as_utc("2024-01-01T10:00:00+01:00") == utc(2024, 1, 1, 9)
