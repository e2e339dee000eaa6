"""Tests for Julian Day conversions."""

from datetime import datetime, timedelta, timezone

import pytest

from orrery.constants import J2000
from orrery.time_utils import (
    datetime_to_julian_day,
    format_julian_day,
    julian_centuries,
    julian_day_to_datetime,
    now_julian_day,
    parse_date,
)


class TestDatetimeToJulianDay:

    def test_j2000(self):
        assert datetime_to_julian_day(datetime(2000, 1, 1, 12, 0)) == J2000

    def test_sputnik_launch(self):
        # Meeus example 7.a: 1957 October 4.81
        dt = datetime(1957, 10, 4, 19, 26, 24, tzinfo=timezone.utc)
        assert datetime_to_julian_day(dt) == pytest.approx(2436116.31, abs=1e-6)

    def test_julian_calendar_date(self):
        # Meeus example 7.b: 333 January 27.5
        assert datetime_to_julian_day(datetime(333, 1, 27, 12)) == pytest.approx(1842713.0)

    def test_aware_datetime_is_converted_to_utc(self):
        tz = timezone(timedelta(hours=9))
        assert datetime_to_julian_day(datetime(2000, 1, 1, 21, 0, tzinfo=tz)) == pytest.approx(J2000)

    def test_unix_epoch(self):
        assert datetime_to_julian_day(datetime(1970, 1, 1)) == 2440587.5


class TestJulianDayToDatetime:

    def test_j2000(self):
        assert julian_day_to_datetime(J2000) == datetime(2000, 1, 1, 12, tzinfo=timezone.utc)

    def test_round_trip(self):
        for dt in (datetime(1800, 3, 1, 6, 30, tzinfo=timezone.utc),
                   datetime(1957, 10, 4, 19, 26, 24, tzinfo=timezone.utc),
                   datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc)):
            back = julian_day_to_datetime(datetime_to_julian_day(dt))
            assert abs((back - dt).total_seconds()) < 1e-3

    def test_format(self):
        assert format_julian_day(J2000) == "2000-01-01T12:00:00+00:00"


class TestHelpers:

    def test_julian_centuries(self):
        assert julian_centuries(J2000) == 0.0
        assert julian_centuries(J2000 + 36525.0) == 1.0

    def test_now_accepts_explicit_clock(self):
        assert now_julian_day(datetime(2000, 1, 1, 12, tzinfo=timezone.utc)) == J2000

    def test_parse_date_formats(self):
        assert parse_date("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert parse_date(" 2024-01-01 06:30 ") == datetime(2024, 1, 1, 6, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", ["", "yesterday", "2024/01/01", "2024-13-01"])
    def test_parse_date_rejects_garbage(self, text):
        with pytest.raises(ValueError):
            parse_date(text)
