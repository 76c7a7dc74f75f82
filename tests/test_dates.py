"""Unit tests for flexible date coercion."""

import time
from datetime import date

import pytest

from app.stories.importers.dates import parse_flexible_date


class TestIsoDates:
    def test_plain_iso(self):
        assert parse_flexible_date("2024-04-01") == date(2024, 4, 1)

    def test_unpadded_iso(self):
        assert parse_flexible_date("2024-4-1") == date(2024, 4, 1)

    def test_slash_separated_iso(self):
        assert parse_flexible_date("2024/04/01") == date(2024, 4, 1)

    def test_surrounding_whitespace(self):
        assert parse_flexible_date("  2024-04-01 ") == date(2024, 4, 1)

    def test_iso_datetime_keeps_calendar_day(self):
        assert parse_flexible_date("2024-04-01T23:30:00-05:00") == date(2024, 4, 1)
        assert parse_flexible_date("2024-04-01T00:15:00Z") == date(2024, 4, 1)

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="requires time.tzset")
    @pytest.mark.parametrize("tz", ["Pacific/Kiritimati", "Pacific/Pago_Pago", "UTC"])
    def test_no_shift_under_server_timezone(self, monkeypatch, tz):
        monkeypatch.setenv("TZ", tz)
        time.tzset()
        try:
            assert parse_flexible_date("2024-04-01") == date(2024, 4, 1)
        finally:
            monkeypatch.undo()
            time.tzset()


class TestSlashDates:
    def test_american_long(self):
        assert parse_flexible_date("4/1/2024") == date(2024, 4, 1)

    def test_european_when_first_part_exceeds_twelve(self):
        assert parse_flexible_date("25/12/2024") == date(2024, 12, 25)

    def test_ambiguous_defaults_to_american(self):
        assert parse_flexible_date("03/04/2024") == date(2024, 3, 4)

    def test_two_digit_year(self):
        assert parse_flexible_date("1/1/25") == date(2025, 1, 1)

    def test_two_digit_year_pivot(self):
        assert parse_flexible_date("1/1/69") == date(1969, 1, 1)
        assert parse_flexible_date("1/1/68") == date(2068, 1, 1)


class TestTextualDates:
    def test_month_name(self):
        assert parse_flexible_date("April 1, 2024") == date(2024, 4, 1)

    def test_abbreviated_month(self):
        assert parse_flexible_date("Apr 1, 2024") == date(2024, 4, 1)

    @pytest.mark.parametrize("raw", ["April 1 2024", "Apr 1 2024"])
    def test_month_name_without_comma(self, raw):
        assert parse_flexible_date(raw) == date(2024, 4, 1)

    def test_day_month_year(self):
        assert parse_flexible_date("1 April 2024") == date(2024, 4, 1)

    def test_day_month_uses_current_year(self):
        assert parse_flexible_date("15-Dec", today=date(2025, 6, 1)) == date(2025, 12, 15)

    def test_leap_day_clamped_in_non_leap_year(self):
        assert parse_flexible_date("29-Feb", today=date(2025, 1, 1)) == date(2025, 2, 28)

    def test_leap_day_kept_in_leap_year(self):
        assert parse_flexible_date("29-Feb", today=date(2024, 1, 1)) == date(2024, 2, 29)


class TestUnparseable:
    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_blank_is_none(self, raw):
        assert parse_flexible_date(raw) is None

    @pytest.mark.parametrize("raw", ["next tuesday", "2024-13-01", "32-Jan", "31/31/2024", "TBD"])
    def test_garbage_is_none(self, raw):
        assert parse_flexible_date(raw) is None
