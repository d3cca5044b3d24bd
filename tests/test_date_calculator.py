"""Follow-up date and day-difference calculations"""
from datetime import date, datetime, timedelta, timezone

import pytest

from vetclinic.utils.date_calculator import (
    calculate_days_difference,
    calculate_follow_up_date,
    format_date_for_display,
    format_for_input,
    parse_datetime,
)


class TestCalculateFollowUpDate:
    def test_adds_calendar_days(self):
        result = calculate_follow_up_date(datetime(2025, 6, 20, 9, 30), 7)
        assert result == datetime(2025, 6, 27, 9, 30)

    def test_truncates_to_minutes(self):
        result = calculate_follow_up_date(datetime(2025, 6, 20, 9, 30, 45, 123456), 1)
        assert result == datetime(2025, 6, 21, 9, 30)

    def test_zero_days_is_same_minute(self):
        assert calculate_follow_up_date(datetime(2025, 1, 1, 8, 0), 0) == datetime(2025, 1, 1, 8, 0)

    def test_crosses_month_and_year(self):
        assert calculate_follow_up_date(datetime(2025, 12, 25), 10) == datetime(2026, 1, 4)

    def test_accepts_iso_string_and_numeric_string(self):
        result = calculate_follow_up_date("2025-06-20T00:00:00Z", "3")
        assert result == datetime(2025, 6, 23, tzinfo=timezone.utc)

    def test_accepts_plain_date(self):
        assert calculate_follow_up_date(date(2025, 2, 27), 2) == datetime(2025, 3, 1)

    @pytest.mark.parametrize("days,expected", [("3.5", 3), (1.9, 1), ("7 ngày", 7), (" 2", 2)])
    def test_day_count_uses_leading_integer(self, days, expected):
        result = calculate_follow_up_date(datetime(2025, 6, 20), days)
        assert result == datetime(2025, 6, 20 + expected)

    @pytest.mark.parametrize("days", [-1, "-5", "abc", "", None, float("nan")])
    def test_invalid_day_count_returns_none(self, days):
        assert calculate_follow_up_date(datetime(2025, 6, 20), days) is None

    @pytest.mark.parametrize("exam_date", [None, "", "not-a-date", "2025-13-40"])
    def test_unparseable_exam_date_returns_none(self, exam_date):
        assert calculate_follow_up_date(exam_date, 7) is None


class TestCalculateDaysDifference:
    def test_whole_week(self):
        assert calculate_days_difference("2025-06-20T00:00", "2025-06-27T00:00") == 7

    def test_partial_day_rounds_up(self):
        exam = datetime(2025, 6, 20, 9, 0)
        assert calculate_days_difference(exam, exam + timedelta(days=2, hours=1)) == 3

    def test_same_instant_is_zero(self):
        exam = datetime(2025, 6, 20, 9, 0)
        assert calculate_days_difference(exam, exam) == 0

    def test_follow_up_before_exam_returns_none(self):
        assert calculate_days_difference("2025-06-27", "2025-06-20") is None

    def test_unparseable_input_returns_none(self):
        assert calculate_days_difference("garbage", "2025-06-20") is None
        assert calculate_days_difference("2025-06-20", None) is None

    def test_naive_and_aware_are_compared_as_utc(self):
        assert calculate_days_difference(datetime(2025, 6, 20), "2025-06-21T00:00:00Z") == 1


class TestFormatting:
    def test_display_with_and_without_time(self):
        value = datetime(2025, 6, 5, 14, 7)
        assert format_date_for_display(value) == "05/06/2025 14:07"
        assert format_date_for_display(value, include_time=False) == "05/06/2025"

    def test_display_of_iso_string(self):
        assert format_date_for_display("2025-06-05T14:07:00", False) == "05/06/2025"

    def test_display_of_missing_value_is_empty(self):
        assert format_date_for_display(None) == ""
        assert format_for_input("nope") == ""

    def test_input_format(self):
        assert format_for_input(datetime(2025, 6, 5, 14, 7, 59)) == "2025-06-05T14:07"

    def test_parse_datetime_rejects_other_types(self):
        assert parse_datetime(12345) is None
