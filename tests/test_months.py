from datetime import date

import pytest

from engine.errors import InvalidRecordError
from engine.months import (
    current_month,
    days_in_month,
    month_of,
    month_options,
    month_window,
    months_from,
    parse_date,
    parse_month,
    shift_month,
)


def test_parse_date_accepts_iso_and_timestamp():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("2024-03-05T23:59:00.000Z") == date(2024, 3, 5)


@pytest.mark.parametrize("value", ["2024-3-5", "05/03/2024", "2024-02-30", "", None, "2024-13-01"])
def test_parse_date_rejects_malformed(value):
    with pytest.raises(InvalidRecordError):
        parse_date(value)


@pytest.mark.parametrize("value", ["2024-00", "2024-13", "2024/03", "24-03", "2024-03-01"])
def test_parse_month_rejects_malformed(value):
    with pytest.raises(InvalidRecordError):
        parse_month(value)


def test_month_of_uses_literal_calendar_date():
    assert month_of("2024-03-31T23:30:00-05:00") == "2024-03"


def test_current_month_from_injected_date():
    assert current_month(date(2024, 2, 29)) == "2024-02"


def test_shift_month_across_years():
    assert shift_month("2024-01", -1) == "2023-12"
    assert shift_month("2023-12", 1) == "2024-01"
    assert shift_month("2024-03", -14) == "2023-01"
    assert shift_month("2024-03", 0) == "2024-03"


def test_days_in_month_leap_aware():
    assert days_in_month("2024-02") == 29
    assert days_in_month("2023-02") == 28
    assert days_in_month("1900-02") == 28
    assert days_in_month("2000-02") == 29
    assert days_in_month("2024-04") == 30
    assert days_in_month("2024-12") == 31


def test_month_window_ends_at_reference():
    assert month_window("2024-02", 3) == ("2023-12", "2024-01", "2024-02")
    assert month_window("2024-02", 1) == ("2024-02",)
    assert len(month_window("2024-02", 12)) == 12


def test_months_from_starts_at_reference():
    assert months_from("2024-11", 3) == ("2024-11", "2024-12", "2025-01")


@pytest.mark.parametrize("count", [0, -2])
def test_window_rejects_non_positive_count(count):
    with pytest.raises(ValueError):
        month_window("2024-02", count)
    with pytest.raises(ValueError):
        months_from("2024-02", count)


def test_month_options_budget_list_and_form():
    listing = month_options("2024-06", 6, 5)
    assert len(listing) == 12
    assert listing[0] == "2023-12"
    assert listing[6] == "2024-06"
    assert listing[-1] == "2024-11"

    form = month_options("2024-06")
    assert form[0] == "2024-06"
    assert len(form) == 12


@pytest.mark.parametrize("value", ["2024-03\n", "２０２４-03", "2024-٠٣", " 2024-03", "0000-01"])
def test_parse_month_rejects_trailing_newline_non_ascii_and_year_zero(value):
    with pytest.raises(InvalidRecordError):
        parse_month(value)


@pytest.mark.parametrize("value", ["2024-03-05\n", "２０２４-03-05", "2024-03-0５", "0000-01-01"])
def test_parse_date_rejects_trailing_newline_non_ascii_and_year_zero(value):
    with pytest.raises(InvalidRecordError):
        parse_date(value)
