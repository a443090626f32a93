import pytest

from engine.errors import InvalidRecordError
from engine.formatting import format_currency, long_month_label, month_label, usage_label


def test_month_labels():
    assert month_label("2024-03") == "Mar 2024"
    assert long_month_label("2024-03") == "March 2024"
    with pytest.raises(InvalidRecordError):
        month_label("Mar 2024")


def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(0) == "$0.00"
    assert format_currency(-3, "€") == "-€3.00"


def test_usage_label():
    assert usage_label(0) == "No budget set"
    assert usage_label(42.4) == "42% used (Under budget)"
    assert usage_label(125) == "125% used (Over budget)"
