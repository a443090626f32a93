"""Display helpers, applied to engine output by the front end only."""
from datetime import date

from engine.months import parse_month


def month_label(month: str) -> str:
    """``"2024-03"`` -> ``"Mar 2024"``"""
    year, mon = parse_month(month)
    return date(year, mon, 1).strftime("%b %Y")


def long_month_label(month: str) -> str:
    year, mon = parse_month(month)
    return date(year, mon, 1).strftime("%B %Y")


def format_currency(value: float, symbol: str = "$") -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def usage_label(percent: float) -> str:
    if percent <= 0:
        return "No budget set"
    state = "Over budget" if percent > 100 else "Under budget"
    return f"{percent:.0f}% used ({state})"
