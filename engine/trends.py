import logging
from typing import Optional, Sequence

from engine.domain import Expense, MonthlyTotal
from engine.months import month_of, month_window
from engine.validation import ensure_single_owner, ensure_valid

logger = logging.getLogger(__name__)


def monthly_totals(expenses: Sequence[Expense], end_month: str, months: int) -> tuple[MonthlyTotal, ...]:
    """Total spending for each of the ``months`` months ending at ``end_month``.

    Every month of the window is present, oldest first, with 0 for months
    without expenses.
    """
    ensure_valid(expenses)
    ensure_single_owner(expenses)
    window = month_window(end_month, months)

    totals = dict.fromkeys(window, 0.0)
    for e in expenses:
        m = month_of(e.date)
        if m in totals:
            totals[m] += float(e.amount)

    logger.debug("monthly totals %s..%s over %d expenses", window[0], window[-1], len(expenses))
    return tuple(MonthlyTotal(month=m, total=t) for m, t in totals.items())


def trend_percentage(series: Sequence[MonthlyTotal]) -> Optional[float]:
    """Change of the last month against the one before it, in percent.

    ``None`` for fewer than two months; 0 when the earlier month is 0.
    """
    if len(series) < 2:
        return None
    previous, last = series[-2].total, series[-1].total
    if previous == 0:
        return 0.0
    return (last - previous) / previous * 100
