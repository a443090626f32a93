import logging
from typing import Optional, Sequence

from engine.domain import Budget, BudgetUsage, DashboardSummary, Expense
from engine.months import days_in_month, month_of, parse_month
from engine.validation import ensure_single_owner, ensure_valid

logger = logging.getLogger(__name__)


def _spent(expenses: Sequence[Expense], month: str, category=None) -> float:
    return sum(
        (float(e.amount) for e in expenses
         if month_of(e.date) == month and (category is None or e.category == category)),
        0.0,
    )


def dashboard_summary(expenses: Sequence[Expense], budgets: Sequence[Budget], month: str) -> DashboardSummary:
    ensure_valid(expenses, budgets)
    ensure_single_owner(expenses, budgets)
    parse_month(month)

    total_expense = _spent(expenses, month)
    total_budget = sum((float(b.amount) for b in budgets if b.month == month), 0.0)
    usage = total_expense / total_budget * 100 if total_budget > 0 else 0.0
    summary = DashboardSummary(
        month=month,
        total_monthly_expense=total_expense,
        total_monthly_budget=total_budget,
        budget_usage_percent=usage,
        average_daily_expense=total_expense / days_in_month(month),
        all_time_total=sum((float(e.amount) for e in expenses), 0.0),
    )
    logger.debug("dashboard summary %s", summary)
    return summary


def budget_usage(
    expenses: Sequence[Expense],
    budgets: Sequence[Budget],
    month: Optional[str] = None,
) -> tuple[BudgetUsage, ...]:
    """Each budget next to the spending of its own category and month.

    ``month`` narrows the list to one month; rows are newest month first,
    then by category.
    """
    ensure_valid(expenses, budgets)
    ensure_single_owner(expenses, budgets)
    if month is not None:
        parse_month(month)

    rows = []
    for b in budgets:
        if month is not None and b.month != month:
            continue
        spent = _spent(expenses, b.month, b.category)
        percentage = spent / float(b.amount) * 100 if b.amount else 0.0
        rows.append(BudgetUsage(budget=b, spent=spent, percentage=percentage, over_budget=percentage > 100))

    rows.sort(key=lambda r: str(r.budget.category))
    rows.sort(key=lambda r: r.budget.month, reverse=True)
    return tuple(rows)
