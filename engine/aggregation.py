"""Per-category totals over a user's expense snapshot."""
import logging
from typing import Iterable, Optional, Sequence

from engine.domain import Budget, Category, CategoryStat, CategoryTotal, Expense
from engine.months import month_of, parse_month
from engine.validation import ensure_single_owner, ensure_valid, find_budget

logger = logging.getLogger(__name__)


def _sum_by_category(expenses: Iterable[Expense]) -> dict[Category, float]:
    # dicts keep first-encounter order, which the stable sort below relies on
    totals: dict[Category, float] = {}
    for e in expenses:
        cat = Category.parse(e.category)
        totals[cat] = totals.get(cat, 0.0) + float(e.amount)
    return totals


def _in_month(expenses: Iterable[Expense], month: str) -> list[Expense]:
    return [e for e in expenses if month_of(e.date) == month]


def category_totals(
    expenses: Sequence[Expense],
    budgets: Sequence[Budget],
    current_month: str,
    month: Optional[str] = None,
) -> tuple[CategoryTotal, ...]:
    """Spending per category, compared against that month's budgets.

    With ``month`` set only expenses dated in that month count and budgets
    of that month are compared. Without it the totals are all-time and the
    budgets of ``current_month`` are used. Categories without expenses are
    left out; the result is ordered by total, largest first, ties in
    first-encounter order.
    """
    ensure_valid(expenses, budgets)
    ensure_single_owner(expenses, budgets)
    scope = month if month is not None else current_month
    parse_month(scope)

    filtered = _in_month(expenses, month) if month is not None else list(expenses)
    totals = _sum_by_category(filtered)
    relevant = [b for b in budgets if b.month == scope]

    result = []
    for cat, total in totals.items():
        budget = find_budget(relevant, cat, scope).map(lambda b: float(b.amount)).get_or_else(None)
        percentage = total / budget * 100 if budget else None
        result.append(CategoryTotal(category=cat, total=total, budget=budget, percentage=percentage))

    logger.debug("category totals for %s: %d categories from %d expenses",
                 month or "all time", len(result), len(filtered))
    return tuple(sorted(result, key=lambda ct: ct.total, reverse=True))


def category_breakdown(expenses: Sequence[Expense], month: str) -> tuple[CategoryTotal, ...]:
    """Spending per category within one month, without budget comparison."""
    return category_totals(expenses, (), month, month=month)


def category_stats(
    expenses: Sequence[Expense],
    budgets: Sequence[Budget],
    current_month: str,
) -> tuple[CategoryStat, ...]:
    """One row per category (all of them, in enumeration order) for ``current_month``."""
    ensure_valid(expenses, budgets)
    ensure_single_owner(expenses, budgets)
    parse_month(current_month)

    monthly = _in_month(expenses, current_month)
    stats = []
    for cat in Category:
        in_cat = [e for e in monthly if Category.parse(e.category) == cat]
        spent = sum(float(e.amount) for e in in_cat)
        all_time = sum(float(e.amount) for e in expenses if Category.parse(e.category) == cat)
        budget_amount = find_budget(budgets, cat, current_month).map(lambda b: float(b.amount)).get_or_else(0.0)
        percent = spent / budget_amount * 100 if budget_amount else 0.0
        stats.append(CategoryStat(
            category=cat,
            total_spent=spent,
            budget_amount=budget_amount,
            percent_used=min(percent, 100.0),
            over_budget=percent > 100,
            transaction_count=len(in_cat),
            all_time_spent=all_time,
        ))
    return tuple(stats)
