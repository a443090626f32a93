"""Predicates and ordering for the expense list."""
from typing import Callable, Iterable, Iterator, Optional, Sequence

from engine.domain import Budget, Expense
from engine.months import month_of

Predicate = Callable[[Expense], bool]

SORT_KEYS = ("date", "amount", "category", "description")


def by_category(category) -> Predicate:
    def _filter(e: Expense) -> bool:
        return e.category == category

    return _filter


def by_month(month: str) -> Predicate:
    def _filter(e: Expense) -> bool:
        return month_of(e.date) == month

    return _filter


def by_date_range(start: str, end: str) -> Predicate:
    def _filter(e: Expense) -> bool:
        return start <= e.date[:10] <= end

    return _filter


def by_search(term: str) -> Predicate:
    """Case-insensitive match on description or category; an empty term matches all."""
    needle = term.strip().lower()

    def _filter(e: Expense) -> bool:
        if not needle:
            return True
        return needle in (e.description or "").lower() or needle in str(e.category).lower()

    return _filter


def by_owner(user_id: str) -> Callable[[object], bool]:
    def _filter(record) -> bool:
        return record.user_id == user_id

    return _filter


def iter_expenses(expenses: Iterable[Expense], *preds: Predicate) -> Iterator[Expense]:
    for e in expenses:
        if all(p(e) for p in preds):
            yield e


def sort_expenses(expenses: Iterable[Expense], key: str = "date", descending: bool = True) -> tuple[Expense, ...]:
    if key not in SORT_KEYS:
        raise ValueError(f"Cannot sort expenses by {key!r}, expected one of {SORT_KEYS}")
    if key == "amount":
        sort_key = lambda e: float(e.amount)
    elif key == "date":
        sort_key = lambda e: e.date[:10]
    else:
        sort_key = lambda e: str(getattr(e, key) or "").lower()
    return tuple(sorted(expenses, key=sort_key, reverse=descending))


def newest_first(expenses: Iterable[Expense]) -> tuple[Expense, ...]:
    return sort_expenses(expenses, "date", descending=True)


def budgets_for_month(budgets: Sequence[Budget], month: Optional[str]) -> tuple[Budget, ...]:
    """``None`` keeps every month."""
    return tuple(b for b in budgets if month is None or b.month == month)
