import json
import logging
from dataclasses import replace
from typing import Optional, Tuple

from engine.domain import Budget, Category, Expense
from engine.errors import InvalidRecordError
from engine.filters import by_owner

logger = logging.getLogger(__name__)


def _field(data: dict, *names: str, default=None):
    for name in names:
        if name in data:
            return data[name]
    return default


def _owner(data: dict) -> str:
    return _field(data, "user_id", "userId", default="")


def expense_from_dict(data: dict) -> Expense:
    try:
        return Expense(
            id=str(data["id"]),
            amount=data["amount"],
            category=Category.parse(data["category"]),
            date=data["date"],
            user_id=_owner(data),
            description=data.get("description") or "",
        )
    except KeyError as e:
        raise InvalidRecordError(f"Expense record is missing {e.args[0]!r}", record_id=data.get("id"),
                                 field=e.args[0]) from None


def budget_from_dict(data: dict) -> Budget:
    try:
        return Budget(
            id=str(data["id"]),
            category=Category.parse(data["category"]),
            amount=data["amount"],
            month=data["month"],
            user_id=_owner(data),
        )
    except KeyError as e:
        raise InvalidRecordError(f"Budget record is missing {e.args[0]!r}", record_id=data.get("id"),
                                 field=e.args[0]) from None


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "amount": e.amount,
        "category": str(e.category),
        "date": e.date,
        "description": e.description,
        "userId": e.user_id,
    }


def load_seed(path: str, user_id: Optional[str] = None) -> Tuple[Tuple[Expense, ...], Tuple[Budget, ...]]:
    """Read a snapshot file; with ``user_id`` only that owner's records are kept."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    expenses = tuple(expense_from_dict(e) for e in data.get("expenses", []))
    budgets = tuple(budget_from_dict(b) for b in data.get("budgets", []))
    if user_id is not None:
        mine = by_owner(user_id)
        expenses = tuple(filter(mine, expenses))
        budgets = tuple(filter(mine, budgets))
    logger.info("loaded %d expenses and %d budgets from %s", len(expenses), len(budgets), path)
    return expenses, budgets


def add_expense(expenses: Tuple[Expense, ...], e: Expense) -> Tuple[Expense, ...]:
    return expenses + (e,)


def update_expense(expenses: Tuple[Expense, ...], expense_id: str, **changes) -> Tuple[Expense, ...]:
    return tuple(replace(e, **changes) if e.id == expense_id else e for e in expenses)


def delete_expense(expenses: Tuple[Expense, ...], expense_id: str) -> Tuple[Expense, ...]:
    return tuple(e for e in expenses if e.id != expense_id)


def add_budget(budgets: Tuple[Budget, ...], b: Budget) -> Tuple[Budget, ...]:
    return budgets + (b,)


def delete_budget(budgets: Tuple[Budget, ...], budget_id: str) -> Tuple[Budget, ...]:
    return tuple(b for b in budgets if b.id != budget_id)
