import logging
import math
from decimal import Decimal
from typing import Callable, Generic, Iterable, TypeVar

from engine.domain import Budget, Category, Expense
from engine.errors import InvalidRecordError, MixedOwnerError, UnknownCategoryError
from engine.months import parse_date, parse_month

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T]):
    """Optional lookup result: ``Some(value)`` or ``Nothing()``."""

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return Some(f(self._value))

    def get_or_else(self, default):
        return self._value

    def is_some(self) -> bool:
        return True

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return self

    def get_or_else(self, default):
        return default

    def is_some(self) -> bool:
        return False

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T]):
    """Validation result: ``Right(record)`` or ``Left(error_dict)``."""

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], Either[E, U]]) -> Either[E, U]:
        return f(self._value)

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], Either[E, U]]) -> Either[E, U]:
        return self

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _amount_error(record_id: str, error: str, message: str) -> Left:
    return Left({
        "error": error,
        "message": f"Amount of record {record_id} {message}",
        "field": "amount",
        "id": record_id,
    })


def _check_amount(record_id: str, amount, allow_zero: bool) -> Either[dict, object]:
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        return _amount_error(record_id, "invalid_amount", f"is not a number: {amount!r}")
    if not math.isfinite(amount):
        return _amount_error(record_id, "invalid_amount", f"is not finite: {amount!r}")
    if amount < 0:
        return _amount_error(record_id, "negative_amount", f"is negative: {amount!r}")
    # budgets may be zero, an expense always costs something
    if amount == 0 and not allow_zero:
        return _amount_error(record_id, "zero_amount", "is zero")
    return Right(amount)


def _check_category(record_id: str, category) -> Either[dict, Category]:
    try:
        return Right(Category.parse(category))
    except UnknownCategoryError as e:
        return Left({"error": "unknown_category", "message": f"Record {record_id}: {e}",
                     "field": "category", "id": record_id})


def _check_owner(record_id: str, user_id) -> Either[dict, str]:
    if not isinstance(user_id, str) or not user_id:
        return Left({"error": "missing_owner", "message": f"Record {record_id} has no owner",
                     "field": "user_id", "id": record_id})
    return Right(user_id)


def _check_parsed(record_id: str, parser: Callable[[str], object], value: str) -> Either[dict, object]:
    try:
        return Right(parser(value))
    except InvalidRecordError as e:
        return Left({"error": f"invalid_{e.field}", "message": f"Record {record_id}: {e}",
                     "field": e.field, "id": record_id})


def validate_expense(e: Expense) -> Either[dict, Expense]:
    return (
        _check_amount(e.id, e.amount, allow_zero=False)
        .bind(lambda _: _check_category(e.id, e.category))
        .bind(lambda _: _check_parsed(e.id, parse_date, e.date))
        .bind(lambda _: _check_owner(e.id, e.user_id))
        .bind(lambda _: Right(e))
    )


def validate_budget(b: Budget) -> Either[dict, Budget]:
    return (
        _check_amount(b.id, b.amount, allow_zero=True)
        .bind(lambda _: _check_category(b.id, b.category))
        .bind(lambda _: _check_parsed(b.id, parse_month, b.month))
        .bind(lambda _: _check_owner(b.id, b.user_id))
        .bind(lambda _: Right(b))
    )


def _raise_for(error: dict) -> None:
    cls = UnknownCategoryError if error["error"] == "unknown_category" else InvalidRecordError
    raise cls(error["message"], record_id=error["id"], field=error["field"])


def ensure_valid(expenses: Iterable[Expense] = (), budgets: Iterable[Budget] = ()) -> None:
    """Raise on the first malformed record instead of letting it reach the arithmetic."""
    for e in expenses:
        result = validate_expense(e)
        if result.is_left():
            _raise_for(result.get_error())
    for b in budgets:
        result = validate_budget(b)
        if result.is_left():
            _raise_for(result.get_error())


def ensure_single_owner(expenses: Iterable[Expense] = (), budgets: Iterable[Budget] = ()) -> None:
    owners = {r.user_id for r in expenses} | {r.user_id for r in budgets}
    if len(owners) > 1:
        raise MixedOwnerError(owners)


def find_budget(budgets: Iterable[Budget], category: Category, month: str) -> Maybe[Budget]:
    matches = [b for b in budgets if b.category == category and b.month == month]
    if not matches:
        return Nothing()
    if len(matches) > 1:
        logger.warning(
            "%d budgets for %s in %s, using %s", len(matches), category, month, matches[0].id
        )
    return Some(matches[0])


def collect_errors(expenses: Iterable[Expense] = (), budgets: Iterable[Budget] = ()) -> list[dict]:
    """All validation errors at once, for showing a data-integrity report."""
    results = [validate_expense(e) for e in expenses] + [validate_budget(b) for b in budgets]
    return [r.get_error() for r in results if r.is_left()]


__all__ = [
    "Maybe", "Some", "Nothing", "Either", "Left", "Right",
    "validate_expense", "validate_budget", "ensure_valid", "ensure_single_owner",
    "find_budget", "collect_errors",
]
