import logging
from typing import Any, Callable, Dict, Sequence

from engine.aggregation import category_breakdown, category_stats, category_totals
from engine.dashboard import budget_usage, dashboard_summary
from engine.events import Snapshot
from engine.trends import monthly_totals, trend_percentage
from engine.validation import ensure_single_owner, ensure_valid

logger = logging.getLogger(__name__)

Validator = Callable[[Sequence, Sequence], None]
Calculator = Callable[..., Dict[str, Any]]


def calc_summary(expenses, budgets, month, trend_months, acc):
    return {"summary": dashboard_summary(expenses, budgets, month)}


def calc_month_categories(expenses, budgets, month, trend_months, acc):
    return {"month_categories": category_totals(expenses, budgets, month, month=month)}


def calc_all_time_categories(expenses, budgets, month, trend_months, acc):
    return {"all_time_categories": category_totals(expenses, budgets, month)}


def calc_breakdown(expenses, budgets, month, trend_months, acc):
    return {"breakdown": category_breakdown(expenses, month)}


def calc_trend(expenses, budgets, month, trend_months, acc):
    trend = monthly_totals(expenses, month, trend_months)
    return {"trend": trend, "trend_change": trend_percentage(trend)}


def calc_category_stats(expenses, budgets, month, trend_months, acc):
    return {"category_stats": category_stats(expenses, budgets, month)}


def calc_budget_usage(expenses, budgets, month, trend_months, acc):
    return {"budget_usage": budget_usage(expenses, budgets)}


DEFAULT_VALIDATORS: tuple[Validator, ...] = (ensure_valid, ensure_single_owner)
DEFAULT_CALCULATORS: tuple[Calculator, ...] = (
    calc_summary,
    calc_month_categories,
    calc_all_time_categories,
    calc_breakdown,
    calc_trend,
    calc_category_stats,
    calc_budget_usage,
)


class ReportService:
    """Builds every derived view of one snapshot in a single pass.

    validators: functions taking (expenses, budgets) that raise on bad data
    calculators: functions taking (expenses, budgets, month, trend_months, acc) -> dict (partial results)
    """

    def __init__(
        self,
        validators: Sequence[Validator] = DEFAULT_VALIDATORS,
        calculators: Sequence[Calculator] = DEFAULT_CALCULATORS,
    ):
        self.validators = validators
        self.calculators = calculators

    def build(self, expenses: Sequence, budgets: Sequence, month: str, trend_months: int = 6) -> Dict[str, Any]:
        """Run validators, then calculators in order, and return the report with each step."""
        expenses, budgets = tuple(expenses), tuple(budgets)
        for v in self.validators:
            v(expenses, budgets)

        report = {"month": month, "steps": [], "result": {}}
        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(expenses, budgets, month, trend_months, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            acc.update(out)

        report["result"] = acc
        logger.debug("built report for %s with %d steps", month, len(report["steps"]))
        return report

    def build_snapshot(self, snapshot: Snapshot, month: str, trend_months: int = 6) -> Dict[str, Any]:
        report = self.build(snapshot.expenses, snapshot.budgets, month, trend_months)
        report["version"] = snapshot.version
        return report
