import copy
import math

import pytest

from engine.aggregation import category_breakdown, category_stats, category_totals
from engine.domain import Budget, Category, CategoryTotal, Expense
from engine.errors import InvalidRecordError, MixedOwnerError, UnknownCategoryError


def make_tx(id, amount, category, date, user_id="u1"):
    return Expense(id=id, amount=amount, category=category, date=date, user_id=user_id)


def make_budget(id, category, amount, month, user_id="u1"):
    return Budget(id=id, category=category, amount=amount, month=month, user_id=user_id)


def march_sample():
    expenses = [
        make_tx("e1", 100, Category.FOOD, "2024-03-05"),
        make_tx("e2", 50, Category.FOOD, "2024-03-20"),
        make_tx("e3", 30, Category.TRANSPORTATION, "2024-03-10"),
    ]
    budgets = [make_budget("b1", Category.FOOD, 120, "2024-03")]
    return expenses, budgets


def test_category_totals_march_example():
    expenses, budgets = march_sample()
    result = category_totals(expenses, budgets, "2024-10", month="2024-03")
    assert result == (
        CategoryTotal(category=Category.FOOD, total=150, budget=120, percentage=125),
        CategoryTotal(category=Category.TRANSPORTATION, total=30),
    )
    assert result[1].budget is None
    assert result[1].percentage is None


def test_month_filter_excludes_other_months():
    expenses, budgets = march_sample()
    expenses.append(make_tx("e4", 999, Category.FOOD, "2024-04-01"))
    result = category_totals(expenses, budgets, "2024-04", month="2024-03")
    assert result[0].total == 150


def test_all_time_uses_current_month_budgets():
    expenses, _ = march_sample()
    expenses.append(make_tx("e4", 50, Category.FOOD, "2024-04-02"))
    budgets = [
        make_budget("b1", Category.FOOD, 120, "2024-03"),
        make_budget("b2", Category.FOOD, 400, "2024-04"),
    ]
    result = category_totals(expenses, budgets, "2024-04")
    food = result[0]
    assert food.total == 200
    assert food.budget == 400
    assert food.percentage == 50


def test_sum_conservation_all_time():
    expenses = [
        make_tx("e1", 12.5, Category.FOOD, "2023-01-05"),
        make_tx("e2", 7.25, Category.HOUSING, "2023-06-01"),
        make_tx("e3", 100, Category.OTHER, "2024-03-10"),
        make_tx("e4", 0.1, Category.FOOD, "2024-11-30"),
        make_tx("e5", 0.2, Category.SAVINGS, "2025-02-28"),
    ]
    result = category_totals(expenses, [], "2025-02")
    assert sum(ct.total for ct in result) == pytest.approx(sum(e.amount for e in expenses))


def test_ties_keep_first_encounter_order():
    expenses = [
        make_tx("e1", 40, Category.UTILITIES, "2024-03-01"),
        make_tx("e2", 25, Category.HEALTHCARE, "2024-03-02"),
        make_tx("e3", 40, Category.EDUCATION, "2024-03-03"),
        make_tx("e4", 15, Category.HEALTHCARE, "2024-03-04"),
    ]
    result = category_totals(expenses, [], "2024-03")
    assert [ct.category for ct in result] == [Category.UTILITIES, Category.HEALTHCARE, Category.EDUCATION]


def test_zero_budget_has_no_percentage():
    expenses, _ = march_sample()
    budgets = [make_budget("b1", Category.FOOD, 0, "2024-03")]
    food = category_totals(expenses, budgets, "2024-03", month="2024-03")[0]
    assert food.budget == 0
    assert food.percentage is None


def test_duplicate_budgets_pick_first():
    expenses, _ = march_sample()
    budgets = [
        make_budget("b1", Category.FOOD, 300, "2024-03"),
        make_budget("b2", Category.FOOD, 150, "2024-03"),
    ]
    food = category_totals(expenses, budgets, "2024-03", month="2024-03")[0]
    assert food.budget == 300
    assert food.percentage == 50


def test_empty_input_gives_empty_output():
    assert category_totals([], [], "2024-03") == ()
    assert category_totals([], [], "2024-03", month="2024-01") == ()


def test_inputs_untouched_and_repeatable():
    expenses, budgets = march_sample()
    before = copy.deepcopy((expenses, budgets))
    first = category_totals(expenses, budgets, "2024-03", month="2024-03")
    second = category_totals(expenses, budgets, "2024-03", month="2024-03")
    assert first == second
    assert (expenses, budgets) == before


def test_category_strings_are_normalized():
    expenses = [make_tx("e1", 10, "Food", "2024-03-01"), make_tx("e2", 5, Category.FOOD, "2024-03-02")]
    result = category_totals(expenses, [], "2024-03")
    assert len(result) == 1
    assert result[0].category is Category.FOOD
    assert result[0].total == 15


def test_malformed_records_fail_loudly():
    with pytest.raises(InvalidRecordError):
        category_totals([make_tx("e1", math.nan, Category.FOOD, "2024-03-01")], [], "2024-03")
    with pytest.raises(InvalidRecordError):
        category_totals([make_tx("e1", 10, Category.FOOD, "03/01/2024")], [], "2024-03")
    with pytest.raises(UnknownCategoryError):
        category_totals([make_tx("e1", 10, "Crypto", "2024-03-01")], [], "2024-03")
    with pytest.raises(InvalidRecordError):
        category_totals([], [], "2024-03", month="March")


def test_mixed_owners_rejected():
    with pytest.raises(MixedOwnerError):
        category_totals(
            [make_tx("e1", 10, Category.FOOD, "2024-03-01"), make_tx("e2", 10, Category.FOOD, "2024-03-01", "u2")],
            [],
            "2024-03",
        )


def test_category_breakdown_ignores_budgets_and_other_months():
    expenses, _ = march_sample()
    expenses.append(make_tx("e4", 70, Category.HOUSING, "2024-02-28"))
    result = category_breakdown(expenses, "2024-03")
    assert [(ct.category, ct.total) for ct in result] == [(Category.FOOD, 150), (Category.TRANSPORTATION, 30)]
    assert all(ct.budget is None for ct in result)


def test_category_stats_dense_over_enumeration():
    expenses, budgets = march_sample()
    expenses.append(make_tx("e4", 20, Category.FOOD, "2024-01-15"))
    budgets.append(make_budget("b2", Category.TRANSPORTATION, 60, "2024-03"))
    stats = category_stats(expenses, budgets, "2024-03")

    assert [s.category for s in stats] == list(Category)
    by_cat = {s.category: s for s in stats}

    food = by_cat[Category.FOOD]
    assert food.total_spent == 150
    assert food.budget_amount == 120
    assert food.percent_used == 100
    assert food.over_budget is True
    assert food.transaction_count == 2
    assert food.all_time_spent == 170

    transport = by_cat[Category.TRANSPORTATION]
    assert transport.percent_used == 50
    assert transport.over_budget is False

    housing = by_cat[Category.HOUSING]
    assert housing.total_spent == 0
    assert housing.budget_amount == 0
    assert housing.percent_used == 0
    assert housing.transaction_count == 0


def test_budget_month_with_trailing_newline_fails_loudly():
    expenses, _ = march_sample()
    with pytest.raises(InvalidRecordError):
        category_totals(expenses, [make_budget("b1", Category.FOOD, 120, "2024-03\n")], "2024-03", month="2024-03")
    with pytest.raises(InvalidRecordError):
        category_totals(expenses, [], "2024-03", month="２０２４-03")
