from dataclasses import dataclass
from enum import Enum
from typing import Optional

from engine.errors import UnknownCategoryError


class Category(str, Enum):
    HOUSING = "Housing"
    TRANSPORTATION = "Transportation"
    FOOD = "Food"
    UTILITIES = "Utilities"
    INSURANCE = "Insurance"
    HEALTHCARE = "Healthcare"
    ENTERTAINMENT = "Entertainment"
    PERSONAL = "Personal"
    EDUCATION = "Education"
    SAVINGS = "Savings"
    OTHER = "Other"

    @classmethod
    def parse(cls, value) -> "Category":
        try:
            return cls(value)
        except ValueError:
            raise UnknownCategoryError(f"Unknown category: {value!r}", field="category") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Expense:
    id: str
    amount: float
    category: Category
    date: str        # "YYYY-MM-DD"
    user_id: str
    description: str = ""


@dataclass(frozen=True)
class Budget:
    id: str
    category: Category
    amount: float
    month: str       # "YYYY-MM"
    user_id: str


@dataclass(frozen=True)
class CategoryTotal:
    category: Category
    total: float
    budget: Optional[float] = None
    percentage: Optional[float] = None


@dataclass(frozen=True)
class MonthlyTotal:
    month: str       # "YYYY-MM", labels are applied by the front end
    total: float


@dataclass(frozen=True)
class DashboardSummary:
    month: str
    total_monthly_expense: float
    total_monthly_budget: float
    budget_usage_percent: float
    average_daily_expense: float
    all_time_total: float

    @property
    def over_budget(self) -> bool:
        return self.budget_usage_percent > 100


# One row of the per-category overview (every category, current month)
@dataclass(frozen=True)
class CategoryStat:
    category: Category
    total_spent: float
    budget_amount: float
    percent_used: float   # capped at 100 for progress bars
    over_budget: bool
    transaction_count: int
    all_time_spent: float


@dataclass(frozen=True)
class BudgetUsage:
    budget: Budget
    spent: float
    percentage: float
    over_budget: bool

    @property
    def remaining(self) -> float:
        return self.budget.amount - self.spent
