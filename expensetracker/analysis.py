"""Budget-vs-actual analysis for one user and one month.

``analyze`` is a pure function over rows that were already aggregated by
the database: budget rows ``(category, amount)`` and spending rows
``(category, spent)``. Rows may be mappings or objects exposing those
names as attributes (e.g. SQLAlchemy result rows).
"""
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List

WARNING_THRESHOLD = 80
OVER_THRESHOLD = 100


@dataclass(frozen=True)
class CategoryAnalysis:
    category: str
    budgeted: float
    spent: float
    remaining: float
    percentage: float  # capped at 100 for display
    status: str


@dataclass(frozen=True)
class AnalysisSummary:
    budgeted: float
    spent: float
    remaining: float
    percentage: float


@dataclass(frozen=True)
class BudgetAnalysis:
    categories: List[CategoryAnalysis]
    summary: AnalysisSummary

    def to_dict(self):
        return {
            "categories": [asdict(c) for c in self.categories],
            "summary": asdict(self.summary),
        }


def _field(row: Any, name: str):
    if isinstance(row, dict):
        return row[name]
    return getattr(row, name)


def classify(raw_percentage: float) -> str:
    """Status from the uncapped spent/budgeted percentage."""
    if raw_percentage > OVER_THRESHOLD:
        return "over"
    if raw_percentage > WARNING_THRESHOLD:
        return "warning"
    return "good"


def analyze(budgets: Iterable[Any], actuals: Iterable[Any]) -> BudgetAnalysis:
    spent_by_category = {}
    for row in actuals:
        spent_by_category[_field(row, "category")] = _field(row, "spent") or 0

    categories = []
    total_budgeted = 0
    total_spent = 0
    for row in budgets:
        category = _field(row, "category")
        budgeted = _field(row, "amount")
        spent = spent_by_category.get(category, 0)
        raw_percentage = spent * 100 / budgeted if budgeted > 0 else 0
        categories.append(CategoryAnalysis(
            category=category,
            budgeted=budgeted,
            spent=spent,
            remaining=budgeted - spent,
            percentage=min(raw_percentage, 100),
            status=classify(raw_percentage),
        ))
        total_budgeted += budgeted
        total_spent += spent

    # spending in categories without a budget row is left out of the totals
    summary = AnalysisSummary(
        budgeted=total_budgeted,
        spent=total_spent,
        remaining=total_budgeted - total_spent,
        percentage=total_spent * 100 / total_budgeted if total_budgeted > 0 else 0,
    )
    return BudgetAnalysis(categories=categories, summary=summary)
