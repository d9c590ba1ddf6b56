"""Filtering, sorting and totalling of an expense list.

Works on ``Expense`` model instances or plain dicts carrying
``description``, ``category``, ``date`` and ``amount``.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

SORT_KEYS = ("description", "category", "date", "amount")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass
class ExpenseFilter:
    keyword: str = ""
    category: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None


@dataclass
class SortSpec:
    key: str = "date"
    direction: str = "desc"

    def __post_init__(self):
        if self.key not in SORT_KEYS:
            raise ValueError(f"Invalid sort key: {self.key}")
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Invalid sort direction: {self.direction}")


@dataclass
class ExpenseView:
    expenses: List[Any]
    total: float


def _get(expense, name):
    if isinstance(expense, dict):
        return expense[name]
    return getattr(expense, name)


def _as_date(value):
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def matches(expense, criteria: ExpenseFilter) -> bool:
    if criteria.keyword:
        keyword = criteria.keyword.lower()
        if keyword not in _get(expense, "description").lower() and keyword not in _get(expense, "category").lower():
            return False
    if criteria.category and _get(expense, "category") != criteria.category:
        return False
    spent_on = _as_date(_get(expense, "date"))
    if criteria.date_from and spent_on < criteria.date_from:
        return False
    if criteria.date_to and spent_on > criteria.date_to:
        return False
    return True


def filter_expenses(expenses, criteria: ExpenseFilter):
    return [e for e in expenses if matches(e, criteria)]


def sort_expenses(expenses, spec: SortSpec):
    # sorted() is stable, and stays stable with reverse=True
    if spec.key == "date":
        key = lambda e: _as_date(_get(e, "date"))
    else:
        key = lambda e: _get(e, spec.key)
    return sorted(expenses, key=key, reverse=spec.direction == "desc")


def total_amount(expenses) -> float:
    return sum(_get(e, "amount") for e in expenses)


def view_expenses(expenses, criteria: Optional[ExpenseFilter] = None, spec: Optional[SortSpec] = None) -> ExpenseView:
    rows = filter_expenses(expenses, criteria or ExpenseFilter())
    rows = sort_expenses(rows, spec or SortSpec())
    return ExpenseView(expenses=rows, total=total_amount(rows))
