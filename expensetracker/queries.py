"""Aggregate queries shared by the expense and budget blueprints."""
import logging
from datetime import date

from sqlalchemy import func
from sqlalchemy.dialects import mysql, postgresql, sqlite

from .extensions import db
from .models import Budget, Expense

logger = logging.getLogger(__name__)


def month_bounds(month: str):
    """First day of ``month`` and first day of the following month."""
    year, mon = (int(p) for p in month.split("-"))
    start = date(year, mon, 1)
    end = date(year + 1, 1, 1) if mon == 12 else date(year, mon + 1, 1)
    return start, end


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_label(column):
    """SQL expression rendering a date column as 'YYYY-MM'."""
    dialect = db.engine.dialect.name
    if dialect == "postgresql":
        return func.to_char(column, "YYYY-MM")
    if dialect in ("mysql", "mariadb"):
        return func.date_format(column, "%Y-%m")
    return func.strftime("%Y-%m", column)


def in_month(user_id, month):
    start, end = month_bounds(month)
    return (Expense.user_id == user_id, Expense.date >= start, Expense.date < end)


def spend_by_category(user_id, month):
    """Rows of (category, spent) for one user and month."""
    total = func.coalesce(func.sum(Expense.amount), 0.0)
    return (
        db.session.query(Expense.category.label("category"), total.label("spent"))
        .filter(*in_month(user_id, month))
        .group_by(Expense.category)
        .order_by(total.desc())
        .all()
    )


def budgets_for_month(user_id, month):
    return (
        db.session.query(Budget.category, Budget.amount)
        .filter(Budget.user_id == user_id, Budget.month == month)
        .order_by(Budget.id)
        .all()
    )


def upsert_budget(user_id, month, category, amount):
    """Insert or update the single budget row for (user, month, category).

    Returns ``(budget, created)``.
    """
    created = Budget.query.filter_by(user_id=user_id, month=month, category=category).first() is None
    values = {"user_id": user_id, "month": month, "category": category, "amount": amount}
    dialect = db.engine.dialect.name
    if dialect in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(Budget).values(**values).on_conflict_do_update(
            index_elements=["user_id", "month", "category"],
            set_={"amount": amount},
        )
        db.session.execute(stmt)
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(Budget).values(**values).on_duplicate_key_update(amount=amount)
        db.session.execute(stmt)
    else:
        budget = Budget.query.filter_by(user_id=user_id, month=month, category=category).first()
        if budget:
            budget.amount = amount
        else:
            db.session.add(Budget(**values))
    db.session.commit()
    budget = Budget.query.filter_by(user_id=user_id, month=month, category=category).one()
    logger.debug("Budget %s for user %s %s", "created" if created else "updated", user_id, month)
    return budget, created
