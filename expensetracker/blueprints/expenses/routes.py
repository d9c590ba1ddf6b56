import csv
import logging
from datetime import date
from io import StringIO

from flask import Blueprint, jsonify, make_response, request
from flask_login import login_required, current_user
from sqlalchemy import func

from ...errors import NotFoundError, ValidationError
from ...extensions import db
from ...filtering import ExpenseFilter, SortSpec, view_expenses
from ...models import Category, Expense
from ...queries import in_month, month_label, shift_month, spend_by_category
from ...validation import (
    get_json, parse_amount, parse_date, parse_month, parse_optional_date, require_fields, require_strings,
)

logger = logging.getLogger(__name__)

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


def _owned_expense(expense_id):
    exp = Expense.query.filter_by(id=expense_id, user_id=current_user.id).first()
    if exp is None:
        raise NotFoundError("Expense not found")
    return exp


def _expense_fields(data):
    require_fields(data, ("description", "amount", "category", "date"))
    require_strings(data, ("description", "category"))
    return {
        "description": data["description"].strip(),
        "amount": parse_amount(data["amount"]),
        "category": data["category"].strip(),
        "date": parse_date(data["date"]),
    }


def _filtered_view():
    args = request.args
    criteria = ExpenseFilter(
        keyword=args.get("keyword", "").strip(),
        category=args.get("category", "").strip(),
        date_from=parse_optional_date(args.get("dateFrom"), "dateFrom"),
        date_to=parse_optional_date(args.get("dateTo"), "dateTo"),
    )
    try:
        spec = SortSpec(key=args.get("sort", "date"), direction=args.get("direction", "desc"))
    except ValueError as exc:
        raise ValidationError(str(exc))
    rows = (
        db.session.query(Expense, Category.color)
        .outerjoin(Category, Expense.category == Category.name)
        .filter(Expense.user_id == current_user.id)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )
    records = [dict(exp.to_dict(), category_color=color) for exp, color in rows]
    return view_expenses(records, criteria, spec)


@expenses_bp.route("", methods=["GET"])
@login_required
def list_expenses():
    view = _filtered_view()
    return jsonify({"expenses": view.expenses, "total": view.total, "count": len(view.expenses)})


@expenses_bp.route("/<int:expense_id>", methods=["GET"])
@login_required
def get_expense(expense_id):
    return jsonify(_owned_expense(expense_id).to_dict())


@expenses_bp.route("", methods=["POST"])
@login_required
def create_expense():
    fields = _expense_fields(get_json())
    exp = Expense(user_id=current_user.id, **fields)
    db.session.add(exp)
    db.session.commit()
    logger.debug("Created expense %s for user %s", exp.id, current_user.id)
    return jsonify(exp.to_dict()), 201


@expenses_bp.route("/<int:expense_id>", methods=["PUT"])
@login_required
def update_expense(expense_id):
    exp = _owned_expense(expense_id)
    for name, value in _expense_fields(get_json()).items():
        setattr(exp, name, value)
    db.session.commit()
    return jsonify(exp.to_dict())


@expenses_bp.route("/<int:expense_id>", methods=["DELETE"])
@login_required
def delete_expense(expense_id):
    exp = _owned_expense(expense_id)
    db.session.delete(exp)
    db.session.commit()
    return jsonify({"message": "Expense deleted successfully"})


@expenses_bp.route("/stats/summary")
@login_required
def stats_summary():
    month = parse_month(request.args.get("month") or date.today().strftime("%Y-%m"))
    month_filter = in_month(current_user.id, month)

    total = db.session.query(func.coalesce(func.sum(Expense.amount), 0.0)).filter(*month_filter).scalar()
    highest = (
        Expense.query.filter(*month_filter)
        .order_by(Expense.amount.desc(), Expense.id)
        .first()
    )
    by_category = [
        {"category": category, "total": float(spent)}
        for category, spent in spend_by_category(current_user.id, month)
    ]
    return jsonify({
        "month": month,
        "totalExpenses": float(total or 0.0),
        "highestExpense": (
            {"amount": highest.amount, "category": highest.category}
            if highest else {"amount": 0, "category": "None"}
        ),
        "expensesByCategory": by_category,
    })


@expenses_bp.route("/stats/monthly")
@login_required
def stats_monthly():
    try:
        months = int(request.args.get("months", 6))
    except ValueError:
        raise ValidationError("months must be an integer")
    if not 1 <= months <= 60:
        raise ValidationError("months must be between 1 and 60")

    since = shift_month(date.today(), -(months - 1))
    label = month_label(Expense.date)
    rows = (
        db.session.query(label.label("month"), func.sum(Expense.amount).label("total"))
        .filter(Expense.user_id == current_user.id, Expense.date >= since)
        .group_by(label)
        .order_by(label)
        .all()
    )
    return jsonify([{"month": m, "total": float(t)} for m, t in rows])


@expenses_bp.route("/export.csv")
@login_required
def export_csv():
    view = _filtered_view()
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Description", "Category", "Amount", "Date"])
    for exp in view.expenses:
        writer.writerow([exp["description"], exp["category"], f"{exp['amount']:.2f}", exp["date"]])
    response = make_response(output.getvalue())
    response.headers["Content-Disposition"] = "attachment; filename=expenses.csv"
    response.headers["Content-Type"] = "text/csv"
    return response
