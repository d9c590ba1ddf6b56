from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from ...analysis import analyze
from ...errors import NotFoundError
from ...extensions import db
from ...models import Budget, Category
from ...queries import budgets_for_month, spend_by_category, upsert_budget
from ...validation import get_json, parse_amount, parse_month, require_fields, require_strings

budgets_bp = Blueprint("budgets", __name__, url_prefix="/api/budgets")


def _with_colors(query):
    rows = (
        query.add_columns(Category.color)
        .outerjoin(Category, Budget.category == Category.name)
        .order_by(Budget.category)
        .all()
    )
    return [dict(b.to_dict(), category_color=color) for b, color in rows]


@budgets_bp.route("", methods=["GET"])
@login_required
def list_budgets():
    q = db.session.query(Budget).filter(Budget.user_id == current_user.id).order_by(Budget.month.desc())
    return jsonify(_with_colors(q))


@budgets_bp.route("/<month>", methods=["GET"])
@login_required
def month_budgets(month):
    month = parse_month(month)
    q = db.session.query(Budget).filter(Budget.user_id == current_user.id, Budget.month == month)
    return jsonify(_with_colors(q))


@budgets_bp.route("", methods=["POST"])
@login_required
def save_budget():
    data = get_json()
    require_fields(data, ("month", "category", "amount"), "Please provide month, category and amount")
    require_strings(data, ("month", "category"))
    budget, created = upsert_budget(
        current_user.id,
        parse_month(data["month"]),
        data["category"].strip(),
        parse_amount(data["amount"]),
    )
    return jsonify(budget.to_dict()), 201 if created else 200


@budgets_bp.route("/<int:budget_id>", methods=["DELETE"])
@login_required
def delete_budget(budget_id):
    b = Budget.query.filter_by(id=budget_id, user_id=current_user.id).first()
    if b is None:
        raise NotFoundError("Budget not found or not authorized")
    db.session.delete(b)
    db.session.commit()
    return jsonify({"message": "Budget deleted successfully"})


@budgets_bp.route("/analysis/<month>", methods=["GET"])
@login_required
def budget_analysis(month):
    month = parse_month(month)
    result = analyze(
        budgets_for_month(current_user.id, month),
        spend_by_category(current_user.id, month),
    )
    return jsonify({"month": month, **result.to_dict()})
