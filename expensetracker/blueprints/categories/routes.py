import logging

from flask import Blueprint, jsonify
from flask_login import login_required
from sqlalchemy import func

from ...errors import ConflictError, NotFoundError, ValidationError
from ...extensions import db
from ...models import Category, Expense
from ...models.category import DEFAULT_COLOR
from ...validation import get_json, require_fields, require_strings

logger = logging.getLogger(__name__)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


def _name_taken(name, exclude_id=None):
    q = Category.query.filter(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    return q.first() is not None


def _get_category(category_id):
    cat = db.session.get(Category, category_id)
    if cat is None:
        raise NotFoundError("Category not found")
    return cat


@categories_bp.route("", methods=["GET"])
@login_required
def list_categories():
    cats = Category.query.order_by(Category.name).all()
    return jsonify([c.to_dict() for c in cats])


@categories_bp.route("", methods=["POST"])
@login_required
def create_category():
    data = get_json()
    require_fields(data, ("name",), "Please provide a category name")
    require_strings(data, ("name", "color"))
    name = data["name"].strip()
    if _name_taken(name):
        raise ConflictError("Category already exists")
    cat = Category(name=name, color=data.get("color") or DEFAULT_COLOR)
    db.session.add(cat)
    db.session.commit()
    logger.info("Created category %r", name)
    return jsonify(cat.to_dict()), 201


@categories_bp.route("/<int:category_id>", methods=["PUT"])
@login_required
def update_category(category_id):
    data = get_json()
    require_fields(data, ("name",), "Please provide a category name")
    require_strings(data, ("name", "color"))
    cat = _get_category(category_id)
    name = data["name"].strip()
    if _name_taken(name, exclude_id=cat.id):
        raise ConflictError("Category name already exists")
    # expenses and budgets keep the old name
    cat.name = name
    cat.color = data.get("color") or DEFAULT_COLOR
    db.session.commit()
    return jsonify(cat.to_dict())


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
@login_required
def delete_category(category_id):
    cat = _get_category(category_id)
    # Prevent deletion if referenced by any expenses
    used = Expense.query.filter_by(category=cat.name).first()
    if used:
        raise ValidationError(
            "Cannot delete category because it is used in expenses. "
            "Update or delete those expenses first."
        )
    db.session.delete(cat)
    db.session.commit()
    return jsonify({"message": "Category deleted successfully"})
