import logging

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from ...errors import ConflictError, ValidationError
from ...extensions import db
from ...models import User
from ...validation import get_json, require_fields, require_strings

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


def _auth_payload(user):
    return {"token": user.issue_token(), "user": user.to_public_dict()}


@users_bp.route("/register", methods=["POST"])
def register():
    data = get_json()
    require_fields(data, ("name", "email", "password"))
    require_strings(data, ("name", "email", "password"))
    email = data["email"].strip().lower()
    if User.query.filter_by(email=email).first():
        raise ConflictError("Email already in use")
    user = User(name=data["name"].strip(), email=email)
    user.set_password(data["password"])
    db.session.add(user)
    db.session.commit()
    logger.info("Registered user %s", user.id)
    return jsonify(_auth_payload(user)), 201


@users_bp.route("/login", methods=["POST"])
def login():
    data = get_json()
    require_fields(data, ("email", "password"), "Please provide email and password")
    require_strings(data, ("email", "password"))
    user = User.query.filter_by(email=data["email"].strip().lower()).first()
    if not user or not user.check_password(data["password"]):
        logger.info("Failed login attempt")
        raise ValidationError("Invalid email or password")
    return jsonify(_auth_payload(user))


@users_bp.route("/profile", methods=["GET"])
@login_required
def get_profile():
    return jsonify(current_user.to_profile_dict())


@users_bp.route("/profile", methods=["PUT"])
@login_required
def update_profile():
    data = get_json()
    require_strings(data, ("name", "email", "currentPassword", "newPassword"))
    user = current_user
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()

    if email and email != user.email:
        taken = User.query.filter(User.email == email, User.id != user.id).first()
        if taken:
            raise ConflictError("Email already in use")

    current_password = data.get("currentPassword")
    new_password = data.get("newPassword")
    if current_password and new_password:
        if not user.check_password(current_password):
            raise ValidationError("Current password is incorrect")
        user.set_password(new_password)

    if name:
        user.name = name
    if email:
        user.email = email
    db.session.commit()
    return jsonify(user.to_profile_dict())
