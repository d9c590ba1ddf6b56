import logging
from datetime import datetime

from flask import request
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from flask_login import UserMixin
from jwt import PyJWTError
from werkzeug.security import generate_password_hash, check_password_hash

from ..errors import AuthenticationError, InvalidTokenError
from ..extensions import db, login_manager

logger = logging.getLogger(__name__)


class User(UserMixin, db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    expenses = db.relationship("Expense", backref="user", lazy=True, cascade="all, delete-orphan")
    budgets = db.relationship("Budget", backref="user", lazy=True, cascade="all, delete-orphan")

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def issue_token(self) -> str:
        """Signed access token carrying the user id and email."""
        return create_access_token(identity=str(self.id), additional_claims={"email": self.email})

    def to_public_dict(self):
        return {"id": self.id, "name": self.name, "email": self.email}

    def to_profile_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def _bearer_token(header):
    parts = (header or "").split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


@login_manager.request_loader
def load_user_from_request(req):
    header = req.headers.get("Authorization")
    if not header:
        return None
    token = _bearer_token(header)
    if token is None:
        raise InvalidTokenError("Invalid or expired token")
    try:
        payload = decode_token(token)
        user_id = int(payload["sub"])
    except (PyJWTError, JWTExtendedException, KeyError, ValueError) as exc:
        logger.info("Rejected token: %s", exc)
        raise InvalidTokenError("Invalid or expired token")
    user = db.session.get(User, user_id)
    if user is None:
        raise InvalidTokenError("Invalid or expired token")
    return user


@login_manager.unauthorized_handler
def unauthorized():
    logger.info("Unauthenticated request to %s", request.path)
    raise AuthenticationError("Access denied")
