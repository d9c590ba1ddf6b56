import math
import re
from datetime import date

from flask import request

from .errors import ValidationError

MONTH_RE = re.compile(r"\d{4}-(0[1-9]|1[0-2])")
DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})(T[0-9:.]+(Z|[+-]\d{2}:?\d{2})?)?")


def get_json():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_fields(data, fields, message="Please provide all required fields"):
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def require_strings(data, fields):
    """Fields that are present must be JSON strings."""
    for name in fields:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{name} must be a string")


def parse_amount(value):
    """Positive, finite amount from a JSON number or numeric string."""
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    return amount


def parse_date(value, field="date"):
    match = DATE_RE.fullmatch(value) if isinstance(value, str) else None
    try:
        if match is None:
            raise ValueError(value)
        return date.fromisoformat(match.group(1))
    except ValueError:
        raise ValidationError(f"Invalid {field}, expected YYYY-MM-DD")


def parse_optional_date(value, field):
    if not value:
        return None
    return parse_date(value, field)


def parse_month(value):
    if not value or not isinstance(value, str) or not MONTH_RE.fullmatch(value):
        raise ValidationError("Invalid month, expected YYYY-MM")
    return value
