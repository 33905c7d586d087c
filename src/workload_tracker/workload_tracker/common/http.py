from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

import structlog
from flask import Flask, abort, jsonify, request, session

from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .datetime_utils import parse_iso_date

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)


def serialize(value: Any) -> Any:
    """Turn models (dataclasses), enums, dates and decimals into JSON-ready values."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [serialize(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def ok(data: Any = None, message: str = "", status: int = 200):
    return jsonify({"success": True, "data": serialize(data), "message": message}), status


def fail(message: str, status: int, code: Optional[str] = None):
    return jsonify({"success": False, "message": message, "code": code}), status


def current_caller(users: UserRepository) -> User:
    """Resolve the caller from the session populated by the authentication layer."""

    user_id = session.get("user_id")
    if user_id is None:
        abort(401)
    user = users.get_by_id(int(user_id))
    if not user or not user.is_active:
        abort(401)
    return user


def json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", code="required")
    return body


def required(body: dict, key: str) -> Any:
    value = body.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required", code="required")
    return value


def int_field(body: dict, key: str) -> int:
    value = required(body, key)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{key} must be an integer", code="required")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{key} must be an integer", code="required")


def date_field(body: dict, key: str, *, optional: bool = False) -> Optional[date]:
    value = body.get(key) if optional else required(body, key)
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD)", code="required")


def enum_field(enum_cls, body: dict, key: str, *, default=None):
    value = body.get(key)
    if value is None and default is not None:
        return default
    try:
        return enum_cls(required(body, key))
    except ValueError:
        raise ValidationError(f"{key} is not valid", code="required")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def domain_error(error: DomainError):
        for error_cls, status in _STATUS_BY_ERROR:
            if isinstance(error, error_cls):
                return fail(error.message, status, error.code)
        return fail(error.message, 400, error.code)

    @app.errorhandler(401)
    def unauthenticated(error):
        return fail("Authentication required", 401)

    @app.errorhandler(404)
    def not_found(error):
        return fail("Resource not found", 404)

    @app.errorhandler(500)
    def internal_error(error):
        logger.error("unhandled_error", path=request.path, error=str(getattr(error, "original_exception", error)))
        return fail("Internal server error", 500)
