from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.constants import MAX_HOURS_PER_DAY, MAX_WORKLOAD, MIN_HOURS, MIN_WORKLOAD, STORED_DECIMAL_PLACES
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", code="required")
    return value.strip()


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Convert to a finite Decimal; booleans, NaN and infinities are not numbers here."""

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number", code="required")
    if isinstance(value, float):
        # str() keeps the literal the caller typed (0.1 -> "0.1"), not its binary expansion.
        value = str(value)
    try:
        number = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number", code="required")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number", code="required")
    return number


def _fits_storage(value: Decimal) -> bool:
    # Only called after the range check, so quantize cannot overflow.
    return value == value.quantize(Decimal(1).scaleb(-STORED_DECIMAL_PLACES))


def require_workload(value: Any) -> Decimal:
    """Single-assignment range check: workload must be in (0, 100] with at most 2 decimals."""
    workload = to_decimal(value, "Workload percentage")
    if workload <= MIN_WORKLOAD or workload > MAX_WORKLOAD:
        raise ValidationError("Workload percentage must be greater than 0 and at most 100", code="workload")
    if not _fits_storage(workload):
        raise ValidationError("Workload percentage allows at most 2 decimal places", code="workload")
    return workload


def require_hours(value: Any) -> Decimal:
    hours = to_decimal(value, "Hours worked")
    if hours <= MIN_HOURS or hours > MAX_HOURS_PER_DAY:
        raise ValidationError("Hours worked must be greater than 0 and cannot exceed 24 hours per day", code="hours")
    if not _fits_storage(hours):
        raise ValidationError("Hours worked allows at most 2 decimal places", code="hours")
    return hours
