"""
validators.py – Input checks shared by every calculator, and raw-dict parsing.

The ``require_*`` helpers run before any arithmetic and raise
``InputValidationError`` naming the offending field.

``parse_activity`` / ``parse_factor`` turn loosely shaped dicts (e.g. a
request body or a database row) into the typed models from ``schemas``.
Pydantic errors are re-raised as ``InputValidationError`` so callers only
handle one error type.
"""
from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ghg_calc.errors import InputValidationError
from ghg_calc.schemas import FACTOR_MODELS, ActivityInput

_ACTIVITY_ADAPTER: TypeAdapter = TypeAdapter(ActivityInput)


# ─────────────────────────────────────────────────────────────
# Field checks
# ─────────────────────────────────────────────────────────────

def require_text(value: str | None, field: str) -> str:
    """Return *value* unchanged, or raise if it is missing or blank."""
    if value is None or not str(value).strip():
        raise InputValidationError(field, "is required")
    return value


def require_number(value: float | None, field: str) -> float:
    """Return *value* as float, or raise if it is missing or not finite."""
    if value is None:
        raise InputValidationError(field, "is required")
    number = float(value)
    if not math.isfinite(number):
        raise InputValidationError(field, f"must be a finite number, got {value!r}")
    return number


def require_non_negative(value: float | None, field: str) -> float:
    """Return *value* as float, or raise if it is missing, not finite or < 0."""
    number = require_number(value, field)
    if number < 0:
        raise InputValidationError(field, f"cannot be negative, got {number}")
    return number


def require_percent(value: float | None, field: str) -> float:
    """Return *value* as float, or raise unless 0 ≤ value ≤ 100."""
    number = require_non_negative(value, field)
    if number > 100:
        raise InputValidationError(field, f"cannot exceed 100, got {number}")
    return number


# ─────────────────────────────────────────────────────────────
# Raw dict parsing
# ─────────────────────────────────────────────────────────────

def _first_error(exc: PydanticValidationError, default_field: str) -> InputValidationError:
    """Convert the first pydantic error into an InputValidationError."""
    err = exc.errors()[0]
    if err.get("type", "").startswith("union_tag"):
        return InputValidationError("activity_type", err.get("msg", "is invalid"))
    loc = [str(part) for part in err.get("loc", ()) if isinstance(part, str)]
    field = loc[-1] if loc else default_field
    return InputValidationError(field, err.get("msg", "is invalid"))


def parse_activity(raw: dict[str, Any]) -> Any:
    """
    Build the ActivityInput variant selected by ``raw['activity_type']``.

    Raises
    ------
    InputValidationError
        If the tag is unknown, or a required field is missing or mistyped.
    """
    try:
        return _ACTIVITY_ADAPTER.validate_python(raw)
    except PydanticValidationError as exc:
        raise _first_error(exc, "activity_type") from exc


def parse_factor(activity_type: str, raw: dict[str, Any]) -> BaseModel:
    """
    Build the emission factor record expected by *activity_type*'s calculator.

    Raises
    ------
    InputValidationError
        If the activity type is unknown, or a required coefficient is missing.
    """
    model = FACTOR_MODELS.get(activity_type)
    if model is None:
        raise InputValidationError("activity_type", f"unknown activity type '{activity_type}'")
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise _first_error(exc, "emission_factor") from exc
