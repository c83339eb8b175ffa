"""
errors.py – Exception types raised by the calculation engine.

Both concrete errors are deterministic functions of their input: callers
should surface them (e.g. reject the request naming ``err.field``) and never
retry or substitute a default number.
"""
from __future__ import annotations


class CalculationError(ValueError):
    """Base class for every error raised by the engine."""


class InputValidationError(CalculationError):
    """A required field is missing or holds an unacceptable value."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class UnsupportedConversionError(CalculationError):
    """No ratio path exists between two units for a given fuel type."""

    def __init__(self, fuel_type: str, from_unit: str, to_unit: str) -> None:
        self.fuel_type = fuel_type
        self.from_unit = from_unit
        self.to_unit = to_unit
        super().__init__(
            f"Unit conversion from '{from_unit}' to '{to_unit}' "
            f"for fuel type '{fuel_type}' is not supported"
        )
