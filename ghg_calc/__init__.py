"""
ghg_calc – Greenhouse-gas emission calculation engine.

Pure calculators per activity category, fuel unit conversion and result
aggregation.  See ``ghg_calc.calculations`` for the formula table.
"""
from ghg_calc.aggregate import AggregateResult, aggregate
from ghg_calc.calculations import calculate, calculate_many
from ghg_calc.constants import CONSTANTS
from ghg_calc.errors import CalculationError, InputValidationError, UnsupportedConversionError
from ghg_calc.units import convert

__all__ = [
    "AggregateResult",
    "CONSTANTS",
    "CalculationError",
    "InputValidationError",
    "UnsupportedConversionError",
    "aggregate",
    "calculate",
    "calculate_many",
    "convert",
]
