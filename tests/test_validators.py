"""
Unit tests for ghg_calc/validators.py
"""
import math

import pytest

from ghg_calc.errors import InputValidationError
from ghg_calc.schemas import (
    CombustionFactor,
    FireSuppressionSimplifiedBalanceInput,
    RefrigerationMaterialBalanceInput,
    StationaryCombustionInput,
    TravelFactor,
)
from ghg_calc.validators import (
    parse_activity,
    parse_factor,
    require_non_negative,
    require_percent,
    require_text,
)


class TestFieldChecks:

    def test_non_negative_accepts_zero(self):
        assert require_non_negative(0, "quantity") == 0.0

    def test_non_negative_rejects_negative(self):
        with pytest.raises(InputValidationError) as excinfo:
            require_non_negative(-0.01, "quantity")
        assert excinfo.value.field == "quantity"
        assert "negative" in str(excinfo.value)

    def test_non_negative_rejects_missing(self):
        with pytest.raises(InputValidationError):
            require_non_negative(None, "quantity")

    def test_non_negative_rejects_nan(self):
        with pytest.raises(InputValidationError):
            require_non_negative(math.nan, "quantity")

    def test_percent_bounds(self):
        assert require_percent(100, "ethanol_percent") == 100.0
        with pytest.raises(InputValidationError):
            require_percent(100.5, "ethanol_percent")

    def test_text(self):
        assert require_text("Natural Gas", "fuel_type") == "Natural Gas"
        with pytest.raises(InputValidationError):
            require_text("", "fuel_type")
        with pytest.raises(InputValidationError):
            require_text(None, "fuel_type")


class TestParseActivity:

    def test_builds_tagged_variant(self):
        activity = parse_activity(
            {"activity_type": "stationary_combustion", "fuel_type": "Natural Gas",
             "quantity": "1000", "unit": "MMBtu"}
        )
        assert isinstance(activity, StationaryCombustionInput)
        assert activity.quantity == 1000.0
        assert activity.is_biomass is False

    def test_material_balance_variant(self):
        activity = parse_activity(
            {"activity_type": "refrigeration_ac_material_balance", "refrigerant_type": "R-22",
             "inventory_change_kg": -2, "transferred_amount_kg": 0, "capacity_change_kg": 1}
        )
        assert isinstance(activity, RefrigerationMaterialBalanceInput)

    def test_simplified_balance_variant_defaults_to_zero(self):
        activity = parse_activity(
            {"activity_type": "fire_suppression_simplified_material_balance",
             "suppressant_type": "HFC-227ea", "new_units_charge_lb": 12}
        )
        assert isinstance(activity, FireSuppressionSimplifiedBalanceInput)
        assert activity.disposed_units_recovered_lb == 0.0

    def test_missing_field_named(self):
        with pytest.raises(InputValidationError) as excinfo:
            parse_activity({"activity_type": "stationary_combustion", "fuel_type": "Natural Gas", "unit": "MMBtu"})
        assert excinfo.value.field == "quantity"

    def test_unknown_activity_type(self):
        with pytest.raises(InputValidationError) as excinfo:
            parse_activity({"activity_type": "teleportation"})
        assert excinfo.value.field == "activity_type"

    def test_missing_activity_type(self):
        with pytest.raises(InputValidationError) as excinfo:
            parse_activity({"quantity": 1})
        assert excinfo.value.field == "activity_type"


class TestParseFactor:

    def test_builds_expected_model(self):
        factor = parse_factor(
            "stationary_combustion",
            {"version": "EPA-2024", "co2_kg_per_unit": 53.06, "ch4_g_per_unit": 1, "n2o_g_per_unit": 0.1},
        )
        assert isinstance(factor, CombustionFactor)
        assert factor.unit == "MMBtu"

    def test_optional_coefficients(self):
        factor = parse_factor("business_travel", {"version": "DEFRA", "co2e_kg_per_km": 0.15})
        assert isinstance(factor, TravelFactor)
        assert factor.co2e_kg_per_mile is None

    def test_missing_version_named(self):
        with pytest.raises(InputValidationError) as excinfo:
            parse_factor("purchased_electricity", {"co2e_kg_per_kwh": 0.4})
        assert excinfo.value.field == "version"

    def test_unknown_activity_type(self):
        with pytest.raises(InputValidationError):
            parse_factor("teleportation", {"version": "x"})
