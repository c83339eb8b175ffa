"""
Unit tests for ghg_calc/units.py
"""
from types import MappingProxyType

import pytest

from ghg_calc.constants import CONSTANTS, ConstantRegistry
from ghg_calc.errors import UnsupportedConversionError
from ghg_calc.units import convert, normalize_unit, to_mmbtu_ratio


class TestConvertToMMBtu:

    def test_same_unit_is_identity(self):
        assert convert("Anything", 42.5, "widgets", "widgets") == 42.5

    def test_alias_spellings_of_same_unit_are_identity(self):
        assert convert("Natural Gas", 7.0, "Therm", "therms") == 7.0

    def test_gallons(self):
        # 100 gal × 0.138
        assert convert("Distillate Fuel Oil No. 2", 100, "gallons", "MMBtu") == pytest.approx(13.8)

    def test_scf(self):
        assert convert("Natural Gas", 1000, "scf", "MMBtu") == pytest.approx(1.026)

    def test_short_tons_and_tons_alias(self):
        assert convert("Bituminous Coal", 2, "short ton", "MMBtu") == pytest.approx(49.86)
        assert convert("Bituminous Coal", 2, "tons", "MMBtu") == pytest.approx(49.86)

    def test_therm_is_universal(self):
        assert convert("Landfill Gas", 30, "therm", "MMBtu") == pytest.approx(3.0)
        assert convert("Some Unlisted Fuel", 30, "Therm", "MMBtu") == pytest.approx(3.0)

    def test_propane_uses_table_when_present(self):
        assert convert("Propane Gas", 100, "gallons", "MMBtu") == pytest.approx(9.2)

    def test_propane_approximation_when_table_has_no_entry(self):
        registry = ConstantRegistry(gallon_to_mmbtu=MappingProxyType({}))
        assert convert("Propane Gas", 100, "gallons", "MMBtu", registry) == pytest.approx(9.1)
        assert to_mmbtu_ratio("Propane", "gallons", registry) == 0.091

    def test_missing_pair_raises_with_context(self):
        with pytest.raises(UnsupportedConversionError) as excinfo:
            convert("Natural Gas", 10, "gallons", "MMBtu")
        err = excinfo.value
        assert err.fuel_type == "Natural Gas"
        assert err.from_unit == "gallons"
        assert err.to_unit == "MMBtu"
        assert "Natural Gas" in str(err)


class TestConvertTwoLegs:

    def test_therm_to_gallons(self):
        # 100 therm → 10 MMBtu → ÷ 0.135
        assert convert("Kerosene", 100, "therm", "gallons") == pytest.approx(10 / 0.135)

    def test_scf_to_therm(self):
        # 10,000 scf × 0.001026 = 10.26 MMBtu → ÷ 0.1
        assert convert("Natural Gas", 10_000, "scf", "Therm") == pytest.approx(102.6)

    def test_mmbtu_to_short_ton(self):
        assert convert("Anthracite Coal", 25.09, "MMBtu", "short ton") == pytest.approx(1.0)

    def test_second_leg_failure_names_original_pair(self):
        with pytest.raises(UnsupportedConversionError) as excinfo:
            convert("Natural Gas", 10, "therm", "gallons")
        assert excinfo.value.from_unit == "therm"
        assert excinfo.value.to_unit == "gallons"

    def test_unknown_target_unit(self):
        with pytest.raises(UnsupportedConversionError):
            convert("Natural Gas", 10, "scf", "barrels")

    @pytest.mark.parametrize(
        "fuel, unit_a, unit_b",
        [
            ("Natural Gas", "scf", "MMBtu"),
            ("Natural Gas", "scf", "therm"),
            ("Kerosene", "gallons", "therm"),
            ("Propane Gas", "gallons", "scf"),
            ("Lignite Coal", "short ton", "MMBtu"),
            ("Tires", "short ton", "therm"),
        ],
    )
    def test_round_trip(self, fuel, unit_a, unit_b):
        for x in (0.0, 1.0, 123.456, 98_765.4321):
            there = convert(fuel, x, unit_a, unit_b)
            back = convert(fuel, there, unit_b, unit_a)
            assert back == pytest.approx(x, abs=1e-9, rel=1e-12)


class TestHelpers:

    @pytest.mark.parametrize(
        "raw, expected",
        [("Gallons", "gallons"), ("gal", "gallons"), ("THERMS", "therm"),
         ("short tons", "short ton"), ("mmbtu", "MMBtu"), ("scf", "scf")],
    )
    def test_normalize_unit(self, raw, expected):
        assert normalize_unit(raw) == expected

    def test_registry_tables_are_read_only(self):
        with pytest.raises(TypeError):
            CONSTANTS.gallon_to_mmbtu["Kerosene"] = 1.0

    def test_registry_is_frozen(self):
        with pytest.raises(AttributeError):
            CONSTANTS.ch4_gwp = 25

    def test_gwp_values(self):
        assert CONSTANTS.ch4_gwp == 28
        assert CONSTANTS.n2o_gwp == 265
