"""
calculations.py – Emission calculation engine.

Every ``calc_*`` function is pure: it takes a typed activity input and the
emission factor record the caller resolved for it, validates the input, and
returns a fresh ``CalculationResult``.  No database, clock or network access
happens here; persistence and factor lookup belong to the caller.

Emission formula references
────────────────────────────
 Activity                        Scope  Formula
 ─────────────────────────────────────────────────────────────────────────
 Stationary Combustion            1     qty × CO₂ + qty × CH₄ × 28 + qty × N₂O × 265
 Mobile Sources                   1     fuel × CO₂ × fossil share + miles × (CH₄ × 28 + N₂O × 265)
 Refrigeration/AC (simple)        1     released_kg × GWP
 Refrigeration/AC (mat. balance)  1     max(0, |Δinventory| + transferred + Δcapacity) × GWP
 Refrigeration/AC (simplified)    1     max(0, charge − new cap + recharge + disposed − recovered) × GWP
 Refrigeration/AC (screening)     1     (charge·k_inst + capacity·k_op + disposed·k_disp) × GWP
 Fire Suppression (direct)        1     agent_kg × GWP
 Fire Suppression (mat. balance)  1     max(0, |Δinventory| + transferred + Δcapacity) lb × GWP
 Fire Suppression (simplified)    1     max(0, charge − new cap + recharge + disposed − recovered) lb × GWP
 Fire Suppression (screening)     1     GWP × leak_rate × capacity_lb
 Purchased Gases                  1     kg × GWP
 Purchased Electricity            2     kWh × kg CO₂e/kWh
 Purchased Steam / Heat           2     MMBtu × kg CO₂e/MMBtu
 Waste Disposal                   3     metric tons × kg CO₂e/ton
 Business Travel                  3     distance × trips × kg CO₂e/distance
 Hotel Stays                      3     nights × rooms × kg CO₂e/night
 Employee Commuting               3     km × 2 × days × commuters × kg CO₂e/km
 Transportation & Distribution    3     km × tons × kg CO₂e/ton-km

Metric-ton CO₂e outputs are rounded to six decimals, each gas on its own;
the total is the rounded sum of those per-gas values.  kg and g intermediates
are never pre-rounded.  Changing either the rounding point or the order of
operations breaks parity with the EPA reference spreadsheet.

Usage
──────
    from ghg_calc.calculations import calculate
    from ghg_calc.schemas import PurchasedElectricityInput, ElectricityFactor

    result = calculate(
        PurchasedElectricityInput(electricity_kwh=10_000, grid_region="CAMX"),
        ElectricityFactor(version="eGRID2022", co2e_kg_per_kwh=0.42),
    )
    result.total_co2e_mt   # 4.2
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ghg_calc.config import (
    REFRIGERANT_METHOD_MATERIAL_BALANCE,
    REFRIGERANT_METHOD_SIMPLE,
    Settings,
    get_config,
)
from ghg_calc.constants import (
    CONSTANTS,
    MMBTU,
    RESULT_DECIMALS,
    SCOPE_1,
    SCOPE_2,
    SCOPE_3,
    ConstantRegistry,
)
from ghg_calc.errors import InputValidationError
from ghg_calc.schemas import (
    FACTOR_MODELS,
    BusinessTravelInput,
    CalculationResult,
    CombustionFactor,
    CommutingFactor,
    CommutingInput,
    ElectricityFactor,
    FireSuppressionInput,
    FireSuppressionMaterialBalanceInput,
    FireSuppressionScreeningInput,
    FireSuppressionSimplifiedBalanceInput,
    FreightFactor,
    GwpFactor,
    HotelFactor,
    HotelStayInput,
    MobileFactor,
    MobileSourcesInput,
    PurchasedElectricityInput,
    PurchasedGasesInput,
    PurchasedSteamInput,
    RefrigerationMaterialBalanceInput,
    RefrigerationScreeningInput,
    RefrigerationSimpleInput,
    RefrigerationSimplifiedBalanceInput,
    StationaryCombustionInput,
    SteamFactor,
    TransportationInput,
    TravelFactor,
    WasteDisposalInput,
    WasteFactor,
)
from ghg_calc.units import convert
from ghg_calc.validators import (
    require_non_negative,
    require_number,
    require_percent,
    require_text,
)

logger = logging.getLogger(__name__)

METHOD_SIMPLE = "SIMPLE"
METHOD_MATERIAL_BALANCE = "MATERIAL_BALANCE"
METHOD_SIMPLIFIED_MATERIAL_BALANCE = "SIMPLIFIED_MATERIAL_BALANCE"
METHOD_SCREENING = "SCREENING_METHOD"
METHOD_DEFAULT = "DEFAULT"

_POUND_UNITS = {"pounds", "pound", "lbs", "lb"}
_SHORT_TON_UNITS = {"short tons", "short ton"}


# ─────────────────────────────────────────────────────────────────────────────
# Internal helpers
# ─────────────────────────────────────────────────────────────────────────────

def _mt(value: float) -> float:
    """Round a metric-ton CO₂e figure to reporting precision."""
    return round(value, RESULT_DECIMALS)


def _co2e_result(
    activity_type: str,
    scope: str,
    co2e_kg: float,
    factor: Any,
    constants: ConstantRegistry,
    *,
    gas: str = "co2e",
    method: str | None = None,
    details: dict[str, Any] | None = None,
) -> CalculationResult:
    """Build a result for activities whose factor is already CO₂e (no gas split)."""
    total = _mt(co2e_kg * constants.kg_to_metric_ton)
    return CalculationResult(
        activity_type=activity_type,
        scope=scope,
        total_co2e_mt=total,
        breakdown={gas: total},
        details={"co2e_kg": co2e_kg, **(details or {})},
        method=method,
        factor_version=factor.version,
    )


def _gas_breakdown(co2_mt: float, ch4_co2e_mt: float, n2o_co2e_mt: float) -> dict[str, float]:
    """Round each gas on its own; the total is then summed from these values."""
    return {
        "co2": _mt(co2_mt),
        "ch4": _mt(ch4_co2e_mt),
        "n2o": _mt(n2o_co2e_mt),
    }


def _gwp_result(
    activity_type: str,
    gas: str,
    emissions_kg: float,
    factor: GwpFactor,
    method: str,
    details: dict[str, Any],
    constants: ConstantRegistry,
) -> CalculationResult:
    """
    Build a scope 1 result for a GWP-weighted release of a single gas.

    The tonne step divides by ``kg_per_metric_ton`` rather than multiplying
    by 0.001, matching the reference spreadsheet for refrigerants.
    """
    co2e_kg = emissions_kg * factor.gwp
    total = _mt(co2e_kg / constants.kg_per_metric_ton)
    return CalculationResult(
        activity_type=activity_type,
        scope=SCOPE_1,
        total_co2e_mt=total,
        breakdown={gas: total},
        details={"emissions_kg": emissions_kg, "gwp": factor.gwp, "co2e_kg": co2e_kg, **details},
        method=method,
        factor_version=factor.version,
    )


def _balance_mass(inventory_change: float, transferred: float, capacity_change: float) -> float:
    """
    Net release from a material balance, floored at zero.

    The inventory term is counted by magnitude; a negative net balance
    reports no release.
    """
    return max(0.0, abs(inventory_change) + transferred + capacity_change)


def _simplified_balance_mass(
    new_charge: float,
    new_capacity: float,
    recharge: float,
    disposed_capacity: float,
    recovered: float,
) -> float:
    """Release from equipment movements, floored at zero like ``_balance_mass``."""
    return max(0.0, new_charge - new_capacity + recharge + disposed_capacity - recovered)


# ─────────────────────────────────────────────────────────────────────────────
# 1. Stationary Combustion – Scope 1
# Formula: CO₂e (t) = (CO₂_kg + CH₄_g/1000 × 28 + N₂O_g/1000 × 265) / 1000
# ─────────────────────────────────────────────────────────────────────────────

def calc_stationary_combustion(
    activity: StationaryCombustionInput,
    factor: CombustionFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Fuel burned in stationary equipment.

    The quantity is converted to the factor's unit first when they differ.
    For biomass fuels the CO₂ is moved to ``biomass_co2_mt`` and only CH₄ and
    N₂O count toward the total.
    """
    require_text(activity.fuel_type, "fuel_type")
    quantity = require_non_negative(activity.quantity, "quantity")
    require_text(activity.unit, "unit")
    require_non_negative(factor.co2_kg_per_unit, "co2_kg_per_unit")
    require_non_negative(factor.ch4_g_per_unit, "ch4_g_per_unit")
    require_non_negative(factor.n2o_g_per_unit, "n2o_g_per_unit")

    expected_unit = factor.unit or MMBTU
    calc_quantity = quantity
    if activity.unit != expected_unit:
        calc_quantity = convert(
            activity.fuel_type, quantity, activity.unit, expected_unit, constants
        )

    co2_kg = calc_quantity * factor.co2_kg_per_unit
    ch4_g = calc_quantity * factor.ch4_g_per_unit
    n2o_g = calc_quantity * factor.n2o_g_per_unit

    co2_mt = co2_kg * constants.kg_to_metric_ton
    ch4_co2e_mt = (ch4_g * constants.g_to_kg * constants.ch4_gwp) * constants.kg_to_metric_ton
    n2o_co2e_mt = (n2o_g * constants.g_to_kg * constants.n2o_gwp) * constants.kg_to_metric_ton

    if activity.is_biomass:
        fossil_co2_mt = 0.0
        biomass_co2_mt = co2_mt
    else:
        fossil_co2_mt = co2_mt
        biomass_co2_mt = 0.0

    breakdown = _gas_breakdown(fossil_co2_mt, ch4_co2e_mt, n2o_co2e_mt)
    result = CalculationResult(
        activity_type=activity.activity_type,
        scope=SCOPE_1,
        co2_mt=breakdown["co2"],
        ch4_co2e_mt=breakdown["ch4"],
        n2o_co2e_mt=breakdown["n2o"],
        total_co2e_mt=_mt(sum(breakdown.values())),
        biomass_co2_mt=_mt(biomass_co2_mt),
        breakdown=breakdown,
        details={
            "fuel_type": activity.fuel_type,
            "quantity": quantity,
            "unit": activity.unit,
            "calc_quantity": calc_quantity,
            "expected_unit": expected_unit,
            "co2_kg": co2_kg,
            "ch4_g": ch4_g,
            "n2o_g": n2o_g,
            "is_biomass": activity.is_biomass,
        },
        factor_version=factor.version,
    )
    logger.debug(
        "Stationary | %s %.4f %s → %.4f %s | total=%.6f t CO₂e (biomass=%s)",
        activity.fuel_type, quantity, activity.unit, calc_quantity, expected_unit,
        result.total_co2e_mt, activity.is_biomass,
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# 2. Mobile Sources – Scope 1
# CO₂ from fuel (fossil share only), CH₄ / N₂O from mileage
# ─────────────────────────────────────────────────────────────────────────────

def calc_mobile_sources(
    activity: MobileSourcesInput,
    factor: MobileFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Vehicle fuel use.

    Biodiesel / ethanol blend percentages split the fuel CO₂ into a fossil
    part (counted) and a biogenic part (``biomass_co2_mt``, not counted).
    """
    require_text(activity.vehicle_type, "vehicle_type")
    require_text(activity.fuel_type, "fuel_type")
    fuel_usage = require_non_negative(activity.fuel_usage, "fuel_usage")
    mileage = require_non_negative(activity.mileage, "mileage")
    biodiesel = require_percent(activity.biodiesel_percent, "biodiesel_percent")
    ethanol = require_percent(activity.ethanol_percent, "ethanol_percent")
    if biodiesel + ethanol > 100:
        raise InputValidationError(
            "ethanol_percent",
            f"biodiesel_percent + ethanol_percent cannot exceed 100, got {biodiesel + ethanol}",
        )
    require_non_negative(factor.co2_kg_per_unit, "co2_kg_per_unit")

    biogenic_fraction = (biodiesel + ethanol) / 100
    fossil_fraction = 1 - biogenic_fraction

    co2_kg = fuel_usage * factor.co2_kg_per_unit * fossil_fraction
    biogenic_co2_kg = fuel_usage * factor.co2_kg_per_unit * biogenic_fraction
    ch4_g = mileage * (factor.ch4_g_per_mile or 0)
    n2o_g = mileage * (factor.n2o_g_per_mile or 0)

    co2_mt = co2_kg * constants.kg_to_metric_ton
    ch4_co2e_mt = (ch4_g * constants.g_to_kg * constants.ch4_gwp) * constants.kg_to_metric_ton
    n2o_co2e_mt = (n2o_g * constants.g_to_kg * constants.n2o_gwp) * constants.kg_to_metric_ton
    biogenic_co2_mt = biogenic_co2_kg * constants.kg_to_metric_ton

    breakdown = _gas_breakdown(co2_mt, ch4_co2e_mt, n2o_co2e_mt)
    result = CalculationResult(
        activity_type=activity.activity_type,
        scope=SCOPE_1,
        co2_mt=breakdown["co2"],
        ch4_co2e_mt=breakdown["ch4"],
        n2o_co2e_mt=breakdown["n2o"],
        total_co2e_mt=_mt(sum(breakdown.values())),
        biomass_co2_mt=_mt(biogenic_co2_mt),
        breakdown=breakdown,
        details={
            "vehicle_type": activity.vehicle_type,
            "vehicle_year": activity.vehicle_year,
            "fuel_type": activity.fuel_type,
            "fuel_usage": fuel_usage,
            "unit": activity.unit,
            "mileage": mileage,
            "fossil_fraction": fossil_fraction,
            "co2_kg": co2_kg,
            "biogenic_co2_kg": biogenic_co2_kg,
            "ch4_g": ch4_g,
            "n2o_g": n2o_g,
        },
        factor_version=factor.version,
    )
    logger.debug(
        "Mobile | %s %.4f fuel × %.4f fossil, %.1f mi | total=%.6f t CO₂e",
        activity.vehicle_type, fuel_usage, fossil_fraction, mileage, result.total_co2e_mt,
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# 3. Refrigeration & AC – Scope 1
# Four methods; only one of simple / material balance is live per deployment
# (see config.GHG_REFRIGERANT_METHOD and calculate()).
# ─────────────────────────────────────────────────────────────────────────────

def calc_refrigeration_simple(
    activity: RefrigerationSimpleInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """Directly measured release: CO₂e (kg) = released_kg × GWP."""
    require_text(activity.refrigerant_type, "refrigerant_type")
    released_kg = require_non_negative(activity.amount_released_kg, "amount_released_kg")
    require_non_negative(factor.gwp, "gwp")

    result = _gwp_result(
        activity.activity_type,
        activity.refrigerant_type,
        released_kg,
        factor,
        METHOD_SIMPLE,
        {"refrigerant_type": activity.refrigerant_type},
        constants,
    )
    logger.debug(
        "Refrigeration (simple) | %s %.4f kg × GWP %.0f = %.6f t CO₂e",
        activity.refrigerant_type, released_kg, factor.gwp, result.total_co2e_mt,
    )
    return result


def calc_refrigeration_material_balance(
    activity: RefrigerationMaterialBalanceInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Material balance: release (kg) = |Δinventory| + transferred + Δcapacity.

    Inventory and capacity changes are signed; a negative net balance
    reports zero emissions.
    """
    require_text(activity.refrigerant_type, "refrigerant_type")
    inventory_change = require_number(activity.inventory_change_kg, "inventory_change_kg")
    transferred = require_non_negative(activity.transferred_amount_kg, "transferred_amount_kg")
    capacity_change = require_number(activity.capacity_change_kg, "capacity_change_kg")
    require_non_negative(factor.gwp, "gwp")

    emissions_kg = _balance_mass(inventory_change, transferred, capacity_change)
    result = _gwp_result(
        activity.activity_type,
        activity.refrigerant_type,
        emissions_kg,
        factor,
        METHOD_MATERIAL_BALANCE,
        {
            "refrigerant_type": activity.refrigerant_type,
            "inventory_change_kg": inventory_change,
            "transferred_amount_kg": transferred,
            "capacity_change_kg": capacity_change,
        },
        constants,
    )
    logger.debug(
        "Refrigeration (material balance) | %s net %.4f kg × GWP %.0f = %.6f t CO₂e",
        activity.refrigerant_type, emissions_kg, factor.gwp, result.total_co2e_mt,
    )
    return result


def calc_refrigeration_simplified_material_balance(
    activity: RefrigerationSimplifiedBalanceInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Simplified balance from equipment movements during the year:
    release (kg) = new charge − new capacity + recharge + disposed capacity − recovered.
    """
    require_text(activity.refrigerant_type, "refrigerant_type")
    charge = require_non_negative(activity.new_units_charge_kg, "new_units_charge_kg")
    capacity = require_non_negative(activity.new_units_capacity_kg, "new_units_capacity_kg")
    recharge = require_non_negative(activity.existing_units_recharge_kg, "existing_units_recharge_kg")
    disposed = require_non_negative(activity.disposed_units_capacity_kg, "disposed_units_capacity_kg")
    recovered = require_non_negative(activity.disposed_units_recovered_kg, "disposed_units_recovered_kg")
    require_non_negative(factor.gwp, "gwp")

    emissions_kg = _simplified_balance_mass(charge, capacity, recharge, disposed, recovered)
    return _gwp_result(
        activity.activity_type,
        activity.refrigerant_type,
        emissions_kg,
        factor,
        METHOD_SIMPLIFIED_MATERIAL_BALANCE,
        {
            "refrigerant_type": activity.refrigerant_type,
            "new_units_charge_kg": charge,
            "new_units_capacity_kg": capacity,
            "existing_units_recharge_kg": recharge,
            "disposed_units_capacity_kg": disposed,
            "disposed_units_recovered_kg": recovered,
        },
        constants,
    )


def calc_refrigeration_screening(
    activity: RefrigerationScreeningInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """Screening estimate using the default leak factors for the equipment type."""
    require_text(activity.refrigerant_type, "refrigerant_type")
    require_text(activity.equipment_type, "equipment_type")
    charge = require_non_negative(activity.new_units_charge_kg, "new_units_charge_kg")
    operating = require_non_negative(activity.operating_units_capacity_kg, "operating_units_capacity_kg")
    disposed = require_non_negative(activity.disposed_units_capacity_kg, "disposed_units_capacity_kg")
    require_non_negative(factor.gwp, "gwp")

    k_install, k_op, k_disp = constants.screening_factor(activity.equipment_type)
    emissions_kg = charge * k_install + operating * k_op + disposed * k_disp

    return _gwp_result(
        activity.activity_type,
        activity.refrigerant_type,
        emissions_kg,
        factor,
        METHOD_SCREENING,
        {
            "refrigerant_type": activity.refrigerant_type,
            "equipment_type": activity.equipment_type,
            "k_install": k_install,
            "k_op": k_op,
            "k_disp": k_disp,
        },
        constants,
    )


# ─────────────────────────────────────────────────────────────────────────────
# 4. Fire Suppression – Scope 1
# Quantities are reported in pounds and converted to kg after GWP weighting.
# ─────────────────────────────────────────────────────────────────────────────

def calc_fire_suppression(
    activity: FireSuppressionInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """Agent used, measured directly; pounds are converted to kg, any other unit is kg."""
    require_text(activity.suppressant_type, "suppressant_type")
    amount = require_non_negative(activity.amount_used, "amount_used")
    require_non_negative(factor.gwp, "gwp")

    amount_kg = amount
    if (activity.amount_units or "").strip().lower() in _POUND_UNITS:
        amount_kg = amount * constants.lb_to_kg

    return _gwp_result(
        activity.activity_type,
        activity.suppressant_type,
        amount_kg,
        factor,
        METHOD_DEFAULT,
        {
            "suppressant_type": activity.suppressant_type,
            "amount_used": amount,
            "amount_units": activity.amount_units,
        },
        constants,
    )


def calc_fire_suppression_material_balance(
    activity: FireSuppressionMaterialBalanceInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    require_text(activity.suppressant_type, "suppressant_type")
    inventory_change = require_number(activity.inventory_change_lb, "inventory_change_lb")
    transferred = require_non_negative(activity.transferred_amount_lb, "transferred_amount_lb")
    capacity_change = require_number(activity.capacity_change_lb, "capacity_change_lb")
    require_non_negative(factor.gwp, "gwp")

    emissions_lb = _balance_mass(inventory_change, transferred, capacity_change)
    return _gwp_result(
        activity.activity_type,
        activity.suppressant_type,
        emissions_lb * constants.lb_to_kg,
        factor,
        METHOD_MATERIAL_BALANCE,
        {
            "suppressant_type": activity.suppressant_type,
            "emissions_lb": emissions_lb,
            "inventory_change_lb": inventory_change,
            "transferred_amount_lb": transferred,
            "capacity_change_lb": capacity_change,
        },
        constants,
    )


def calc_fire_suppression_simplified_material_balance(
    activity: FireSuppressionSimplifiedBalanceInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """Same balance as the refrigerant method, in pounds."""
    require_text(activity.suppressant_type, "suppressant_type")
    charge = require_non_negative(activity.new_units_charge_lb, "new_units_charge_lb")
    capacity = require_non_negative(activity.new_units_capacity_lb, "new_units_capacity_lb")
    recharge = require_non_negative(activity.existing_units_recharge_lb, "existing_units_recharge_lb")
    disposed = require_non_negative(activity.disposed_units_capacity_lb, "disposed_units_capacity_lb")
    recovered = require_non_negative(activity.disposed_units_recovered_lb, "disposed_units_recovered_lb")
    require_non_negative(factor.gwp, "gwp")

    emissions_lb = _simplified_balance_mass(charge, capacity, recharge, disposed, recovered)
    return _gwp_result(
        activity.activity_type,
        activity.suppressant_type,
        emissions_lb * constants.lb_to_kg,
        factor,
        METHOD_SIMPLIFIED_MATERIAL_BALANCE,
        {
            "suppressant_type": activity.suppressant_type,
            "emissions_lb": emissions_lb,
            "new_units_charge_lb": charge,
            "new_units_capacity_lb": capacity,
            "existing_units_recharge_lb": recharge,
            "disposed_units_capacity_lb": disposed,
            "disposed_units_recovered_lb": recovered,
        },
        constants,
    )


def calc_fire_suppression_screening(
    activity: FireSuppressionScreeningInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """Screening: release (lb) = leak_rate × capacity; Fixed 3.5 %, otherwise 2.5 %."""
    require_text(activity.suppressant_type, "suppressant_type")
    capacity_lb = require_non_negative(activity.unit_capacity_lb, "unit_capacity_lb")
    require_non_negative(factor.gwp, "gwp")

    leak_rate = constants.leak_rate(activity.equipment_type)
    emissions_lb = leak_rate * capacity_lb
    return _gwp_result(
        activity.activity_type,
        activity.suppressant_type,
        emissions_lb * constants.lb_to_kg,
        factor,
        METHOD_SCREENING,
        {
            "suppressant_type": activity.suppressant_type,
            "equipment_type": activity.equipment_type,
            "leak_rate": leak_rate,
            "emissions_lb": emissions_lb,
        },
        constants,
    )


# ─────────────────────────────────────────────────────────────────────────────
# 5. Purchased Gases – Scope 1
# Formula: CO₂e (kg) = amount_kg × GWP
# ─────────────────────────────────────────────────────────────────────────────

def calc_purchased_gases(
    activity: PurchasedGasesInput,
    factor: GwpFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """Pounds are converted to kg; any other unit is taken as kg."""
    require_text(activity.gas_type, "gas_type")
    amount = require_non_negative(activity.amount_purchased, "amount_purchased")
    require_non_negative(factor.gwp, "gwp")

    amount_kg = amount
    if (activity.amount_units or "").strip().lower() in _POUND_UNITS:
        amount_kg = amount * constants.lb_to_kg

    co2e_kg = amount_kg * factor.gwp
    return _co2e_result(
        activity.activity_type,
        SCOPE_1,
        co2e_kg,
        factor,
        constants,
        gas=activity.gas_type,
        details={"gas_type": activity.gas_type, "amount_kg": amount_kg, "gwp": factor.gwp},
    )


# ─────────────────────────────────────────────────────────────────────────────
# 6. Purchased Electricity – Scope 2
# Formula: CO₂e (kg) = kWh × grid_factor
# ─────────────────────────────────────────────────────────────────────────────

def calc_purchased_electricity(
    activity: PurchasedElectricityInput,
    factor: ElectricityFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    kwh = require_non_negative(activity.electricity_kwh, "electricity_kwh")
    require_text(activity.grid_region, "grid_region")
    require_non_negative(factor.co2e_kg_per_kwh, "co2e_kg_per_kwh")

    co2e_kg = kwh * factor.co2e_kg_per_kwh
    result = _co2e_result(
        activity.activity_type,
        SCOPE_2,
        co2e_kg,
        factor,
        constants,
        details={
            "electricity_kwh": kwh,
            "grid_region": activity.grid_region,
            "emission_factor": factor.co2e_kg_per_kwh,
        },
    )
    logger.debug(
        "Electricity | %s %.2f kWh × %.6f = %.4f kg CO₂e",
        activity.grid_region, kwh, factor.co2e_kg_per_kwh, co2e_kg,
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# 7. Purchased Steam / Heat – Scope 2
# Formula: CO₂e (kg) = MMBtu × steam_factor
# ─────────────────────────────────────────────────────────────────────────────

def calc_purchased_steam(
    activity: PurchasedSteamInput,
    factor: SteamFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    mmbtu = require_non_negative(activity.steam_mmbtu, "steam_mmbtu")
    require_non_negative(factor.co2e_kg_per_mmbtu, "co2e_kg_per_mmbtu")

    co2e_kg = mmbtu * factor.co2e_kg_per_mmbtu
    return _co2e_result(
        activity.activity_type,
        SCOPE_2,
        co2e_kg,
        factor,
        constants,
        details={"steam_mmbtu": mmbtu, "emission_factor": factor.co2e_kg_per_mmbtu},
    )


# ─────────────────────────────────────────────────────────────────────────────
# 8. Waste Disposal – Scope 3
# Formula: CO₂e (kg) = metric tons × kg CO₂e/ton
# ─────────────────────────────────────────────────────────────────────────────

def calc_waste_disposal(
    activity: WasteDisposalInput,
    factor: WasteFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Short tons and pounds are converted to metric tons (case-insensitive);
    any other unit is assumed to be metric tons already.
    """
    amount = require_non_negative(activity.amount, "amount")
    require_non_negative(factor.co2e_kg_per_ton, "co2e_kg_per_ton")

    units = (activity.amount_units or "").strip().lower()
    amount_tons = amount
    if units in _SHORT_TON_UNITS:
        amount_tons = amount * constants.short_ton_to_metric_ton
    elif units in _POUND_UNITS:
        amount_tons = amount * constants.lb_to_kg * constants.kg_to_metric_ton

    co2e_kg = amount_tons * factor.co2e_kg_per_ton
    result = _co2e_result(
        activity.activity_type,
        SCOPE_3,
        co2e_kg,
        factor,
        constants,
        details={
            "waste_type": activity.waste_type,
            "disposal_method": activity.disposal_method,
            "amount_processed": amount_tons,
        },
    )
    logger.debug(
        "Waste | %s/%s %.4f %s → %.6f t × %.4f = %.4f kg CO₂e",
        activity.waste_type, activity.disposal_method, amount, activity.amount_units,
        amount_tons, factor.co2e_kg_per_ton, co2e_kg,
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# 9. Business Travel – Scope 3
# Formula: CO₂e (kg) = distance × trips × factor
# ─────────────────────────────────────────────────────────────────────────────

def calc_business_travel(
    activity: BusinessTravelInput,
    factor: TravelFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Kilometres take precedence.  Miles are used only when no km distance is
    given; without a per-mile factor the per-km factor × 1.60934 is used.
    """
    if activity.distance_km is None and activity.distance_miles is None:
        raise InputValidationError("distance_km", "distance_km or distance_miles is required")
    num_trips = require_non_negative(activity.num_trips, "num_trips")

    if activity.distance_miles is not None and not activity.distance_km:
        distance = require_non_negative(activity.distance_miles, "distance_miles")
        if factor.co2e_kg_per_mile is not None:
            ef = require_non_negative(factor.co2e_kg_per_mile, "co2e_kg_per_mile")
        elif factor.co2e_kg_per_km is not None:
            ef = require_non_negative(factor.co2e_kg_per_km, "co2e_kg_per_km") * constants.mile_to_km
        else:
            raise InputValidationError("co2e_kg_per_mile", "a per-mile or per-km factor is required")
        distance_unit = "miles"
    else:
        distance = require_non_negative(activity.distance_km or 0.0, "distance_km")
        if factor.co2e_kg_per_km is None:
            raise InputValidationError("co2e_kg_per_km", "is required for distances in km")
        ef = require_non_negative(factor.co2e_kg_per_km, "co2e_kg_per_km")
        distance_unit = "km"

    total_distance = distance * num_trips
    co2e_kg = total_distance * ef
    return _co2e_result(
        activity.activity_type,
        SCOPE_3,
        co2e_kg,
        factor,
        constants,
        details={
            "travel_mode": activity.travel_mode,
            "cabin_class": activity.cabin_class,
            "vehicle_size": activity.vehicle_size,
            "flight_type": activity.flight_type,
            "total_distance": total_distance,
            "distance_unit": distance_unit,
            "num_trips": num_trips,
            "emission_factor": ef,
        },
    )


# ─────────────────────────────────────────────────────────────────────────────
# 10. Hotel Stays – Scope 3
# Formula: CO₂e (kg) = nights × rooms × kg CO₂e/night
# ─────────────────────────────────────────────────────────────────────────────

def calc_hotel_stay(
    activity: HotelStayInput,
    factor: HotelFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    nights = require_non_negative(activity.num_nights, "num_nights")
    rooms = require_non_negative(activity.num_rooms, "num_rooms")
    require_non_negative(factor.co2e_kg_per_night, "co2e_kg_per_night")

    room_nights = nights * rooms
    co2e_kg = room_nights * factor.co2e_kg_per_night
    return _co2e_result(
        activity.activity_type,
        SCOPE_3,
        co2e_kg,
        factor,
        constants,
        details={
            "hotel_category": activity.hotel_category,
            "num_nights": room_nights,
            "num_rooms": rooms,
        },
    )


# ─────────────────────────────────────────────────────────────────────────────
# 11. Employee Commuting – Scope 3
# Formula: CO₂e (kg) = km per trip × 2 (round trip) × days × commuters × factor
# ─────────────────────────────────────────────────────────────────────────────

def calc_commuting(
    activity: CommutingInput,
    factor: CommutingFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """``distance_per_trip_km`` is one way; the round trip is always doubled."""
    require_text(activity.commute_mode, "commute_mode")
    distance = require_non_negative(activity.distance_per_trip_km, "distance_per_trip_km")
    days = require_non_negative(activity.commute_days_per_year, "commute_days_per_year")
    commuters = require_non_negative(activity.num_commuters, "num_commuters")
    require_non_negative(factor.co2e_kg_per_km, "co2e_kg_per_km")

    total_distance_km = distance * 2 * days * commuters
    co2e_kg = total_distance_km * factor.co2e_kg_per_km
    result = _co2e_result(
        activity.activity_type,
        SCOPE_3,
        co2e_kg,
        factor,
        constants,
        details={
            "commute_mode": activity.commute_mode,
            "vehicle_type": activity.vehicle_type,
            "total_distance_km": total_distance_km,
            "num_commuters": commuters,
            "commute_days_per_year": days,
        },
    )
    logger.debug(
        "Commuting | %s %.1f km × 2 × %.0f days × %.0f = %.1f km → %.4f kg CO₂e",
        activity.commute_mode, distance, days, commuters, total_distance_km, co2e_kg,
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# 12. Transportation & Distribution – Scope 3
# Formula: CO₂e (kg) = km × tons × kg CO₂e/ton-km
# ─────────────────────────────────────────────────────────────────────────────

def calc_transportation(
    activity: TransportationInput,
    factor: FreightFactor,
    *,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    require_text(activity.transport_mode, "transport_mode")
    distance_km = require_non_negative(activity.distance_km, "distance_km")
    weight_tons = require_non_negative(activity.weight_tons, "weight_tons")
    require_non_negative(factor.co2e_kg_per_ton_km, "co2e_kg_per_ton_km")

    ton_km = distance_km * weight_tons
    co2e_kg = ton_km * factor.co2e_kg_per_ton_km
    result = _co2e_result(
        activity.activity_type,
        SCOPE_3,
        co2e_kg,
        factor,
        constants,
        details={
            "transport_mode": activity.transport_mode,
            "distance_km": distance_km,
            "weight_tons": weight_tons,
            "ton_km": ton_km,
        },
    )
    logger.debug(
        "Freight | %s %.2f t × %.1f km = %.1f ton-km × %.4f = %.4f kg CO₂e",
        activity.transport_mode, weight_tons, distance_km, ton_km,
        factor.co2e_kg_per_ton_km, co2e_kg,
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────

CALCULATORS: dict[str, Callable[..., CalculationResult]] = {
    "stationary_combustion": calc_stationary_combustion,
    "mobile_sources": calc_mobile_sources,
    "refrigeration_ac": calc_refrigeration_simple,
    "refrigeration_ac_material_balance": calc_refrigeration_material_balance,
    "refrigeration_ac_simplified_material_balance": calc_refrigeration_simplified_material_balance,
    "refrigeration_ac_screening": calc_refrigeration_screening,
    "fire_suppression": calc_fire_suppression,
    "fire_suppression_material_balance": calc_fire_suppression_material_balance,
    "fire_suppression_simplified_material_balance": calc_fire_suppression_simplified_material_balance,
    "fire_suppression_screening": calc_fire_suppression_screening,
    "purchased_gases": calc_purchased_gases,
    "purchased_electricity": calc_purchased_electricity,
    "purchased_steam": calc_purchased_steam,
    "waste_disposal": calc_waste_disposal,
    "business_travel": calc_business_travel,
    "hotel_stay": calc_hotel_stay,
    "commuting": calc_commuting,
    "transportation_distribution": calc_transportation,
}

# Refrigerant activity types gated by Settings.refrigerant_method
_REFRIGERANT_METHOD_BY_TYPE: dict[str, str] = {
    "refrigeration_ac": REFRIGERANT_METHOD_SIMPLE,
    "refrigeration_ac_material_balance": REFRIGERANT_METHOD_MATERIAL_BALANCE,
}


def calculate(
    activity: Any,
    factor: Any,
    *,
    settings: Settings | None = None,
    constants: ConstantRegistry = CONSTANTS,
) -> CalculationResult:
    """
    Route *activity* to its calculator.

    Raises
    ------
    InputValidationError
        If either argument is missing, the activity type is unknown, the
        factor record is the wrong kind for the activity, or the activity
        uses the refrigerant method this deployment is not configured for.
    UnsupportedConversionError
        If a stationary combustion quantity cannot be converted.
    """
    if activity is None:
        raise InputValidationError("activity", "is required")
    if factor is None:
        raise InputValidationError("emission_factor", "is required")

    activity_type = getattr(activity, "activity_type", None)
    calculator = CALCULATORS.get(activity_type)
    if calculator is None:
        raise InputValidationError("activity_type", f"unknown activity type '{activity_type}'")

    expected = FACTOR_MODELS[activity_type]
    if not isinstance(factor, expected):
        raise InputValidationError(
            "emission_factor",
            f"{activity_type} expects {expected.__name__}, got {type(factor).__name__}",
        )

    method = _REFRIGERANT_METHOD_BY_TYPE.get(activity_type)
    if method is not None:
        configured = (settings or get_config()).refrigerant_method
        if method != configured:
            logger.warning(
                "Rejected %s: refrigerant method is configured as '%s'",
                activity_type, configured,
            )
            raise InputValidationError(
                "activity_type",
                f"{activity_type} uses the '{method}' refrigerant method but this "
                f"deployment is configured for '{configured}'",
            )

    logger.debug("Dispatching %s → %s", activity_type, calculator.__name__)
    return calculator(activity, factor, constants=constants)


def calculate_many(
    pairs: Iterable[tuple[Any, Any]],
    *,
    settings: Settings | None = None,
    constants: ConstantRegistry = CONSTANTS,
) -> list[CalculationResult]:
    """Calculate each (activity, factor) pair in order; the first failure propagates."""
    settings = settings or get_config()
    return [
        calculate(activity, factor, settings=settings, constants=constants)
        for activity, factor in pairs
    ]
