"""
schemas.py – Pydantic models for activity inputs, emission factors and results.

``ActivityInput`` is a discriminated union on ``activity_type``: one model
per activity category, each carrying only what its formula reads.
Emission factor records are resolved by the caller and always carry the
opaque ``version`` string used for the audit trail.

All models are frozen; the engine never mutates what it is given.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ─────────────────────────────────────────────────────────────
# Activity inputs – Scope 1
# ─────────────────────────────────────────────────────────────

class StationaryCombustionInput(_Frozen):
    """Fuel burned in boilers, furnaces, generators."""

    activity_type: Literal["stationary_combustion"] = "stationary_combustion"
    fuel_type: str = Field(..., description="e.g. 'Natural Gas', 'Bituminous Coal'")
    quantity: float = Field(..., description="Amount of fuel consumed")
    unit: str = Field(..., description="Unit of quantity, e.g. 'MMBtu', 'scf', 'gallons'")
    is_biomass: bool = Field(False, description="Biogenic fuel: CO₂ reported outside the total")


class MobileSourcesInput(_Frozen):
    """Fuel burned by owned or leased vehicles."""

    activity_type: Literal["mobile_sources"] = "mobile_sources"
    vehicle_type: str = Field(..., description="e.g. 'Passenger Cars - Gasoline'")
    vehicle_year: Optional[int] = Field(None, description="Model year the CH4/N2O factors were picked for")
    fuel_type: str = Field(..., description="e.g. 'Motor Gasoline', 'Diesel Fuel'")
    fuel_usage: float = Field(..., description="Fuel consumed, in the factor's unit")
    unit: Optional[str] = Field(None, description="Fuel unit, echoed into details for audit")
    mileage: float = Field(0.0, description="Miles driven (drives CH4/N2O)")
    biodiesel_percent: float = Field(0.0, description="Biodiesel share of the blend, 0-100")
    ethanol_percent: float = Field(0.0, description="Ethanol share of the blend, 0-100")


class RefrigerationSimpleInput(_Frozen):
    """Refrigerant released, measured directly."""

    activity_type: Literal["refrigeration_ac"] = "refrigeration_ac"
    refrigerant_type: str = Field(..., description="e.g. 'R-410A', 'HFC-134a'")
    amount_released_kg: float = Field(..., description="Refrigerant released (kg)")


class RefrigerationMaterialBalanceInput(_Frozen):
    """Refrigerant release inferred from inventory, transfer and capacity changes."""

    activity_type: Literal["refrigeration_ac_material_balance"] = "refrigeration_ac_material_balance"
    refrigerant_type: str
    inventory_change_kg: float = Field(..., description="Signed change in stored inventory (kg)")
    transferred_amount_kg: float = Field(..., description="Refrigerant transferred out (kg)")
    capacity_change_kg: float = Field(..., description="Signed change in equipment capacity (kg)")


class RefrigerationSimplifiedBalanceInput(_Frozen):
    """Refrigerant release inferred from equipment installed, serviced and retired."""

    activity_type: Literal["refrigeration_ac_simplified_material_balance"] = (
        "refrigeration_ac_simplified_material_balance"
    )
    refrigerant_type: str
    new_units_charge_kg: float = Field(0.0, description="Refrigerant charged into new units (kg)")
    new_units_capacity_kg: float = Field(0.0, description="Full capacity of the new units (kg)")
    existing_units_recharge_kg: float = Field(0.0, description="Recharge of existing units (kg)")
    disposed_units_capacity_kg: float = Field(0.0, description="Capacity of retired units (kg)")
    disposed_units_recovered_kg: float = Field(0.0, description="Refrigerant recovered from retired units (kg)")


class RefrigerationScreeningInput(_Frozen):
    """Screening estimate from charge and capacity using default leak factors."""

    activity_type: Literal["refrigeration_ac_screening"] = "refrigeration_ac_screening"
    refrigerant_type: str
    equipment_type: str = Field(..., description="e.g. 'Chillers', 'Mobile A/C'")
    new_units_charge_kg: float = 0.0
    operating_units_capacity_kg: float = 0.0
    disposed_units_capacity_kg: float = 0.0


class FireSuppressionInput(_Frozen):
    """Suppressant agent used, measured directly."""

    activity_type: Literal["fire_suppression"] = "fire_suppression"
    suppressant_type: str
    amount_used: float
    amount_units: str = Field("kg", description="'kg', 'lb' or 'pounds'")


class FireSuppressionMaterialBalanceInput(_Frozen):
    activity_type: Literal["fire_suppression_material_balance"] = "fire_suppression_material_balance"
    suppressant_type: str
    inventory_change_lb: float
    transferred_amount_lb: float
    capacity_change_lb: float


class FireSuppressionSimplifiedBalanceInput(_Frozen):
    activity_type: Literal["fire_suppression_simplified_material_balance"] = (
        "fire_suppression_simplified_material_balance"
    )
    suppressant_type: str
    new_units_charge_lb: float = 0.0
    new_units_capacity_lb: float = 0.0
    existing_units_recharge_lb: float = 0.0
    disposed_units_capacity_lb: float = 0.0
    disposed_units_recovered_lb: float = 0.0


class FireSuppressionScreeningInput(_Frozen):
    activity_type: Literal["fire_suppression_screening"] = "fire_suppression_screening"
    suppressant_type: str
    equipment_type: str = Field(..., description="'Fixed' or 'Portable'")
    unit_capacity_lb: float


class PurchasedGasesInput(_Frozen):
    activity_type: Literal["purchased_gases"] = "purchased_gases"
    gas_type: str
    amount_purchased: float
    amount_units: str = Field("kg", description="'kg', 'pounds' or 'lbs'")


# ─────────────────────────────────────────────────────────────
# Activity inputs – Scope 2
# ─────────────────────────────────────────────────────────────

class PurchasedElectricityInput(_Frozen):
    activity_type: Literal["purchased_electricity"] = "purchased_electricity"
    electricity_kwh: float = Field(..., description="Electricity consumed (kWh)")
    grid_region: str = Field(..., description="Grid sub-region the factor belongs to")


class PurchasedSteamInput(_Frozen):
    activity_type: Literal["purchased_steam"] = "purchased_steam"
    steam_mmbtu: float = Field(..., description="Steam / heat consumed (MMBtu)")


# ─────────────────────────────────────────────────────────────
# Activity inputs – Scope 3
# ─────────────────────────────────────────────────────────────

class WasteDisposalInput(_Frozen):
    activity_type: Literal["waste_disposal"] = "waste_disposal"
    waste_type: Optional[str] = None
    disposal_method: Optional[str] = None
    amount: float
    amount_units: str = Field("metric tons", description="'metric tons', 'short tons', 'pounds' or 'lbs'")


class BusinessTravelInput(_Frozen):
    """Air, rail or road travel; sub-factor selection is done by the caller."""

    activity_type: Literal["business_travel"] = "business_travel"
    travel_mode: Literal["air", "rail", "road"]
    distance_km: Optional[float] = None
    distance_miles: Optional[float] = None
    num_trips: float = 1
    cabin_class: Optional[str] = None
    vehicle_size: Optional[str] = None
    flight_type: Optional[str] = None


class HotelStayInput(_Frozen):
    activity_type: Literal["hotel_stay"] = "hotel_stay"
    hotel_category: Optional[str] = None
    num_nights: float
    num_rooms: float = 1


class CommutingInput(_Frozen):
    activity_type: Literal["commuting"] = "commuting"
    commute_mode: str
    vehicle_type: Optional[str] = None
    distance_per_trip_km: float = Field(..., description="One-way distance (km)")
    commute_days_per_year: float
    num_commuters: float = 1


class TransportationInput(_Frozen):
    activity_type: Literal["transportation_distribution"] = "transportation_distribution"
    transport_mode: str
    distance_km: float
    weight_tons: float


ActivityInput = Annotated[
    Union[
        StationaryCombustionInput,
        MobileSourcesInput,
        RefrigerationSimpleInput,
        RefrigerationMaterialBalanceInput,
        RefrigerationSimplifiedBalanceInput,
        RefrigerationScreeningInput,
        FireSuppressionInput,
        FireSuppressionMaterialBalanceInput,
        FireSuppressionSimplifiedBalanceInput,
        FireSuppressionScreeningInput,
        PurchasedGasesInput,
        PurchasedElectricityInput,
        PurchasedSteamInput,
        WasteDisposalInput,
        BusinessTravelInput,
        HotelStayInput,
        CommutingInput,
        TransportationInput,
    ],
    Field(discriminator="activity_type"),
]


# ─────────────────────────────────────────────────────────────
# Emission factor records
# ─────────────────────────────────────────────────────────────

class _FactorRecord(_Frozen):
    version: str = Field(..., description="Factor set version, stored with the result")


class CombustionFactor(_FactorRecord):
    co2_kg_per_unit: float
    ch4_g_per_unit: float
    n2o_g_per_unit: float
    unit: str = Field("MMBtu", description="Unit the per-unit factors are expressed in")


class MobileFactor(_FactorRecord):
    co2_kg_per_unit: float = Field(..., description="kg CO₂ per gallon (or scf)")
    ch4_g_per_mile: float = 0.0
    n2o_g_per_mile: float = 0.0


class GwpFactor(_FactorRecord):
    gwp: float = Field(..., description="100-year global warming potential")


class ElectricityFactor(_FactorRecord):
    co2e_kg_per_kwh: float


class SteamFactor(_FactorRecord):
    co2e_kg_per_mmbtu: float


class WasteFactor(_FactorRecord):
    co2e_kg_per_ton: float


class TravelFactor(_FactorRecord):
    co2e_kg_per_km: Optional[float] = None
    co2e_kg_per_mile: Optional[float] = None


class HotelFactor(_FactorRecord):
    co2e_kg_per_night: float


class CommutingFactor(_FactorRecord):
    co2e_kg_per_km: float


class FreightFactor(_FactorRecord):
    co2e_kg_per_ton_km: float


EmissionFactorRecord = Union[
    CombustionFactor,
    MobileFactor,
    GwpFactor,
    ElectricityFactor,
    SteamFactor,
    WasteFactor,
    TravelFactor,
    HotelFactor,
    CommutingFactor,
    FreightFactor,
]

# activity_type → factor model the calculator expects
FACTOR_MODELS: dict[str, type[_FactorRecord]] = {
    "stationary_combustion": CombustionFactor,
    "mobile_sources": MobileFactor,
    "refrigeration_ac": GwpFactor,
    "refrigeration_ac_material_balance": GwpFactor,
    "refrigeration_ac_simplified_material_balance": GwpFactor,
    "refrigeration_ac_screening": GwpFactor,
    "fire_suppression": GwpFactor,
    "fire_suppression_material_balance": GwpFactor,
    "fire_suppression_simplified_material_balance": GwpFactor,
    "fire_suppression_screening": GwpFactor,
    "purchased_gases": GwpFactor,
    "purchased_electricity": ElectricityFactor,
    "purchased_steam": SteamFactor,
    "waste_disposal": WasteFactor,
    "business_travel": TravelFactor,
    "hotel_stay": HotelFactor,
    "commuting": CommutingFactor,
    "transportation_distribution": FreightFactor,
}


# ─────────────────────────────────────────────────────────────
# Result
# ─────────────────────────────────────────────────────────────

class CalculationResult(_Frozen):
    """One calculated activity, in metric tons CO₂e."""

    activity_type: str
    scope: Literal["scope_1", "scope_2", "scope_3"]
    co2_mt: float = 0.0
    ch4_co2e_mt: float = 0.0
    n2o_co2e_mt: float = 0.0
    total_co2e_mt: float
    biomass_co2_mt: float = 0.0
    breakdown: dict[str, float] = Field(default_factory=dict, description="gas → t CO₂e")
    details: dict[str, Any] = Field(default_factory=dict, description="Intermediate audit values")
    method: Optional[str] = None
    factor_version: str

    def to_storage_row(
        self,
        activity_id: Any,
        reporting_period_id: Any,
        standard: str,
    ) -> dict[str, Any]:
        """
        Return the column values the persistence layer stores for this result.

        ``calculated_at`` and ``calculated_by`` are filled in by the store.
        """
        return {
            "activity_id": activity_id,
            "reporting_period_id": reporting_period_id,
            "activity_type": self.activity_type,
            "co2_mt": self.co2_mt,
            "ch4_co2e_mt": self.ch4_co2e_mt,
            "n2o_co2e_mt": self.n2o_co2e_mt,
            "total_co2e_mt": self.total_co2e_mt,
            "biomass_co2_mt": self.biomass_co2_mt,
            "calculation_breakdown": self.model_dump(mode="json"),
            "emission_factor_version": self.factor_version,
            "reporting_standard": standard,
        }
