"""
constants.py – Global warming potentials, unit ratios and heat contents.

Everything here is built once at import time and exposed through the
read-only ``CONSTANTS`` registry.  Calculators take the registry as a
keyword argument so tests can inject an alternative one.

Sources: IPCC AR5 (GWP, 100-year), US EPA Simplified GHG Emissions
Calculator (September 2024) heat contents and screening factors.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# ── Scope labels ──────────────────────────────────────────────
SCOPE_1 = "scope_1"
SCOPE_2 = "scope_2"
SCOPE_3 = "scope_3"
ALL_SCOPES = (SCOPE_1, SCOPE_2, SCOPE_3)

# ── Canonical energy unit used as the conversion pivot ────────
MMBTU = "MMBtu"

# Metric-ton CO₂e outputs are rounded to this many decimals
RESULT_DECIMALS = 6


# ─────────────────────────────────────────────────────────────
# Heat contents (MMBtu per unit)
# ─────────────────────────────────────────────────────────────
_GALLON_TO_MMBTU: dict[str, float] = {
    "Distillate Fuel Oil No. 2": 0.138,
    "Residual Fuel Oil No. 6": 0.150,
    "Kerosene": 0.135,
    "Liquefied Petroleum Gases (LPG)": 0.092,
    "Propane": 0.092,
    "Propane Gas": 0.092,
    "Biodiesel (100%)": 0.128,
    "Ethanol (100%)": 0.084,
    "Rendered Animal Fat": 0.125,
    "Vegetable Oil": 0.120,
}

_SCF_TO_MMBTU: dict[str, float] = {
    "Natural Gas": 0.001026,
    "Propane Gas": 0.002516,
    "Landfill Gas": 0.000485,
}

_SHORT_TON_TO_MMBTU: dict[str, float] = {
    "Anthracite Coal": 25.09,
    "Bituminous Coal": 24.93,
    "Sub-bituminous Coal": 17.25,
    "Lignite Coal": 14.21,
    "Mixed (Commercial Sector)": 21.39,
    "Mixed (Electric Power Sector)": 19.73,
    "Mixed (Industrial Coking)": 26.28,
    "Mixed (Industrial Sector)": 22.35,
    "Coal Coke": 24.80,
    "Agricultural Byproducts": 8.25,
    "Peat": 8.00,
    "Solid Byproducts": 10.39,
    "Wood and Wood Residuals": 17.48,
    "Municipal Solid Waste": 9.95,
    "Petroleum Coke (Solid)": 30.00,
    "Plastics": 38.00,
    "Tires": 28.00,
}

# Fuels whose gallon ratio falls back to the spreadsheet's 0.091 approximation
PROPANE_FUELS = frozenset({"Propane", "Propane Gas"})


# ─────────────────────────────────────────────────────────────
# Refrigeration / AC screening factors (fraction of charge emitted)
# k_install: new-unit charge, k_op: operating capacity, k_disp: disposed capacity
# ─────────────────────────────────────────────────────────────
_SCREENING_FACTORS: dict[str, tuple[float, float, float]] = {
    "Domestic Refrigeration":     (0.01,  0.005, 0.24),
    "Stand-Alone Commercial":     (0.03,  0.15,  0.15),
    "Medium/Large Commercial":    (0.03,  0.225, 0.15),
    "Transport Refrigeration":    (0.005, 0.275, 0.15),
    "Industrial Refrigeration":   (0.03,  0.16,  0.15),
    "Chillers":                   (0.005, 0.085, 0.15),
    "Residential/Commercial A/C": (0.005, 0.05,  0.15),
    "Mobile A/C":                 (0.005, 0.20,  0.15),
    "Maritime A/C Units":         (0.005, 0.20,  1.0),
    "Railway A/C Units":          (0.005, 0.20,  1.0),
    "Buses A/C Units":            (0.005, 0.20,  1.0),
    "Other Mobile A/C Units":     (0.005, 0.20,  1.0),
}
_DEFAULT_SCREENING_FACTOR: tuple[float, float, float] = (0.01, 0.15, 1.0)

# Fire suppression annual leak rate by equipment type
_FIRE_SUPPRESSION_LEAK_RATES: dict[str, float] = {
    "Fixed": 0.035,
    "Portable": 0.025,
}


@dataclass(frozen=True)
class ConstantRegistry:
    """Immutable table of GWPs, conversion ratios and heat contents."""

    ch4_gwp: float = 28.0
    n2o_gwp: float = 265.0

    kg_to_metric_ton: float = 0.001
    kg_per_metric_ton: float = 1_000.0
    g_to_kg: float = 0.001
    lb_to_kg: float = 0.453592
    short_ton_to_metric_ton: float = 0.907185
    mile_to_km: float = 1.60934

    therm_to_mmbtu: float = 0.1
    propane_gallon_to_mmbtu_approx: float = 0.091

    gallon_to_mmbtu: Mapping[str, float] = field(default_factory=lambda: MappingProxyType(_GALLON_TO_MMBTU))
    scf_to_mmbtu: Mapping[str, float] = field(default_factory=lambda: MappingProxyType(_SCF_TO_MMBTU))
    short_ton_to_mmbtu: Mapping[str, float] = field(default_factory=lambda: MappingProxyType(_SHORT_TON_TO_MMBTU))

    screening_factors: Mapping[str, tuple[float, float, float]] = field(default_factory=lambda: MappingProxyType(_SCREENING_FACTORS))
    default_screening_factor: tuple[float, float, float] = _DEFAULT_SCREENING_FACTOR
    fire_suppression_leak_rates: Mapping[str, float] = field(default_factory=lambda: MappingProxyType(_FIRE_SUPPRESSION_LEAK_RATES))
    default_fire_suppression_leak_rate: float = 0.025

    def screening_factor(self, equipment_type: str | None) -> tuple[float, float, float]:
        """Return (k_install, k_op, k_disp) for an equipment type."""
        return self.screening_factors.get(equipment_type or "", self.default_screening_factor)

    def leak_rate(self, equipment_type: str | None) -> float:
        """Return the fire-suppression leak rate; anything not 'Fixed' is portable."""
        return self.fire_suppression_leak_rates.get(
            equipment_type or "", self.default_fire_suppression_leak_rate
        )


CONSTANTS = ConstantRegistry()
