"""
units.py – Fuel quantity conversion between user units and factor units.

MMBtu is the pivot: a direct ratio is looked up for ``unit → MMBtu``; any
other target is reached in two legs (source → MMBtu → target) by dividing
by the target unit's ratio.

Accepted unit spellings
───────────────────────
 gallons   : "gallons", "gallon", "gal"
 scf       : "scf", "standard cubic feet"
 therm     : "therm", "therms", "Therm"
 short ton : "short ton", "short tons", "tons"
 MMBtu     : "MMBtu", "mmbtu"
"""
from __future__ import annotations

import logging

from ghg_calc.constants import CONSTANTS, MMBTU, PROPANE_FUELS, ConstantRegistry
from ghg_calc.errors import UnsupportedConversionError

logger = logging.getLogger(__name__)

GALLONS = "gallons"
SCF = "scf"
THERM = "therm"
SHORT_TON = "short ton"

_UNIT_ALIASES: dict[str, str] = {
    "gallons": GALLONS,
    "gallon": GALLONS,
    "gal": GALLONS,
    "scf": SCF,
    "standard cubic feet": SCF,
    "therm": THERM,
    "therms": THERM,
    "short ton": SHORT_TON,
    "short tons": SHORT_TON,
    "tons": SHORT_TON,
    "mmbtu": MMBTU,
}


def normalize_unit(unit: str) -> str:
    """Map a user-entered unit onto its canonical spelling (unknown units pass through)."""
    key = unit.strip().lower()
    return _UNIT_ALIASES.get(key, unit.strip())


def to_mmbtu_ratio(
    fuel_type: str,
    unit: str,
    constants: ConstantRegistry = CONSTANTS,
) -> float | None:
    """
    Return MMBtu per one *unit* of *fuel_type*, or None when no ratio is known.

    Therm is universal; gallon, scf and short-ton ratios are fuel specific.
    Propane gallons fall back to the 0.091 approximation when the gallon
    table has no entry for the fuel.
    """
    u = normalize_unit(unit)
    if u == MMBTU:
        return 1.0
    if u == THERM:
        return constants.therm_to_mmbtu
    if u == GALLONS:
        ratio = constants.gallon_to_mmbtu.get(fuel_type)
        if ratio is None and fuel_type in PROPANE_FUELS:
            return constants.propane_gallon_to_mmbtu_approx
        return ratio
    if u == SCF:
        return constants.scf_to_mmbtu.get(fuel_type)
    if u == SHORT_TON:
        return constants.short_ton_to_mmbtu.get(fuel_type)
    return None


def convert(
    fuel_type: str,
    quantity: float,
    from_unit: str,
    to_unit: str,
    constants: ConstantRegistry = CONSTANTS,
) -> float:
    """
    Convert *quantity* of *fuel_type* from *from_unit* to *to_unit*.

    Raises
    ------
    UnsupportedConversionError
        If either leg of the conversion has no known ratio.
    """
    if from_unit == to_unit:
        return quantity

    src = normalize_unit(from_unit)
    dst = normalize_unit(to_unit)
    if src == dst:
        return quantity

    src_ratio = to_mmbtu_ratio(fuel_type, src, constants)
    if src_ratio is None:
        raise UnsupportedConversionError(fuel_type, from_unit, to_unit)
    quantity_mmbtu = quantity * src_ratio

    if dst == MMBTU:
        return quantity_mmbtu

    dst_ratio = to_mmbtu_ratio(fuel_type, dst, constants)
    if not dst_ratio:
        raise UnsupportedConversionError(fuel_type, from_unit, to_unit)

    converted = quantity_mmbtu / dst_ratio
    logger.debug(
        "Convert %s | %.6f %s → %.6f MMBtu → %.6f %s",
        fuel_type, quantity, from_unit, quantity_mmbtu, converted, to_unit,
    )
    return converted
