"""
aggregate.py – Fold calculation results into per-gas, per-scope and
per-activity-type totals.

The fold is a single left-to-right pass.  Fields that are zero or missing on
a result contribute nothing; they are not errors.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from ghg_calc.constants import ALL_SCOPES, RESULT_DECIMALS
from ghg_calc.schemas import CalculationResult

logger = logging.getLogger(__name__)


@dataclass
class AggregateResult:
    """Running totals over a sequence of CalculationResult (metric tons CO₂e)."""

    total_co2_mt: float = 0.0
    total_ch4_co2e_mt: float = 0.0
    total_n2o_co2e_mt: float = 0.0
    total_co2e_mt: float = 0.0
    total_biomass_co2_mt: float = 0.0
    by_scope: dict[str, float] = field(
        default_factory=lambda: {scope: 0.0 for scope in ALL_SCOPES}
    )
    by_activity_type: dict[str, float] = field(default_factory=dict)
    result_count: int = 0

    def add(self, result: CalculationResult) -> None:
        """Fold one result into the running totals."""
        self.total_co2_mt += result.co2_mt or 0.0
        self.total_ch4_co2e_mt += result.ch4_co2e_mt or 0.0
        self.total_n2o_co2e_mt += result.n2o_co2e_mt or 0.0
        self.total_co2e_mt += result.total_co2e_mt or 0.0
        self.total_biomass_co2_mt += result.biomass_co2_mt or 0.0

        total = result.total_co2e_mt or 0.0
        self.by_scope[result.scope] = self.by_scope.get(result.scope, 0.0) + total
        self.by_activity_type[result.activity_type] = (
            self.by_activity_type.get(result.activity_type, 0.0) + total
        )
        self.result_count += 1

    def to_dict(self) -> dict[str, Any]:
        """Return the totals rounded to reporting precision."""
        return {
            "total_co2_mt": round(self.total_co2_mt, RESULT_DECIMALS),
            "total_ch4_co2e_mt": round(self.total_ch4_co2e_mt, RESULT_DECIMALS),
            "total_n2o_co2e_mt": round(self.total_n2o_co2e_mt, RESULT_DECIMALS),
            "total_co2e_mt": round(self.total_co2e_mt, RESULT_DECIMALS),
            "total_biomass_co2_mt": round(self.total_biomass_co2_mt, RESULT_DECIMALS),
            "by_scope": {k: round(v, RESULT_DECIMALS) for k, v in self.by_scope.items()},
            "by_activity_type": {
                k: round(v, RESULT_DECIMALS) for k, v in self.by_activity_type.items()
            },
            "result_count": self.result_count,
        }


def aggregate(results: Iterable[CalculationResult]) -> AggregateResult:
    """
    Sum a sequence of results.

    Order does not matter beyond floating-point addition noise, which is
    well below the six-decimal reporting precision.
    """
    totals = AggregateResult()
    for result in results:
        totals.add(result)

    logger.info(
        "Aggregate | %d results | Scope1=%.6f Scope2=%.6f Scope3=%.6f Total=%.6f t CO₂e",
        totals.result_count,
        totals.by_scope["scope_1"],
        totals.by_scope["scope_2"],
        totals.by_scope["scope_3"],
        totals.total_co2e_mt,
    )
    return totals
