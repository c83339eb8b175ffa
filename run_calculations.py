"""
run_calculations.py – Standalone runner that calculates a batch of activities
from a JSON file and prints per-activity results plus scope totals.

The batch file holds a list of items, each pairing an activity with the
emission factor record already resolved for it:

    [
      {
        "activity": {"activity_type": "purchased_electricity",
                     "electricity_kwh": 10000, "grid_region": "CAMX"},
        "emission_factor": {"version": "eGRID2022", "co2e_kg_per_kwh": 0.42}
      }
    ]

Usage
──────
# Print a results table and GHG summary
python run_calculations.py --input batch.json

# Emit results + aggregate as JSON instead of tables
python run_calculations.py --input batch.json --json

# Override the configured refrigerant method for this run
python run_calculations.py --input batch.json --refrigerant-method simple
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ghg_calc.aggregate import aggregate
from ghg_calc.calculations import calculate
from ghg_calc.config import REFRIGERANT_METHODS, get_config
from ghg_calc.errors import CalculationError
from ghg_calc.schemas import CalculationResult
from ghg_calc.validators import parse_activity, parse_factor

log = logging.getLogger(__name__)
console = Console()


def load_batch(path: Path) -> list[dict[str, Any]]:
    """Read the batch file; it must contain a JSON list of items."""
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of items, got {type(data).__name__}")
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: item {idx} is not an object")
    return data


def run_batch(
    items: list[dict[str, Any]],
    settings,
) -> tuple[list[CalculationResult], list[str]]:
    """
    Calculate every item; failures are collected per item, never replaced
    by a default number.
    """
    results: list[CalculationResult] = []
    errors: list[str] = []
    for idx, item in enumerate(items):
        raw_activity = item.get("activity") or {}
        raw_factor = item.get("emission_factor") or {}
        try:
            activity = parse_activity(raw_activity)
            factor = parse_factor(activity.activity_type, raw_factor)
            results.append(calculate(activity, factor, settings=settings))
        except CalculationError as exc:
            errors.append(f"item {idx} ({raw_activity.get('activity_type', '?')}): {exc}")
            log.error("Item %d failed: %s", idx, exc)
    return results, errors


def _print_results(results: list[CalculationResult]) -> None:
    table = Table(title="Calculation results")
    table.add_column("#", justify="right")
    table.add_column("Activity")
    table.add_column("Scope")
    table.add_column("CO₂ t", justify="right")
    table.add_column("CH₄ tCO₂e", justify="right")
    table.add_column("N₂O tCO₂e", justify="right")
    table.add_column("Total tCO₂e", justify="right")
    table.add_column("Biomass CO₂ t", justify="right")
    table.add_column("Factor version")

    for i, r in enumerate(results):
        table.add_row(
            str(i),
            r.activity_type,
            r.scope,
            f"{r.co2_mt:.6f}",
            f"{r.ch4_co2e_mt:.6f}",
            f"{r.n2o_co2e_mt:.6f}",
            f"{r.total_co2e_mt:.6f}",
            f"{r.biomass_co2_mt:.6f}",
            r.factor_version,
        )
    console.print(table)


def _print_summary(summary: dict[str, Any]) -> None:
    table = Table(title="GHG summary (t CO₂e)")
    table.add_column("Bucket")
    table.add_column("t CO₂e", justify="right")
    for scope, total in summary["by_scope"].items():
        table.add_row(scope, f"{total:.6f}")
    for atype, total in summary["by_activity_type"].items():
        table.add_row(f"  {atype}", f"{total:.6f}")
    table.add_row("[bold]TOTAL[/]", f"[bold]{summary['total_co2e_mt']:.6f}[/]")
    table.add_row("Biomass CO₂ (excluded)", f"{summary['total_biomass_co2_mt']:.6f}")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate GHG emissions for a batch of activities with resolved factors."
    )
    parser.add_argument(
        "--input", required=True, metavar="FILE",
        help="JSON file with a list of {activity, emission_factor} items.",
    )
    parser.add_argument(
        "--json", action="store_true", dest="as_json",
        help="Print results and totals as JSON instead of tables.",
    )
    parser.add_argument(
        "--refrigerant-method", choices=REFRIGERANT_METHODS, default=None,
        help="Override GHG_REFRIGERANT_METHOD for this run.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_config()
    except EnvironmentError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        return 1
    if args.refrigerant_method:
        settings = replace(settings, refrigerant_method=args.refrigerant_method)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )

    path = Path(args.input)
    if not path.exists():
        console.print(f"[red]Error:[/] File not found: {path}")
        return 1
    try:
        items = load_batch(path)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        return 1

    log.info("Calculating %d items (refrigerant method: %s)", len(items), settings.refrigerant_method)
    results, errors = run_batch(items, settings)
    summary = aggregate(results).to_dict()

    if args.as_json:
        payload = {
            "results": [r.model_dump(mode="json") for r in results],
            "summary": summary,
            "errors": errors,
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        _print_results(results)
        _print_summary(summary)
        if errors:
            console.print("[yellow]Failures:[/]")
            for e in errors:
                console.print(f"  [red]✗[/] {e}")
        console.print(f"Processed: {len(results)}  Failed: {len(errors)}")

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
