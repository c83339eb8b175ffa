"""
Tests for the run_calculations.py batch runner.
"""
import json

import pytest

import run_calculations
from ghg_calc.config import get_config

BATCH = [
    {
        "activity": {"activity_type": "purchased_electricity", "electricity_kwh": 10000, "grid_region": "CAMX"},
        "emission_factor": {"version": "eGRID2022", "co2e_kg_per_kwh": 0.42},
    },
    {
        "activity": {"activity_type": "commuting", "commute_mode": "car", "distance_per_trip_km": 10,
                     "commute_days_per_year": 220, "num_commuters": 5},
        "emission_factor": {"version": "DEFRA-2024", "co2e_kg_per_km": 0.15},
    },
]


@pytest.fixture(autouse=True)
def default_env(monkeypatch):
    for var in ("GHG_REFRIGERANT_METHOD", "GHG_LOG_LEVEL", "GHG_REPORTING_STANDARD"):
        monkeypatch.delenv(var, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def write_batch(tmp_path, items):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps(items), encoding="utf-8")
    return path


def test_json_output(tmp_path, capsys):
    path = write_batch(tmp_path, BATCH)
    code = run_calculations.main(["--input", str(path), "--json"])
    payload = json.loads(capsys.readouterr().out)

    assert code == 0
    assert [r["activity_type"] for r in payload["results"]] == ["purchased_electricity", "commuting"]
    assert payload["summary"]["total_co2e_mt"] == pytest.approx(7.5)
    assert payload["summary"]["by_scope"]["scope_2"] == pytest.approx(4.2)
    assert payload["summary"]["by_scope"]["scope_3"] == pytest.approx(3.3)
    assert payload["errors"] == []


def test_failures_reported_and_exit_nonzero(tmp_path, capsys):
    items = BATCH + [
        {
            "activity": {"activity_type": "hotel_stay", "num_nights": -2},
            "emission_factor": {"version": "x", "co2e_kg_per_night": 10},
        }
    ]
    path = write_batch(tmp_path, items)
    code = run_calculations.main(["--input", str(path), "--json"])
    payload = json.loads(capsys.readouterr().out)

    assert code == 1
    assert len(payload["results"]) == 2
    assert len(payload["errors"]) == 1
    assert "num_nights" in payload["errors"][0]


def test_refrigerant_method_override(tmp_path):
    items = [
        {
            "activity": {"activity_type": "refrigeration_ac", "refrigerant_type": "R-410A", "amount_released_kg": 1},
            "emission_factor": {"version": "AR5", "gwp": 2088},
        }
    ]
    path = write_batch(tmp_path, items)
    assert run_calculations.main(["--input", str(path), "--json"]) == 1
    assert run_calculations.main(["--input", str(path), "--json", "--refrigerant-method", "simple"]) == 0


def test_table_output(tmp_path):
    path = write_batch(tmp_path, BATCH)
    assert run_calculations.main(["--input", str(path)]) == 0


def test_missing_file(tmp_path):
    assert run_calculations.main(["--input", str(tmp_path / "nope.json")]) == 1


def test_non_list_batch_rejected(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps({"activity": {}}), encoding="utf-8")
    assert run_calculations.main(["--input", str(path)]) == 1
