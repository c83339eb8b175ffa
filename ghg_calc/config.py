"""
config.py – Load and validate engine settings from the environment.

Settings are read from environment variables (or a .env file at the
project root).  Call `get_config()` to obtain the cached, validated
Settings object.

Variables
---------
GHG_REFRIGERANT_METHOD   simple | material_balance   (default: material_balance)
GHG_LOG_LEVEL            DEBUG | INFO | WARNING | ERROR   (default: INFO)
GHG_REPORTING_STANDARD   label stored with each result  (default: GHG_PROTOCOL)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Project root: the directory holding ghg_calc/
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

_env_file = _PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

REFRIGERANT_METHOD_SIMPLE = "simple"
REFRIGERANT_METHOD_MATERIAL_BALANCE = "material_balance"
REFRIGERANT_METHODS = (REFRIGERANT_METHOD_SIMPLE, REFRIGERANT_METHOD_MATERIAL_BALANCE)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Validated runtime configuration."""

    refrigerant_method: str = REFRIGERANT_METHOD_MATERIAL_BALANCE
    log_level: str = "INFO"
    reporting_standard: str = "GHG_PROTOCOL"


def load_settings() -> Settings:
    """
    Read environment variables, validate them, and return a fresh Settings.

    Raises
    ------
    EnvironmentError
        If a variable holds a value outside its allowed set.
    """
    method = os.environ.get("GHG_REFRIGERANT_METHOD", REFRIGERANT_METHOD_MATERIAL_BALANCE)
    method = method.strip().lower()
    if method not in REFRIGERANT_METHODS:
        raise EnvironmentError(
            f"GHG_REFRIGERANT_METHOD must be one of {', '.join(REFRIGERANT_METHODS)}; "
            f"got '{method}'"
        )

    level = os.environ.get("GHG_LOG_LEVEL", "INFO").strip().upper()
    if level not in _LOG_LEVELS:
        raise EnvironmentError(
            f"GHG_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}; got '{level}'"
        )

    standard = os.environ.get("GHG_REPORTING_STANDARD", "").strip() or "GHG_PROTOCOL"

    return Settings(
        refrigerant_method=method,
        log_level=level,
        reporting_standard=standard,
    )


@lru_cache(maxsize=1)
def get_config() -> Settings:
    """Return the process-wide Settings, loading them on first use."""
    return load_settings()
