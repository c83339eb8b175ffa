"""
Unit tests for ghg_calc/config.py
"""
import pytest

from ghg_calc.config import Settings, get_config, load_settings

_VARS = ("GHG_REFRIGERANT_METHOD", "GHG_LOG_LEVEL", "GHG_REPORTING_STANDARD")


@pytest.fixture
def clean_env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)
    get_config.cache_clear()
    yield monkeypatch
    get_config.cache_clear()


def test_defaults(clean_env):
    settings = load_settings()
    assert settings == Settings()
    assert settings.refrigerant_method == "material_balance"
    assert settings.log_level == "INFO"
    assert settings.reporting_standard == "GHG_PROTOCOL"


def test_reads_environment(clean_env):
    clean_env.setenv("GHG_REFRIGERANT_METHOD", " Simple ")
    clean_env.setenv("GHG_LOG_LEVEL", "debug")
    clean_env.setenv("GHG_REPORTING_STANDARD", "ISO_14064")
    settings = load_settings()
    assert settings.refrigerant_method == "simple"
    assert settings.log_level == "DEBUG"
    assert settings.reporting_standard == "ISO_14064"


def test_invalid_refrigerant_method(clean_env):
    clean_env.setenv("GHG_REFRIGERANT_METHOD", "both")
    with pytest.raises(EnvironmentError, match="GHG_REFRIGERANT_METHOD"):
        load_settings()


def test_invalid_log_level(clean_env):
    clean_env.setenv("GHG_LOG_LEVEL", "LOUD")
    with pytest.raises(EnvironmentError, match="GHG_LOG_LEVEL"):
        load_settings()


def test_get_config_is_cached(clean_env):
    first = get_config()
    clean_env.setenv("GHG_REFRIGERANT_METHOD", "simple")
    assert get_config() is first
    get_config.cache_clear()
    assert get_config().refrigerant_method == "simple"
