"""
Settings tests
"""
import pytest

from machine_exchange.config.settings import (
    DatabaseConfig,
    FeeConfig,
    LogConfig,
    OrderConfig,
    get_env_bool,
    get_env_int,
    get_env_str,
    validate_all_configs,
)
from machine_exchange.exceptions import ConfigurationError


class TestEnvHelpers:
    """Environment variable readers"""

    def test_get_env_int_default(self, monkeypatch):
        monkeypatch.delenv("GATEWAY_TEST_INT", raising=False)
        assert get_env_int("GATEWAY_TEST_INT", 7) == 7

    def test_get_env_int_value(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_TEST_INT", "42")
        assert get_env_int("GATEWAY_TEST_INT", 7) == 42

    def test_get_env_int_invalid(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_TEST_INT", "abc")
        with pytest.raises(ConfigurationError) as exc_info:
            get_env_int("GATEWAY_TEST_INT", 7)
        assert exc_info.value.config_key == "GATEWAY_TEST_INT"

    def test_get_env_int_range(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_TEST_INT", "0")
        with pytest.raises(ConfigurationError):
            get_env_int("GATEWAY_TEST_INT", 7, min_value=1)
        monkeypatch.setenv("GATEWAY_TEST_INT", "11")
        with pytest.raises(ConfigurationError):
            get_env_int("GATEWAY_TEST_INT", 7, max_value=10)

    def test_get_env_str(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_TEST_STR", "value")
        assert get_env_str("GATEWAY_TEST_STR", "default") == "value"

    @pytest.mark.parametrize("raw,expected", [("1", True), ("true", True), ("Off", False), ("no", False)])
    def test_get_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("GATEWAY_TEST_BOOL", raw)
        assert get_env_bool("GATEWAY_TEST_BOOL", not expected) is expected

    def test_get_env_bool_invalid(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_TEST_BOOL", "maybe")
        with pytest.raises(ConfigurationError):
            get_env_bool("GATEWAY_TEST_BOOL", False)


class TestConfigValidation:
    """validate() classmethods"""

    def test_fee_config_defaults(self):
        assert FeeConfig.GRANULARITY == 10000
        assert FeeConfig.DEFAULT_FEE == 1000

    def test_defaults_are_valid(self):
        validate_all_configs()

    def test_default_fee_must_be_below_granularity(self, monkeypatch):
        monkeypatch.setattr(FeeConfig, "DEFAULT_FEE", FeeConfig.GRANULARITY)
        with pytest.raises(ConfigurationError):
            FeeConfig.validate()

    def test_tolerance_must_be_below_granularity(self, monkeypatch):
        monkeypatch.setattr(OrderConfig, "DEFAULT_SLIPPAGE_TOLERANCE", FeeConfig.GRANULARITY)
        with pytest.raises(ConfigurationError):
            OrderConfig.validate()

    def test_database_url_requires_async_driver(self, monkeypatch):
        monkeypatch.setattr(DatabaseConfig, "URL", "postgresql://localhost/gateway")
        with pytest.raises(ConfigurationError):
            DatabaseConfig.validate()

    def test_database_url_with_async_driver(self, monkeypatch):
        monkeypatch.setattr(DatabaseConfig, "URL", "postgresql+asyncpg://localhost/gateway")
        DatabaseConfig.validate()

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setattr(LogConfig, "LEVEL", "VERBOSE")
        with pytest.raises(ConfigurationError):
            LogConfig.validate()
