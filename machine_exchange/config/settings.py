"""
Gateway settings.

Environment variables take precedence (a .env file is loaded first);
every value is validated on read. Fee constants are read once at import
and stay fixed for the lifetime of the process.
"""
import os
from typing import Optional

from dotenv import load_dotenv

from machine_exchange.exceptions import ConfigurationError

load_dotenv()


def get_env_int(key: str, default: int, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
    """Read an integer environment variable with range validation."""
    value = os.getenv(key)
    if value is None:
        return default

    try:
        int_value = int(value)
    except ValueError:
        raise ConfigurationError(key, f"cannot convert to int: {value}")
    if min_value is not None and int_value < min_value:
        raise ConfigurationError(key, f"value {int_value} is below minimum {min_value}")
    if max_value is not None and int_value > max_value:
        raise ConfigurationError(key, f"value {int_value} is above maximum {max_value}")
    return int_value


def get_env_str(key: str, default: str) -> str:
    """Read a string environment variable."""
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean environment variable (1/0, true/false, yes/no, on/off)."""
    value = os.getenv(key)
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(key, f"cannot convert to bool: {value}")


class FeeConfig:
    """Fee policy constants."""
    GRANULARITY = get_env_int("GATEWAY_FEE_GRANULARITY", 10000, min_value=1, max_value=10**18)  # 10000 => 0.01%
    DEFAULT_FEE = get_env_int("GATEWAY_FEE_DEFAULT", 1000, min_value=0)  # 10%

    @classmethod
    def validate(cls):
        if cls.DEFAULT_FEE >= cls.GRANULARITY:
            raise ConfigurationError(
                "GATEWAY_FEE_DEFAULT",
                f"default fee {cls.DEFAULT_FEE} must be below granularity {cls.GRANULARITY}",
            )


class OrderConfig:
    """Order execution settings."""
    DEADLINE_SECONDS = get_env_int("GATEWAY_ORDER_DEADLINE_SECONDS", 300, min_value=1)
    DEFAULT_SLIPPAGE_TOLERANCE = get_env_int("GATEWAY_DEFAULT_SLIPPAGE_TOLERANCE", 50, min_value=0)  # 0.5%

    @classmethod
    def validate(cls):
        if cls.DEFAULT_SLIPPAGE_TOLERANCE >= FeeConfig.GRANULARITY:
            raise ConfigurationError(
                "GATEWAY_DEFAULT_SLIPPAGE_TOLERANCE",
                f"tolerance {cls.DEFAULT_SLIPPAGE_TOLERANCE} must be below granularity {FeeConfig.GRANULARITY}",
            )


class DatabaseConfig:
    """State store settings. An empty URL keeps state in memory."""
    URL = get_env_str("GATEWAY_DATABASE_URL", "")
    ECHO = get_env_bool("GATEWAY_DATABASE_ECHO", False)

    @classmethod
    def validate(cls):
        if cls.URL and "+" not in cls.URL.split("://", 1)[0]:
            raise ConfigurationError(
                "GATEWAY_DATABASE_URL",
                "an async driver is required (e.g. postgresql+asyncpg://)",
            )


class LogConfig:
    """Logging settings."""
    LEVEL = get_env_str("GATEWAY_LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if cls.LEVEL not in valid_levels:
            raise ConfigurationError(
                "GATEWAY_LOG_LEVEL",
                f"unsupported level {cls.LEVEL}. Supported: {', '.join(valid_levels)}",
            )


def validate_all_configs():
    """Validate every settings class."""
    FeeConfig.validate()
    OrderConfig.validate()
    DatabaseConfig.validate()
    LogConfig.validate()
