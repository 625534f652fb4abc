"""Settings module."""
from .settings import FeeConfig, OrderConfig, DatabaseConfig, LogConfig, validate_all_configs

__all__ = ['FeeConfig', 'OrderConfig', 'DatabaseConfig', 'LogConfig', 'validate_all_configs']
