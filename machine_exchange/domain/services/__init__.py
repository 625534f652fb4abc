"""Domain services."""
from machine_exchange.domain.services.fee_calculator import (
    FeeCalculator,
    FeeResult,
    DEFAULT_GRANULARITY,
)
from machine_exchange.domain.services.agent_registry import AgentRegistry
from machine_exchange.domain.services.ownership_guard import OwnershipGuard

__all__ = [
    "FeeCalculator",
    "FeeResult",
    "DEFAULT_GRANULARITY",
    "AgentRegistry",
    "OwnershipGuard",
]
