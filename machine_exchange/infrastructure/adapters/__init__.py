"""Infrastructure adapters."""
from machine_exchange.infrastructure.adapters.persistence.memory_state_adapter import InMemoryStateAdapter
from machine_exchange.infrastructure.adapters.persistence.memory_lock_adapter import InMemoryLockAdapter
from machine_exchange.infrastructure.adapters.persistence.sql_state_adapter import SqlAlchemyStateAdapter
from machine_exchange.infrastructure.adapters.exchange.simulated_exchange import (
    SimulatedLedger,
    SimulatedTokenAdapter,
    SimulatedRouterAdapter,
)

__all__ = [
    "InMemoryStateAdapter",
    "InMemoryLockAdapter",
    "SqlAlchemyStateAdapter",
    "SimulatedLedger",
    "SimulatedTokenAdapter",
    "SimulatedRouterAdapter",
]
