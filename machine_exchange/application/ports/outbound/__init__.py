# Outbound ports (external system interfaces)
from machine_exchange.application.ports.outbound.token_port import TokenPort
from machine_exchange.application.ports.outbound.router_port import ExchangeRouterPort
from machine_exchange.application.ports.outbound.state_port import StatePort
from machine_exchange.application.ports.outbound.lock_port import (
    LockPort,
    SELL_FLOW_LOCK,
    LockAcquisitionError,
)
from machine_exchange.application.ports.outbound.time_provider_port import (
    TimeProviderPort,
    SystemTimeAdapter,
    FixedTimeAdapter,
)

__all__ = [
    "TokenPort",
    "ExchangeRouterPort",
    "StatePort",
    "LockPort",
    "SELL_FLOW_LOCK",
    "LockAcquisitionError",
    "TimeProviderPort",
    "SystemTimeAdapter",
    "FixedTimeAdapter",
]
