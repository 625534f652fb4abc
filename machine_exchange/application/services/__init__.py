"""Application services."""
from machine_exchange.application.services.gateway import MachineExchangeGateway

__all__ = [
    "MachineExchangeGateway",
]
