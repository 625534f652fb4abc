"""Domain entities."""
from machine_exchange.domain.entities.agent import Agent, OrderDirection
from machine_exchange.domain.entities.order import OrderRequest, OrderReceipt
from machine_exchange.domain.entities.gateway import GatewayState

__all__ = [
    "Agent",
    "OrderDirection",
    "OrderRequest",
    "OrderReceipt",
    "GatewayState",
]
