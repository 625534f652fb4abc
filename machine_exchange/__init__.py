"""
Machine exchange gateway.

Registered machines place buy and sell orders on behalf of users through a
single access-controlled gateway; the owner administers the machine
registry and its fees.
"""
from machine_exchange.application.services.gateway import MachineExchangeGateway
from machine_exchange.container import Container

__version__ = "0.1.0"

__all__ = ['MachineExchangeGateway', 'Container', '__version__']
