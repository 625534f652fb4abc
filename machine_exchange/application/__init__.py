"""
Application Layer - Use Cases and Ports

This module contains the application logic that orchestrates domain services
and coordinates with external systems through ports (interfaces).

Structure:
- ports/outbound/: Interfaces the gateway uses to reach external systems
- use_cases/: Administrative and order use cases
- services/: MachineExchangeGateway, the top-level entry point
"""
from machine_exchange.application.use_cases.manage_machines import ManageMachinesUseCase
from machine_exchange.application.use_cases.execute_order import ExecuteOrderUseCase
from machine_exchange.application.services.gateway import MachineExchangeGateway

__all__ = [
    "ManageMachinesUseCase",
    "ExecuteOrderUseCase",
    "MachineExchangeGateway",
]
