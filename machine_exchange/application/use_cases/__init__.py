"""
Application Use Cases.

This module contains the business use cases that orchestrate
domain logic through port interfaces.
"""
from machine_exchange.application.use_cases.manage_machines import ManageMachinesUseCase
from machine_exchange.application.use_cases.execute_order import ExecuteOrderUseCase

__all__ = [
    "ManageMachinesUseCase",
    "ExecuteOrderUseCase",
]
