"""
Domain Layer - Pure Business Logic

This module contains the core domain logic with zero external dependencies.

Structure:
- entities/: Agent, GatewayState aggregate, order request/receipt
- value_objects/: uint256 helpers, Authorization
- services/: FeeCalculator, AgentRegistry, OwnershipGuard
- exceptions.py: Domain-specific exceptions
"""
