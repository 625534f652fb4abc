"""
AgentRegistry Domain Service

Mapping from machine identity to fee configuration; the source of truth
for order authorization. Mutations assume the caller has already been
authorized as owner by OwnershipGuard.

Invariant: every stored Agent has buy_fee and sell_fee strictly below the
fee granularity. Fees are validated before insert or replace, never
corrected afterwards.
"""
from typing import List, Optional

from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.exceptions import (
    AlreadyRegisteredError,
    FeeOutOfRangeError,
    NotRegisteredError,
    UnauthorizedAgentError,
)
from machine_exchange.domain.services.fee_calculator import FeeCalculator
from machine_exchange.domain.value_objects.authorization import Authorization
from machine_exchange.domain.value_objects.units import Address, normalize_address


class AgentRegistry:
    """
    Registry operations over GatewayState.machines.

    Attributes:
        fee_calculator: Provides the fee granularity and range check
        default_fee: Fee assigned to both directions for new machines
    """

    def __init__(self, fee_calculator: FeeCalculator, default_fee: int):
        """
        Args:
            fee_calculator: Fee calculator defining the granularity
            default_fee: Initial buy/sell fee for new machines

        Raises:
            FeeOutOfRangeError: If default_fee is not below the granularity
        """
        if not fee_calculator.is_valid_fee(default_fee):
            raise FeeOutOfRangeError(default_fee, fee_calculator.granularity)
        self.fee_calculator = fee_calculator
        self.default_fee = default_fee

    def add(self, state: GatewayState, identity: Address) -> Agent:
        """
        Register a machine with default fees.

        Raises:
            AlreadyRegisteredError: If identity is already registered
        """
        identity = normalize_address(identity)
        if identity in state.machines:
            raise AlreadyRegisteredError(identity)

        agent = Agent(identity=identity, buy_fee=self.default_fee, sell_fee=self.default_fee)
        state.machines[identity] = agent
        return agent

    def remove(self, state: GatewayState, identity: Address) -> bool:
        """
        Remove a machine. Absence is not an error.

        Returns:
            True if an entry was removed
        """
        identity = normalize_address(identity)
        return state.machines.pop(identity, None) is not None

    def edit_fees(
        self,
        state: GatewayState,
        identity: Address,
        buy_fee: int,
        sell_fee: int,
    ) -> Agent:
        """
        Replace both fees of a registered machine.

        Both fees are validated before the entry is touched, and the frozen
        Agent is swapped in a single assignment, so either both fees change
        or neither does.

        Raises:
            NotRegisteredError: If identity is not registered
            FeeOutOfRangeError: If either fee is not in [0, granularity)
        """
        identity = normalize_address(identity)
        current = state.machines.get(identity)
        if current is None:
            raise NotRegisteredError(identity)

        for fee in (buy_fee, sell_fee):
            if not self.fee_calculator.is_valid_fee(fee):
                raise FeeOutOfRangeError(fee, self.fee_calculator.granularity)

        updated = current.with_fees(buy_fee=buy_fee, sell_fee=sell_fee)
        state.machines[identity] = updated
        return updated

    def lookup(self, state: GatewayState, identity: Address) -> Optional[Agent]:
        """Return the registered machine, or None."""
        if not isinstance(identity, str):
            return None
        return state.machines.get(identity.strip())

    def list_agents(self, state: GatewayState) -> List[Agent]:
        """Return all registered machines sorted by identity."""
        return sorted(state.machines.values(), key=lambda agent: agent.identity)

    def authorize(self, state: GatewayState, caller: Address) -> Authorization:
        """Check that caller is a registered machine."""
        agent = self.lookup(state, caller)
        if agent is None:
            return Authorization.deny(caller, UnauthorizedAgentError(caller))
        return Authorization.allow(caller, agent=agent)
