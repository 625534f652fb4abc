"""
ManageMachinesUseCase - Owner-gated administration of the machine registry.

Every operation runs the ownership check first and only then touches the
registry, so a rejected call leaves the state exactly as it was.
"""
import logging

from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.services.agent_registry import AgentRegistry
from machine_exchange.domain.services.ownership_guard import OwnershipGuard
from machine_exchange.domain.value_objects.units import Address

logger = logging.getLogger(__name__)


class ManageMachinesUseCase:
    """
    Use case for the administrative surface.

    Handles machine registration, removal, fee edits and ownership transfer.
    """

    def __init__(self, registry: AgentRegistry, guard: OwnershipGuard):
        """
        Args:
            registry: Machine registry service
            guard: Ownership guard
        """
        self.registry = registry
        self.guard = guard

    def add_machine(self, state: GatewayState, caller: Address, identity: Address) -> Agent:
        """
        Register a machine with the default fees.

        Raises:
            NotOwnerError: If caller is not the owner
            AlreadyRegisteredError: If identity is already registered
        """
        self._require_owner(state, caller, "add_machine")
        agent = self.registry.add(state, identity)
        logger.info(
            f"Machine registered: {agent.identity} "
            f"(buy_fee={agent.buy_fee}, sell_fee={agent.sell_fee})"
        )
        return agent

    def remove_machine(self, state: GatewayState, caller: Address, identity: Address) -> bool:
        """
        Remove a machine. Removing an unknown identity is a no-op.

        Returns:
            True if a machine was removed

        Raises:
            NotOwnerError: If caller is not the owner
        """
        self._require_owner(state, caller, "remove_machine")
        removed = self.registry.remove(state, identity)
        if removed:
            logger.info(f"Machine removed: {identity}")
        else:
            logger.debug(f"Machine not registered, nothing removed: {identity}")
        return removed

    def edit_machine_fees(
        self,
        state: GatewayState,
        caller: Address,
        identity: Address,
        buy_fee: int,
        sell_fee: int,
    ) -> Agent:
        """
        Replace a machine's buy and sell fees.

        Raises:
            NotOwnerError: If caller is not the owner
            NotRegisteredError: If identity is not registered
            FeeOutOfRangeError: If either fee is not below the granularity
        """
        self._require_owner(state, caller, "edit_machine_fees")
        agent = self.registry.edit_fees(state, identity, buy_fee, sell_fee)
        logger.info(
            f"Machine fees updated: {agent.identity} "
            f"(buy_fee={agent.buy_fee}, sell_fee={agent.sell_fee})"
        )
        return agent

    def transfer_ownership(
        self,
        state: GatewayState,
        caller: Address,
        new_owner: Address,
    ) -> Address:
        """
        Hand ownership to new_owner immediately.

        Returns:
            The previous owner

        Raises:
            NotOwnerError: If caller is not the owner
        """
        self._require_owner(state, caller, "transfer_ownership")
        previous = self.guard.transfer_ownership(state, caller, new_owner)
        logger.info(f"Ownership transferred: {previous} -> {state.owner}")
        return previous

    def _require_owner(self, state: GatewayState, caller: Address, operation: str) -> None:
        """Raise NotOwnerError for non-owners, logging the rejection."""
        authorization = self.guard.check_owner(state, caller)
        if not authorization:
            logger.warning(f"Rejected {operation} from non-owner {caller}")
        authorization.unwrap()
