"""
StatePort - Interface for gateway state persistence.

This port defines the contract for loading and committing the
GatewayState aggregate. A transaction works on a private copy of the
state, which is written back only when the enclosed block succeeds.
"""
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.exceptions import DeploymentError


class StatePort(ABC):
    """
    Port interface for the persistent state store.

    Usage:
        async with state_port.transaction() as state:
            registry.add(state, "machine-1")
        # committed here; discarded if the block raised
    """

    @abstractmethod
    async def load(self) -> Optional[GatewayState]:
        """
        Load a private working copy of the gateway state.

        Returns:
            GatewayState, or None if the gateway was never deployed

        Raises:
            PersistenceError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def save(self, state: GatewayState) -> None:
        """
        Persist the gateway state, replacing the stored one.

        Raises:
            PersistenceError: If the store cannot be written
        """
        pass

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[GatewayState, None]:
        """
        All-or-nothing unit of work over the gateway state.

        Yields:
            Working copy of the state

        Raises:
            DeploymentError: If no state has been deployed
        """
        state = await self.load()
        if state is None:
            raise DeploymentError("gateway has not been deployed")

        yield state

        # Only reached when the block completed without raising
        await self.save(state)
