"""
GatewayState Aggregate Root

All mutable gateway state lives in one aggregate that is passed explicitly
to every domain operation: the owner, the machine registry, and the
addresses fixed at deployment.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.value_objects.units import Address, normalize_address


@dataclass
class GatewayState:
    """
    Mutable aggregate root of the gateway.

    Attributes:
        address: The gateway's own identity (receives sell-flow swap output)
        owner: Current administrative owner
        base_token: Base currency token address
        router: Exchange router address (spender for approvals)
        machines: Registry of authorized machines keyed by identity
    """
    address: Address
    owner: Address
    base_token: Address
    router: Address
    machines: Dict[Address, Agent] = field(default_factory=dict)

    @classmethod
    def deploy(
        cls,
        deployer: Address,
        address: Address,
        base_token: Address,
        router: Address,
    ) -> GatewayState:
        """Create fresh state owned by the deployer with an empty registry."""
        return cls(
            address=normalize_address(address),
            owner=normalize_address(deployer),
            base_token=normalize_address(base_token),
            router=normalize_address(router),
        )

    def snapshot(self) -> GatewayState:
        """
        Copy the state for later restore.

        Agents are frozen, so copying the registry dict is sufficient.
        """
        return GatewayState(
            address=self.address,
            owner=self.owner,
            base_token=self.base_token,
            router=self.router,
            machines=dict(self.machines),
        )

    def restore(self, snapshot: GatewayState) -> None:
        """Restore in place so existing references observe the rollback."""
        self.address = snapshot.address
        self.owner = snapshot.owner
        self.base_token = snapshot.base_token
        self.router = snapshot.router
        self.machines = dict(snapshot.machines)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "address": self.address,
            "owner": self.owner,
            "base_token": self.base_token,
            "router": self.router,
            "machines": [agent.to_dict() for agent in self.machines.values()],
        }
