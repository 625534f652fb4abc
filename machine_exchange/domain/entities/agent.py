"""
Agent Domain Entity

A machine is an identity pre-authorized by the owner to submit exchange
orders on behalf of end users, with its own buy and sell fees.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum


class OrderDirection(Enum):
    """Order direction."""
    BASE_TO_TARGET = "base_to_target"  # buy
    TARGET_TO_BASE = "target_to_base"  # sell


@dataclass(frozen=True)
class Agent:
    """
    Immutable registry entry for an authorized machine.

    Fees are expressed in units of the fee granularity (fee / granularity).
    Range validation happens in AgentRegistry before an Agent is stored.

    Attributes:
        identity: Machine identity (address)
        buy_fee: Fee applied to base-to-target orders
        sell_fee: Fee applied to target-to-base orders
    """
    identity: str
    buy_fee: int
    sell_fee: int

    def fee_for(self, direction: OrderDirection) -> int:
        """Return the fee applicable to an order direction."""
        if direction == OrderDirection.BASE_TO_TARGET:
            return self.buy_fee
        return self.sell_fee

    def with_fees(self, buy_fee: int, sell_fee: int) -> Agent:
        """Return a copy with both fees replaced."""
        return replace(self, buy_fee=buy_fee, sell_fee=sell_fee)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "identity": self.identity,
            "buy_fee": self.buy_fee,
            "sell_fee": self.sell_fee,
        }
