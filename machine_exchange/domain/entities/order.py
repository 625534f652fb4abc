"""
Order Request and Receipt

Transient values describing one order. Neither is persisted: a request is
built per call and a receipt is returned to the caller after execution.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from machine_exchange.domain.entities.agent import OrderDirection
from machine_exchange.domain.exceptions import InvalidOrderError
from machine_exchange.domain.value_objects.units import (
    Address,
    require_uint,
    normalize_address,
)


@dataclass(frozen=True)
class OrderRequest:
    """
    Request to execute an order on behalf of an end user.

    Attributes:
        direction: Base-to-target (buy) or target-to-base (sell)
        amount: Gross amount before fee
        tolerance: Slippage bound in fee-granularity units
        user: End user receiving the output
        deadline_seconds: Swap staleness window (None uses the configured default)
    """
    direction: OrderDirection
    amount: int
    tolerance: int
    user: Address
    deadline_seconds: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate order request."""
        require_uint(self.amount, "amount")
        require_uint(self.tolerance, "tolerance")
        object.__setattr__(self, "user", normalize_address(self.user))
        if self.deadline_seconds is not None:
            if isinstance(self.deadline_seconds, bool) or not isinstance(self.deadline_seconds, int):
                raise InvalidOrderError("deadline_seconds must be an int")
            if self.deadline_seconds <= 0:
                raise InvalidOrderError("deadline_seconds must be positive")

    @classmethod
    def buy(
        cls,
        amount: int,
        tolerance: int,
        user: Address,
        deadline_seconds: Optional[int] = None,
    ) -> OrderRequest:
        """Create a base-to-target order request."""
        return cls(
            direction=OrderDirection.BASE_TO_TARGET,
            amount=amount,
            tolerance=tolerance,
            user=user,
            deadline_seconds=deadline_seconds,
        )

    @classmethod
    def sell(
        cls,
        amount: int,
        tolerance: int,
        user: Address,
        deadline_seconds: Optional[int] = None,
    ) -> OrderRequest:
        """Create a target-to-base order request."""
        return cls(
            direction=OrderDirection.TARGET_TO_BASE,
            amount=amount,
            tolerance=tolerance,
            user=user,
            deadline_seconds=deadline_seconds,
        )


@dataclass(frozen=True)
class OrderReceipt:
    """
    Result of an executed order.

    Attributes:
        direction: Order direction
        agent: Machine that submitted the order
        user: End user that received the output
        amount: Gross amount before fee
        fee: Fee retained by the gateway
        net_amount: Amount forwarded to the router
        path: Swap path
        quoted_out: Router quote for net_amount
        amount_out_min: Minimum output enforced on the swap
        amount_out: Output delivered to the user
        deadline: Unix timestamp passed to the router
    """
    direction: OrderDirection
    agent: Address
    user: Address
    amount: int
    fee: int
    net_amount: int
    path: Tuple[Address, ...]
    quoted_out: int
    amount_out_min: int
    amount_out: int
    deadline: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "direction": self.direction.value,
            "agent": self.agent,
            "user": self.user,
            "amount": self.amount,
            "fee": self.fee,
            "net_amount": self.net_amount,
            "path": list(self.path),
            "quoted_out": self.quoted_out,
            "amount_out_min": self.amount_out_min,
            "amount_out": self.amount_out,
            "deadline": self.deadline,
        }
