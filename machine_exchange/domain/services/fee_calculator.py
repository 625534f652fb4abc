"""
FeeCalculator Domain Service

Fixed-point fee arithmetic. A fee value is always interpreted as
fee / granularity, and every intermediate product is checked against
the uint256 range instead of wrapping.
"""
from __future__ import annotations
from dataclasses import dataclass

from machine_exchange.domain.value_objects.units import (
    checked_mul,
    checked_sub,
    require_uint,
)


DEFAULT_GRANULARITY = 10000


@dataclass(frozen=True)
class FeeResult:
    """
    Result of a fee calculation.

    Attributes:
        gross_amount: Amount before fee
        fee: Fee retained
        net_amount: Amount after fee
    """
    gross_amount: int
    fee: int
    net_amount: int

    def is_zero_fee(self) -> bool:
        """True when nothing was deducted."""
        return self.fee == 0


@dataclass(frozen=True)
class FeeCalculator:
    """
    Domain service for computing net amounts after fee deduction.

    Attributes:
        granularity: Fee denominator (10000 => 0.01% resolution)
    """
    granularity: int = DEFAULT_GRANULARITY

    def __post_init__(self) -> None:
        """Validate granularity."""
        require_uint(self.granularity, "granularity")
        if self.granularity == 0:
            raise ValueError("Fee granularity must be positive")

    # --- Validation ---

    def is_valid_fee(self, fee: int) -> bool:
        """Check that fee is an int in [0, granularity)."""
        if isinstance(fee, bool) or not isinstance(fee, int):
            return False
        return 0 <= fee < self.granularity

    # --- Fee Calculation ---

    def fee_amount(self, amount: int, fee: int) -> int:
        """
        Calculate floor(amount * fee / granularity).

        Raises:
            ArithmeticOverflowError: If amount * fee exceeds uint256
        """
        return checked_mul(amount, fee) // self.granularity

    def net_amount(self, amount: int, fee: int) -> int:
        """
        Calculate amount - floor(amount * fee / granularity).

        The caller is responsible for fee < granularity; an out-of-range fee
        that would make the result negative raises instead of wrapping.

        Raises:
            ArithmeticOverflowError: On multiply overflow or subtraction underflow
        """
        return checked_sub(amount, self.fee_amount(amount, fee))

    def calculate(self, amount: int, fee: int) -> FeeResult:
        """Calculate gross, fee and net amounts together."""
        fee_value = self.fee_amount(amount, fee)
        return FeeResult(
            gross_amount=amount,
            fee=fee_value,
            net_amount=checked_sub(amount, fee_value),
        )

    # --- Slippage ---

    def min_amount_out(self, quoted_out: int, tolerance: int) -> int:
        """
        Minimum acceptable swap output for a quote and slippage tolerance.

        Tolerance shares the fee granularity (50 => 0.5% at 10000).
        """
        return self.net_amount(quoted_out, tolerance)
