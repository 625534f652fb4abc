"""
Tests for FeeCalculator domain service.
"""
import pytest

from machine_exchange.domain.exceptions import ArithmeticOverflowError
from machine_exchange.domain.services.fee_calculator import (
    DEFAULT_GRANULARITY,
    FeeCalculator,
    FeeResult,
)
from machine_exchange.domain.value_objects.units import UINT256_MAX


class TestFeeResult:
    """Tests for FeeResult value object."""

    def test_create_fee_result(self):
        """Should hold gross, fee and net amounts."""
        result = FeeResult(gross_amount=1000, fee=100, net_amount=900)
        assert result.gross_amount == 1000
        assert result.fee == 100
        assert result.net_amount == 900
        assert result.is_zero_fee() is False

    def test_zero_fee(self):
        result = FeeResult(gross_amount=500, fee=0, net_amount=500)
        assert result.is_zero_fee() is True


class TestFeeCalculator:
    """Tests for FeeCalculator domain service."""

    @pytest.fixture
    def calculator(self):
        """Calculator with the default granularity (10000)."""
        return FeeCalculator()

    def test_default_granularity(self, calculator):
        assert calculator.granularity == DEFAULT_GRANULARITY == 10000

    def test_zero_granularity_rejected(self):
        with pytest.raises(ValueError):
            FeeCalculator(granularity=0)

    def test_non_int_granularity_rejected(self):
        with pytest.raises(TypeError):
            FeeCalculator(granularity=1.5)

    # --- Net Amount ---

    def test_ten_percent_fee(self, calculator):
        """amount=1000, fee=1000 => net 900."""
        assert calculator.net_amount(1000, 1000) == 900

    def test_zero_fee_returns_amount(self, calculator):
        assert calculator.net_amount(500, 0) == 500

    def test_maximum_fee(self, calculator):
        """fee=9999 keeps floor(amount / 10000)."""
        assert calculator.net_amount(10000, 9999) == 1
        assert calculator.net_amount(9999, 9999) == 1  # fee floors to 9998

    def test_fee_rounds_down_in_users_favour(self, calculator):
        """floor(999 * 1000 / 10000) = 99, so net = 900."""
        assert calculator.fee_amount(999, 1000) == 99
        assert calculator.net_amount(999, 1000) == 900

    def test_zero_amount(self, calculator):
        assert calculator.net_amount(0, 1000) == 0

    def test_calculate_returns_breakdown(self, calculator):
        result = calculator.calculate(1000, 1000)
        assert result == FeeResult(gross_amount=1000, fee=100, net_amount=900)

    # --- Overflow ---

    def test_multiply_overflow_raises(self, calculator):
        """amount * fee beyond uint256 raises instead of wrapping."""
        with pytest.raises(ArithmeticOverflowError) as exc_info:
            calculator.net_amount(UINT256_MAX, 2)
        assert exc_info.value.error_code == "ARITHMETIC_OVERFLOW"

    def test_large_amount_with_zero_fee(self, calculator):
        assert calculator.net_amount(UINT256_MAX, 0) == UINT256_MAX

    def test_negative_amount_rejected(self, calculator):
        with pytest.raises(ArithmeticOverflowError):
            calculator.net_amount(-1, 0)

    def test_out_of_range_fee_underflows(self):
        """A fee above the granularity makes net negative and must raise."""
        calculator = FeeCalculator(granularity=100)
        with pytest.raises(ArithmeticOverflowError):
            calculator.net_amount(100, 200)

    # --- Validation ---

    @pytest.mark.parametrize("fee,valid", [
        (0, True),
        (9999, True),
        (10000, False),
        (10001, False),
        (-1, False),
        (True, False),
        ("100", False),
    ])
    def test_is_valid_fee(self, calculator, fee, valid):
        assert calculator.is_valid_fee(fee) is valid

    # --- Slippage ---

    def test_min_amount_out(self, calculator):
        """tolerance=50 (0.5%) of a 10000 quote allows 50 of slippage."""
        assert calculator.min_amount_out(10000, 50) == 9950

    def test_min_amount_out_zero_tolerance(self, calculator):
        assert calculator.min_amount_out(10000, 0) == 10000
