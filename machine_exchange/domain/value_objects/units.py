"""
uint256 Units and Identities

Amounts and fees are plain Python ints restricted to the uint256 range.
Python ints never wrap, so every operation that could leave the range is
checked explicitly and raises ArithmeticOverflowError instead.
"""
from typing import Final

from machine_exchange.domain.exceptions import (
    ArithmeticOverflowError,
    InvalidIdentityError,
)

# Opaque principal identifier (address-equivalent)
Address = str

UINT256_MAX: Final[int] = 2**256 - 1


def require_uint(value: int, name: str = "value") -> int:
    """
    Validate that value is an int within [0, UINT256_MAX].

    Raises:
        TypeError: If value is not an int (bool is rejected too)
        ArithmeticOverflowError: If value is outside the uint256 range
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticOverflowError(name, f"{value} is outside uint256 range")
    return value


def checked_mul(a: int, b: int) -> int:
    """Multiply two uint256 values, raising on overflow."""
    result = require_uint(a, "lhs") * require_uint(b, "rhs")
    if result > UINT256_MAX:
        raise ArithmeticOverflowError("mul", f"{a} * {b} exceeds uint256")
    return result


def checked_add(a: int, b: int) -> int:
    """Add two uint256 values, raising on overflow."""
    result = require_uint(a, "lhs") + require_uint(b, "rhs")
    if result > UINT256_MAX:
        raise ArithmeticOverflowError("add", f"{a} + {b} exceeds uint256")
    return result


def checked_sub(a: int, b: int) -> int:
    """Subtract two uint256 values, raising on underflow."""
    result = require_uint(a, "lhs") - require_uint(b, "rhs")
    if result < 0:
        raise ArithmeticOverflowError("sub", f"{a} - {b} underflows")
    return result


def normalize_address(value: object) -> Address:
    """
    Validate an identity and strip surrounding whitespace.

    Identities are opaque: no case folding or checksum handling is applied.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidIdentityError(value)
    return value.strip()
