"""Domain value objects."""
from machine_exchange.domain.value_objects.units import (
    Address,
    UINT256_MAX,
    require_uint,
    checked_mul,
    checked_add,
    checked_sub,
    normalize_address,
)
from machine_exchange.domain.value_objects.authorization import Authorization

__all__ = [
    "Address",
    "UINT256_MAX",
    "require_uint",
    "checked_mul",
    "checked_add",
    "checked_sub",
    "normalize_address",
    "Authorization",
]
