"""
Domain Exceptions

Custom exceptions for domain layer errors. Each carries an ``error_code``
so callers can report the specific failure reason.
"""
from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class NotOwnerError(DomainError):
    """Raised when a non-owner attempts an administrative operation."""

    def __init__(self, caller: str):
        super().__init__(f"Caller {caller} is not the owner", error_code="NOT_OWNER")
        self.caller = caller


class UnauthorizedAgentError(DomainError):
    """Raised when an order is submitted by an unregistered identity."""

    def __init__(self, caller: str):
        super().__init__(
            f"Caller {caller} is not a registered machine",
            error_code="UNAUTHORIZED_AGENT",
        )
        self.caller = caller


class AlreadyRegisteredError(DomainError):
    """Raised when adding a machine that is already registered."""

    def __init__(self, identity: str):
        super().__init__(
            f"Machine {identity} is already registered",
            error_code="ALREADY_REGISTERED",
        )
        self.identity = identity


class NotRegisteredError(DomainError):
    """Raised when editing a machine that is not registered."""

    def __init__(self, identity: str):
        super().__init__(
            f"Machine {identity} is not registered",
            error_code="NOT_REGISTERED",
        )
        self.identity = identity


class FeeOutOfRangeError(DomainError):
    """Raised when a fee is outside [0, granularity)."""

    def __init__(self, fee: int, granularity: int):
        super().__init__(
            f"Fee {fee} is out of range [0, {granularity})",
            error_code="FEE_OUT_OF_RANGE",
        )
        self.fee = fee
        self.granularity = granularity


class ArithmeticOverflowError(DomainError):
    """Raised when a uint256 operation leaves the representable range."""

    def __init__(self, operation: str, detail: str = ""):
        message = f"Arithmetic overflow in {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, error_code="ARITHMETIC_OVERFLOW")
        self.operation = operation


class InvalidOrderError(DomainError):
    """Raised when order parameters are invalid."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid order: {reason}", error_code="INVALID_ORDER")
        self.reason = reason


class InvalidIdentityError(DomainError):
    """Raised when an identity is not a non-empty string."""

    def __init__(self, value: object):
        super().__init__(f"Invalid identity: {value!r}", error_code="INVALID_IDENTITY")
        self.value = value


class ReentrantCallError(DomainError):
    """Raised when a guarded flow is re-entered before it completes."""

    def __init__(self, operation: str):
        super().__init__(
            f"Reentrant call into {operation} rejected",
            error_code="REENTRANT_CALL",
        )
        self.operation = operation
