"""
Authorization Value Object

Typed result of a capability check. Checks return an Authorization instead
of raising, so callers decide where in their flow a denial aborts.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from machine_exchange.domain.exceptions import DomainError

if TYPE_CHECKING:
    from machine_exchange.domain.entities.agent import Agent


@dataclass(frozen=True)
class Authorization:
    """
    Outcome of an ownership or agent authorization check.

    Attributes:
        caller: Identity that was checked
        granted: Whether the capability is held
        agent: Registered agent, for agent checks that succeeded
        error: Error describing the denial (None when granted)
    """
    caller: str
    granted: bool
    agent: Optional[Agent] = None
    error: Optional[DomainError] = None

    @classmethod
    def allow(cls, caller: str, agent: Optional[Agent] = None) -> Authorization:
        """Create a granted authorization."""
        return cls(caller=caller, granted=True, agent=agent)

    @classmethod
    def deny(cls, caller: str, error: DomainError) -> Authorization:
        """Create a denied authorization carrying the reason."""
        return cls(caller=caller, granted=False, error=error)

    def __bool__(self) -> bool:
        return self.granted

    def unwrap(self) -> Optional[Agent]:
        """
        Return the authorized agent, or raise the denial error.

        Raises:
            DomainError: The error carried by a denied authorization
        """
        if not self.granted:
            raise self.error
        return self.agent
