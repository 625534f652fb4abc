"""
InMemoryStateAdapter - In-memory implementation of StatePort.

This adapter keeps the committed gateway state in process memory.
All data is lost when the adapter is destroyed.
"""
from typing import Optional

from machine_exchange.application.ports.outbound.state_port import StatePort
from machine_exchange.domain.entities.gateway import GatewayState


class InMemoryStateAdapter(StatePort):
    """
    In-memory state adapter.

    load() hands out a copy and save() stores a copy, so a transaction's
    working state never leaks into the committed state before commit.
    """

    def __init__(self, initial_state: Optional[GatewayState] = None):
        """Initialize storage, optionally pre-deployed."""
        self._state: Optional[GatewayState] = (
            initial_state.snapshot() if initial_state is not None else None
        )
        self._commit_count = 0

    def clear(self):
        """Forget the stored state. Useful for test cleanup."""
        self._state = None
        self._commit_count = 0

    async def load(self) -> Optional[GatewayState]:
        """Return a working copy of the committed state."""
        if self._state is None:
            return None
        return self._state.snapshot()

    async def save(self, state: GatewayState) -> None:
        """Replace the committed state."""
        self._state = state.snapshot()
        self._commit_count += 1

    @property
    def commit_count(self) -> int:
        """Number of successful saves (for testing)."""
        return self._commit_count
