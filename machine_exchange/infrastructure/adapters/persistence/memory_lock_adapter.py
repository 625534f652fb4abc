"""
InMemoryLockAdapter - Process-local LockPort.

Lock names live in a set; a lock is held while its name is present.
"""
import asyncio
from typing import Set

from machine_exchange.application.ports.outbound.lock_port import LockPort


class InMemoryLockAdapter(LockPort):
    """
    Named locks for a single event loop.

    Check-and-add runs under an asyncio.Lock so two tasks racing for the
    same name cannot both win.
    """

    def __init__(self):
        self._held: Set[str] = set()
        self._guard = asyncio.Lock()

    async def acquire(self, lock_name: str) -> bool:
        async with self._guard:
            if lock_name in self._held:
                return False
            self._held.add(lock_name)
            return True

    async def release(self, lock_name: str) -> None:
        async with self._guard:
            self._held.discard(lock_name)

    async def is_locked(self, lock_name: str) -> bool:
        return lock_name in self._held

    def clear(self) -> None:
        """Drop every held lock (test cleanup)."""
        self._held.clear()

    @property
    def held_locks(self) -> Set[str]:
        """Snapshot of held lock names."""
        return set(self._held)
