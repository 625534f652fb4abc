"""
LockPort - Non-blocking named locks.

A flow that hands control to an external adapter holds a named lock for
the duration of that call; an attempt to enter the same flow while the
lock is held fails immediately instead of waiting.

Lock names:
- target_to_base: sell flow (swap plus residual forwarding)
"""
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from machine_exchange.exceptions import GatewayError

SELL_FLOW_LOCK = "target_to_base"


class LockPort(ABC):
    """
    Port interface for non-blocking named locks.

    Usage:
        async with lock_port.lock(SELL_FLOW_LOCK) as acquired:
            if not acquired:
                raise ReentrantCallError("order_target_to_base")
            await swap_and_forward()
    """

    @abstractmethod
    async def acquire(self, lock_name: str) -> bool:
        """
        Take the lock if it is free. Never waits.

        Returns:
            False if the lock is already held
        """
        pass

    @abstractmethod
    async def release(self, lock_name: str) -> None:
        """Free the lock. Freeing a lock that is not held does nothing."""
        pass

    @abstractmethod
    async def is_locked(self, lock_name: str) -> bool:
        pass

    @asynccontextmanager
    async def lock(
        self,
        lock_name: str,
        raise_on_failure: bool = False
    ) -> AsyncGenerator[bool, None]:
        """
        Hold lock_name for the enclosed block.

        The lock is released on exit only if this block acquired it; a caller
        that found it held never frees it for the holder.

        Yields:
            Whether the lock was acquired

        Raises:
            LockAcquisitionError: If raise_on_failure and the lock is held
        """
        acquired = await self.acquire(lock_name)

        if not acquired and raise_on_failure:
            raise LockAcquisitionError(lock_name)

        try:
            yield acquired
        finally:
            if acquired:
                await self.release(lock_name)


class LockAcquisitionError(GatewayError):
    """Named lock is held by another flow."""

    def __init__(self, lock_name: str):
        super().__init__(f"Lock is already held: {lock_name}", error_code="LOCK_HELD")
        self.lock_name = lock_name
