"""Named operation locks

Operations that touch the same stored data map to one resource group, so a
scan (TASK_HH) and a dismiss (WRITE_HH) never interleave on the shortlist.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger

from headhunter.shared.exceptions import LockTimeoutError

RESOURCE_GROUPS = {
    "TASK_HH": "headhunter",
    "MANUAL_HH": "headhunter",
    "WRITE_HH": "headhunter",
    "PAYLOAD_GEN": "payload",
}


class OperationLocks:
    """Registry of asyncio locks keyed by resource group"""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        groups: dict[str, str] | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.groups = dict(RESOURCE_GROUPS if groups is None else groups)
        self._locks: dict[str, asyncio.Lock] = {}

    def group_for(self, operation: str) -> str:
        return self.groups.get(operation, operation)

    def _lock(self, group: str) -> asyncio.Lock:
        if group not in self._locks:
            self._locks[group] = asyncio.Lock()
        return self._locks[group]

    def is_held(self, operation: str) -> bool:
        return self._lock(self.group_for(operation)).locked()

    @asynccontextmanager
    async def hold(self, operation: str) -> AsyncIterator[None]:
        """Hold the lock for an operation's resource group

        Raises:
            LockTimeoutError: If the group stays busy past the timeout
        """
        group = self.group_for(operation)
        lock = self._lock(group)
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise LockTimeoutError(
                f"Could not acquire '{group}' lock for {operation} "
                f"within {self.timeout_seconds}s"
            ) from e

        logger.debug(f"Lock '{group}' acquired by {operation}")
        try:
            yield
        finally:
            lock.release()
            logger.debug(f"Lock '{group}' released by {operation}")
