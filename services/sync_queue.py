"""Pending remote operations mirrored after optimistic local changes."""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set
from utils.errors import ServiceError
from utils.logger import setup_logger

logger = setup_logger(__name__)

SyncOperation = Callable[[], Awaitable[Any]]
ErrorCallback = Callable[[str, ServiceError], None]


class SyncQueue:
    """Queue of remote operations keyed by operation key.

    Enqueuing under an existing key replaces the older operation. A failed
    operation stays pending until the next run; there is no automatic retry.
    """

    def __init__(self, on_error: Optional[ErrorCallback] = None):
        self._pending: Dict[str, SyncOperation] = {}
        self._in_flight: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()
        self.on_error = on_error
        self.last_error: Optional[ServiceError] = None

    @property
    def pending_keys(self) -> List[str]:
        return list(self._pending)

    @property
    def is_syncing(self) -> bool:
        return bool(self._in_flight)

    def enqueue(self, key: str, operation: SyncOperation) -> None:
        self._pending[key] = operation
        logger.debug(f"Queued sync operation {key} ({len(self._pending)} pending)")

    def discard(self, key: str) -> None:
        self._pending.pop(key, None)

    async def run_pending(self) -> int:
        """Run every pending operation once.

        Returns:
            Number of operations that failed and remain pending
        """
        failures = 0
        for key, operation in list(self._pending.items()):
            if key in self._in_flight:
                continue
            self._in_flight.add(key)
            try:
                await operation()
            except ServiceError as e:
                failures += 1
                self.last_error = e
                logger.warning(f"Sync operation {key} failed: {e.message}")
                if self.on_error:
                    self.on_error(key, e)
                continue
            finally:
                self._in_flight.discard(key)

            # A newer operation may have replaced this one while it ran
            if self._pending.get(key) is operation:
                del self._pending[key]
        return failures

    def schedule(self) -> Optional[asyncio.Task]:
        """Run pending operations in the background on the current loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; sync deferred")
            return None
        task = loop.create_task(self.run_pending())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for all scheduled background runs."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
