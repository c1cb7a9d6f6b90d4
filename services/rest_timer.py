"""Countdown between sets."""

import asyncio
from typing import Callable, Optional
from config.settings import settings
from utils.logger import setup_logger

logger = setup_logger(__name__)


class RestTimer:
    """Counts rest seconds down and fires on_complete exactly once.

    The countdown ends when it reaches zero or when skip() is called.
    """

    def __init__(
        self,
        rest_seconds: int,
        on_complete: Optional[Callable[[], None]] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        tick: Optional[float] = None
    ):
        if rest_seconds < 0:
            raise ValueError("rest_seconds cannot be negative")
        self.rest_seconds = rest_seconds
        self.remaining = rest_seconds
        self.on_complete = on_complete
        self.on_tick = on_tick
        self.tick = tick if tick is not None else settings.rest_timer_tick
        self._done = asyncio.Event()
        self._completed = False

    @property
    def completed(self) -> bool:
        return self._completed

    def _complete(self) -> None:
        if self._completed:
            return
        self._completed = True
        self._done.set()
        if self.on_complete:
            self.on_complete()

    def skip(self) -> None:
        """End the rest early."""
        logger.debug(f"Rest skipped with {self.remaining}s left")
        self.remaining = 0
        self._complete()

    async def run(self) -> None:
        while self.remaining > 0 and not self._completed:
            try:
                await asyncio.wait_for(self._done.wait(), timeout=self.tick)
            except asyncio.TimeoutError:
                pass
            if self._completed:
                return
            self.remaining -= 1
            if self.on_tick:
                self.on_tick(self.remaining)
        self._complete()
