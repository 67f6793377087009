"""Deferred calls for the automated opponent's turn."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], object]


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callback) -> None:
        """Run ``callback`` once, ``delay`` seconds from now."""


class LoopScheduler:
    """Fire-and-forget scheduling on the running asyncio loop."""

    def call_later(self, delay: float, callback: Callback) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(delay, callback)


@dataclass
class ManualScheduler:
    """Queues callbacks until the owner runs them explicitly.

    Used by tests and by synchronous shells that want to pace the
    automated opponent themselves.
    """

    pending: list[tuple[float, Callback]] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callback) -> None:
        self.pending.append((delay, callback))

    def run_next(self) -> bool:
        """Run the oldest queued callback. Return False if nothing was queued."""
        if not self.pending:
            return False
        _, callback = self.pending.pop(0)
        callback()
        return True

    def run_all(self, limit: int = 1000) -> int:
        """Drain the queue, including callbacks queued while draining."""
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        if self.pending:
            logger.warning("ManualScheduler stopped with %d calls queued", len(self.pending))
        return ran
