"""Asyncio tick driver adapter.

Drives the scheduler's suspension generator from an asyncio event loop so
test banks run alongside the host's other tasks. NextTick maps to a short
sleep (one "frame"), WaitSeconds to a sleep of that many seconds.
"""

import asyncio
import logging
from collections.abc import Generator
from typing import Any

from tickbank.core.models import NextTick, Suspension, WaitSeconds

logger = logging.getLogger(__name__)


class AsyncioTickDriver:
    """Asyncio-based host driver for scheduler runs."""

    def __init__(self, tick_interval_seconds: float = 0.0):
        """Initialize asyncio driver.

        Args:
            tick_interval_seconds: Sleep per NextTick. Zero yields to the
                event loop without delaying.
        """
        if tick_interval_seconds < 0:
            raise ValueError("tick_interval_seconds must be non-negative")
        self.tick_interval_seconds = tick_interval_seconds
        self.running = False
        self.ticks = 0
        self._task: asyncio.Task[Any] | None = None

    async def drive(self, steps: Generator[Suspension, None, Any]) -> Any:
        """Drive a generator to completion and return its result.

        Cancelling the awaiting task closes the generator, so the scheduler
        releases its running flag.

        Raises:
            ValueError: If the driver is already driving a generator.
        """
        if self.running:
            raise ValueError("driver is already running")

        self.running = True
        self.ticks = 0
        try:
            while True:
                try:
                    token = next(steps)
                except StopIteration as stop:
                    logger.debug(f"Driver finished after {self.ticks} ticks")
                    return stop.value

                self.ticks += 1
                await asyncio.sleep(self._delay_for(token))
        finally:
            steps.close()
            self.running = False

    def start(self, steps: Generator[Suspension, None, Any]) -> "asyncio.Task[Any]":
        """Drive a generator in a background task on the running loop."""
        if self._task is not None and not self._task.done():
            raise ValueError("driver already has an active task")
        self._task = asyncio.create_task(self.drive(steps))
        return self._task

    async def stop(self) -> None:
        """Cancel the background task, if any, and wait for it to finish."""
        task, self._task = self._task, None
        if task is None or task.done():
            return

        logger.info("Stopping tick driver...")
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _delay_for(self, token: Suspension) -> float:
        if isinstance(token, WaitSeconds):
            return token.seconds
        if isinstance(token, NextTick):
            return self.tick_interval_seconds
        logger.warning(f"Unknown suspension token {token!r}, treating as next tick")
        return self.tick_interval_seconds
