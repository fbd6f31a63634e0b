"""Manual tick driver adapter.

For hosts that own their frame loop: the host calls tick() once per frame
and the driver advances the scheduler by at most one step, honoring any
pending WaitSeconds suspension.
"""

import logging
import time
from collections.abc import Callable, Generator
from typing import Any

from tickbank.core.models import Suspension, WaitSeconds

logger = logging.getLogger(__name__)


class ManualTickDriver:
    """Advances a suspension generator one step per host tick."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize manual driver.

        Args:
            clock: Monotonic clock in seconds used for WaitSeconds.
        """
        self.clock = clock
        self.ticks = 0
        self._steps: Generator[Suspension, None, Any] | None = None
        self._resume_at: float | None = None
        self._result: Any = None

    @property
    def active(self) -> bool:
        return self._steps is not None

    @property
    def done(self) -> bool:
        return self._steps is None

    @property
    def waiting(self) -> bool:
        """True while a WaitSeconds suspension has not elapsed."""
        return self._resume_at is not None and self.clock() < self._resume_at

    @property
    def result(self) -> Any:
        """Return value of the last generator driven to completion."""
        return self._result

    def start(self, steps: Generator[Suspension, None, Any]) -> None:
        """Begin driving a generator.

        Raises:
            ValueError: If the driver is still driving another generator.
        """
        if self._steps is not None:
            raise ValueError("driver is already active; stop it first")
        self._steps = steps
        self._resume_at = None
        self._result = None
        self.ticks = 0

    def tick(self) -> bool:
        """Advance by one step. Returns False once the generator is done."""
        if self._steps is None:
            return False

        if self.waiting:
            return True
        self._resume_at = None

        try:
            token = next(self._steps)
        except StopIteration as stop:
            self._steps = None
            self._result = stop.value
            logger.debug(f"Driver finished after {self.ticks} ticks")
            return False

        self.ticks += 1
        if isinstance(token, WaitSeconds) and token.seconds > 0:
            self._resume_at = self.clock() + token.seconds
        return True

    def run_until_complete(self, max_ticks: int = 100_000) -> Any:
        """Tick until the generator finishes and return its result.

        Raises:
            RuntimeError: If the generator is still active after max_ticks.
        """
        for _ in range(max_ticks):
            if not self.tick():
                return self._result
        raise RuntimeError(f"driver still active after {max_ticks} ticks")

    def stop(self) -> None:
        """Abandon the current generator, running its cleanup."""
        if self._steps is None:
            return
        steps, self._steps = self._steps, None
        self._resume_at = None
        steps.close()
