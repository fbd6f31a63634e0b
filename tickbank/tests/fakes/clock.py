"""Controllable monotonic clock for testing."""


class FakeClock:
    """Monotonic clock advanced explicitly by tests.

    Optionally advances itself by a fixed step every time it is read,
    which models a host where each tick takes a known amount of time.
    """

    def __init__(self, start: float = 0.0, step: float = 0.0):
        self.now = start
        self.step = step
        self.reads = 0

    def __call__(self) -> float:
        self.reads += 1
        current = self.now
        self.now += self.step
        return current

    def advance(self, seconds: float) -> None:
        self.now += seconds
