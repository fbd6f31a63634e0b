"""Fake implementations of core ports for testing.

These in-memory implementations allow core logic to be tested
without external dependencies:

- FakeLogSink: Captured engine output for assertion
- FakeBankSource: Preconfigured banks for the discovery collaborator
- FakeClock: Explicitly advanced monotonic clock
"""

from .clock import FakeClock
from .sink import FakeLogSink
from .source import FakeBankSource

__all__ = [
    "FakeBankSource",
    "FakeClock",
    "FakeLogSink",
]
