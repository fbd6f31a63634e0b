"""Ordered groups of test cases sharing a channel."""

from collections.abc import Callable, Iterator
from typing import Any

from .cases import TestCase
from .models import ALL_CHANNELS, DEFAULT_CHANNEL, CaseStatus
from .ports import LogSinkPort


class TestBank:
    """An ordered sequence of test cases executed as a unit.

    Insertion order is execution order; cases are never reordered or
    removed. All cases share the bank's channel. The context label is
    descriptive only and never used for control flow.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, context: str, channel: int = DEFAULT_CHANNEL):
        if channel == ALL_CHANNELS:
            raise ValueError(
                f"channel {ALL_CHANNELS} is reserved for draining all channels"
            )
        self.context = context
        self._channel = channel
        self._cases: list[TestCase] = []

    @property
    def channel(self) -> int:
        return self._channel

    @property
    def count(self) -> int:
        return len(self._cases)

    def add_test(
        self,
        receiver: Any,
        declaring_type: type | None,
        func: Callable[..., Any],
        case: TestCase,
        sink: LogSinkPort | None = None,
    ) -> TestCase:
        """Bind a case to its callable and append it.

        Raises:
            ValueError: If the case belongs to another channel, or has been
                run before without an explicit reset.
        """
        if case.channel != self._channel:
            raise ValueError(
                f"Cannot add case on channel {case.channel} "
                f"to bank on channel {self._channel}"
            )
        if case.status != CaseStatus.NONE:
            raise ValueError(
                f"Cannot add case {case.name} in {case.status.value} status; "
                "reset it before reuse"
            )
        case.setup(receiver, declaring_type, func, sink)
        self._cases.append(case)
        return case

    def __len__(self) -> int:
        return len(self._cases)

    def __iter__(self) -> Iterator[TestCase]:
        return iter(self._cases)

    def __getitem__(self, index: int) -> TestCase:
        return self._cases[index]

    def __repr__(self) -> str:
        return (
            f"TestBank(context={self.context!r}, channel={self._channel}, "
            f"count={len(self._cases)})"
        )
