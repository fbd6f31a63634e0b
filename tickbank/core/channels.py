"""Channel registry: per-channel FIFO queues of banks awaiting execution."""

from collections import deque

from .bank import TestBank
from .models import ALL_CHANNELS


class ChannelRegistry:
    """Maps channel ids to FIFO queues of banks.

    Queues are created lazily on first enqueue. Iteration over channels
    follows first-enqueue order, so draining the wildcard channel is
    deterministic for a given sequence of enqueues.
    """

    def __init__(self) -> None:
        self._queues: dict[int, deque[TestBank]] = {}

    @property
    def channels(self) -> tuple[int, ...]:
        """Channel ids that currently have queued banks."""
        return tuple(c for c, q in self._queues.items() if q)

    def enqueue(self, bank: TestBank) -> None:
        self._queues.setdefault(bank.channel, deque()).append(bank)

    def drain(self, channel: int = ALL_CHANNELS) -> list[TestBank]:
        """Pop every bank queued for a channel, in enqueue order.

        With ALL_CHANNELS, each channel's queue is emptied in turn in
        registry order. Unknown channels drain to an empty list.
        """
        if channel == ALL_CHANNELS:
            banks: list[TestBank] = []
            for queue in self._queues.values():
                banks.extend(queue)
                queue.clear()
            return banks

        queue = self._queues.get(channel)
        if queue is None:
            return []
        banks = list(queue)
        queue.clear()
        return banks

    def clear(self, channel: int = ALL_CHANNELS) -> None:
        """Discard a channel's queue, or every queue."""
        if channel == ALL_CHANNELS:
            self._queues.clear()
        else:
            self._queues.pop(channel, None)

    def pending(self, channel: int = ALL_CHANNELS) -> int:
        """Number of banks waiting on a channel, or across all channels."""
        if channel == ALL_CHANNELS:
            return sum(len(q) for q in self._queues.values())
        return len(self._queues.get(channel, ()))
