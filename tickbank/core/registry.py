"""Explicit test registration and bank building.

Test callables are registered with a TestRegistry, usually through its
decorators, together with their configuration. Building a bank creates a
fresh TestCase per registration, so banks built from the same registry
never share case state.

Example::

    tests = TestRegistry()

    class InventoryChecks:
        @tests.assert_case(timeout_ms=500, cancel_on_fail=True)
        def starts_empty(self, case):
            case.is_true(len(self.items) == 0)

    bank = tests.build_bank("inventory", receiver=InventoryChecks())
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .bank import TestBank
from .cases import AssertCase, TestCase, WaitUntilCase
from .models import ALL_CHANNELS, DEFAULT_CHANNEL
from .ports import LogSinkPort


@dataclass(frozen=True)
class TestConfig:
    """Configuration attached to a registered test callable."""

    __test__ = False  # not a pytest test class

    name: str | None = None
    channel: int = DEFAULT_CHANNEL
    timeout_ms: float = 0.0
    cancel_on_fail: bool = False
    kind: type[TestCase] = field(default=TestCase)

    def __post_init__(self) -> None:
        """Validate configuration invariants on creation."""
        if self.channel == ALL_CHANNELS:
            raise ValueError(
                f"channel {ALL_CHANNELS} is reserved for draining all channels"
            )
        if not (isinstance(self.kind, type) and issubclass(self.kind, TestCase)):
            raise ValueError(f"kind must be a TestCase subclass, got {self.kind!r}")

    def create_case(self, default_name: str) -> TestCase:
        return self.kind(
            name=self.name or default_name,
            channel=self.channel,
            timeout_ms=self.timeout_ms,
            cancel_on_fail=self.cancel_on_fail,
        )


@dataclass(frozen=True)
class TestRegistration:
    """A registered callable and its configuration."""

    __test__ = False  # not a pytest test class

    func: Callable[..., Any]
    config: TestConfig

    @property
    def name(self) -> str:
        return self.config.name or getattr(self.func, "__name__", "test")


class TestRegistry:
    """Ordered collection of test registrations."""

    __test__ = False  # not a pytest test class

    def __init__(self) -> None:
        self._registrations: list[TestRegistration] = []

    def __len__(self) -> int:
        return len(self._registrations)

    def register(self, func: Callable[..., Any], **config: Any) -> TestRegistration:
        """Register a callable with keyword configuration (see TestConfig)."""
        registration = TestRegistration(func=func, config=TestConfig(**config))
        self._registrations.append(registration)
        return registration

    def case(self, **config: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a plain test case."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(func, **config)
            return func

        return decorator

    def assert_case(self, **config: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a case with assertion helpers."""
        return self.case(kind=AssertCase, **config)

    def wait_until(self, **config: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a case that finishes when done() is called."""
        return self.case(kind=WaitUntilCase, **config)

    def entries(self, channel: int | None = None) -> list[TestRegistration]:
        """Registrations in registration order, optionally for one channel."""
        if channel is None or channel == ALL_CHANNELS:
            return list(self._registrations)
        return [r for r in self._registrations if r.config.channel == channel]

    def channels(self) -> list[int]:
        """Registered channels in first-registration order."""
        seen: dict[int, None] = {}
        for registration in self._registrations:
            seen.setdefault(registration.config.channel, None)
        return list(seen)

    def build_bank(
        self,
        context: str,
        receiver: Any = None,
        declaring_type: type | None = None,
        channel: int = DEFAULT_CHANNEL,
        sink: LogSinkPort | None = None,
    ) -> TestBank:
        """Build a bank holding a fresh case per registration on a channel.

        Raises:
            ValueError: If channel is ALL_CHANNELS (use build_banks).
        """
        if channel == ALL_CHANNELS:
            raise ValueError("build_bank needs a concrete channel; use build_banks")

        if declaring_type is None and receiver is not None:
            declaring_type = type(receiver)

        bank = TestBank(context, channel)
        for registration in self.entries(channel):
            case = registration.config.create_case(registration.name)
            bank.add_test(receiver, declaring_type, registration.func, case, sink)
        return bank

    def build_banks(
        self,
        context: str,
        receiver: Any = None,
        declaring_type: type | None = None,
        channel: int = ALL_CHANNELS,
        sink: LogSinkPort | None = None,
    ) -> list[TestBank]:
        """Build one bank per registered channel, or for a single channel."""
        channels = self.channels() if channel == ALL_CHANNELS else [channel]
        return [
            self.build_bank(context, receiver, declaring_type, c, sink)
            for c in channels
            if self.entries(c)
        ]
