"""Tests for TestBank and ChannelRegistry."""

import pytest

from tickbank.core.bank import TestBank
from tickbank.core.cases import TestCase
from tickbank.core.channels import ChannelRegistry
from tickbank.core.models import CaseStatus


def noop(case):
    pass


def make_bank(context: str, channel: int = 1, size: int = 1) -> TestBank:
    bank = TestBank(context, channel)
    for i in range(size):
        bank.add_test(None, None, noop, TestCase(name=f"{context}-{i}", channel=channel))
    return bank


# ============================================================================
# TestBank
# ============================================================================


def test_add_test_binds_and_preserves_order() -> None:
    bank = TestBank("physics")
    first = bank.add_test(None, None, noop, TestCase(name="first"))
    second = bank.add_test(None, None, noop, TestCase(name="second"))

    assert list(bank) == [first, second]
    assert bank.count == 2
    assert len(bank) == 2
    assert bank[0] is first
    assert first.func is noop
    assert bank.channel == 1
    assert bank.context == "physics"


def test_add_test_rejects_other_channel() -> None:
    bank = TestBank("physics", channel=2)
    with pytest.raises(ValueError, match="channel 1"):
        bank.add_test(None, None, noop, TestCase())


def test_add_test_requires_reset_before_reuse() -> None:
    case = TestCase()
    case.setup(None, None, noop)
    case.run()
    assert case.status == CaseStatus.COMPLETE

    bank = TestBank("reuse")
    with pytest.raises(ValueError, match="reset it before reuse"):
        bank.add_test(None, None, noop, case)

    case.reset()
    bank.add_test(None, None, noop, case)
    assert bank.count == 1


def test_bank_rejects_wildcard_channel() -> None:
    with pytest.raises(ValueError):
        TestBank("all", channel=-1)


# ============================================================================
# ChannelRegistry
# ============================================================================


def test_drain_is_fifo_per_channel() -> None:
    registry = ChannelRegistry()
    b1 = make_bank("b1")
    b2 = make_bank("b2")
    registry.enqueue(b1)
    registry.enqueue(b2)

    assert registry.drain(2) == []
    assert registry.drain(1) == [b1, b2]
    assert registry.drain(1) == []


def test_drain_all_channels_in_registry_order() -> None:
    registry = ChannelRegistry()
    a1 = make_bank("a1", channel=3)
    b1 = make_bank("b1", channel=1)
    a2 = make_bank("a2", channel=3)
    registry.enqueue(a1)
    registry.enqueue(b1)
    registry.enqueue(a2)

    assert registry.drain(-1) == [a1, a2, b1]
    assert registry.pending() == 0


def test_drain_all_is_deterministic() -> None:
    def snapshot() -> list[str]:
        registry = ChannelRegistry()
        for context, channel in [("x", 2), ("y", 1), ("z", 2), ("w", 5)]:
            registry.enqueue(make_bank(context, channel))
        return [b.context for b in registry.drain(-1)]

    assert snapshot() == snapshot() == ["x", "z", "y", "w"]


def test_clear_single_channel_and_all() -> None:
    registry = ChannelRegistry()
    registry.enqueue(make_bank("a", channel=1))
    registry.enqueue(make_bank("b", channel=2))
    registry.enqueue(make_bank("c", channel=2))

    registry.clear(2)
    assert registry.pending(2) == 0
    assert registry.pending(1) == 1
    assert registry.channels == (1,)

    registry.clear()
    assert registry.pending() == 0
    assert registry.channels == ()


def test_clear_unknown_channel_is_noop() -> None:
    registry = ChannelRegistry()
    registry.clear(42)
    assert registry.drain(42) == []
