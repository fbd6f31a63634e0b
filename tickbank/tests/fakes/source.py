"""Fake BankSourcePort implementation for testing."""

from tickbank.core.bank import TestBank
from tickbank.core.models import ALL_CHANNELS
from tickbank.core.ports import BankSourcePort


class FakeBankSource(BankSourcePort):
    """In-memory bank source returning preconfigured banks."""

    def __init__(self, banks: list[TestBank] | None = None):
        self.banks: list[TestBank] = list(banks or [])
        self.load_call_count = 0
        self.should_fail: bool = False
        self.fail_message: str = "Suite failed to load"

    def load_banks(self, channel: int = ALL_CHANNELS) -> list[TestBank]:
        self.load_call_count += 1

        if self.should_fail:
            raise ValueError(self.fail_message)

        if channel == ALL_CHANNELS:
            return list(self.banks)
        return [b for b in self.banks if b.channel == channel]

    def set_should_fail(self, should_fail: bool, message: str = "Suite failed to load") -> None:
        """Configure the source to fail on the next load."""
        self.should_fail = should_fail
        self.fail_message = message
