"""Core orchestration logic for the tickbank engine.

This package contains zero external dependencies: the test case state
machine, banks, the channel registry, the cooperative scheduler and the
registration API. Log sinks, host tick drivers and suite loading live in
the adapters package.
"""

from .bank import TestBank
from .cases import AssertCase, TestBody, TestCase, WaitUntilCase
from .channels import ChannelRegistry
from .models import (
    ALL_CHANNELS,
    DEFAULT_CHANNEL,
    BankReport,
    CaseResult,
    CaseStatus,
    NextTick,
    RecordedError,
    RunReport,
    Severity,
    Suspension,
    WaitSeconds,
)
from .registry import TestConfig, TestRegistration, TestRegistry
from .scheduler import Scheduler

__all__ = [
    "ALL_CHANNELS",
    "DEFAULT_CHANNEL",
    "AssertCase",
    "BankReport",
    "CaseResult",
    "CaseStatus",
    "ChannelRegistry",
    "NextTick",
    "RecordedError",
    "RunReport",
    "Scheduler",
    "Severity",
    "Suspension",
    "TestBank",
    "TestBody",
    "TestCase",
    "TestConfig",
    "TestRegistration",
    "TestRegistry",
    "WaitSeconds",
    "WaitUntilCase",
]
