"""Domain models for the tickbank test orchestration engine.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

# Channel selector reserved for "every channel" at the registry level.
ALL_CHANNELS = -1
DEFAULT_CHANNEL = 1


class CaseStatus(Enum):
    """Lifecycle states for a single test case.

    State transitions follow a directed workflow:
    - NONE: Initial state, or the state after an explicit reset
    - RUNNING: The case has been started and has not settled yet
    - COMPLETE: The body finished without a reported failure
    - FAILED: An assertion or explicit check reported a failure
    - FATAL: An exception escaped the body, or a failure was escalated
    - TIMEOUT: The duration ceiling was reached while polling
    - CANCELED: The case was explicitly canceled while running

    Every state after RUNNING is terminal for the current execution.
    """

    NONE = "none"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"
    FATAL = "fatal"
    TIMEOUT = "timeout"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        """Whether this status settles an execution."""
        return self not in {CaseStatus.NONE, CaseStatus.RUNNING}


class Severity(Enum):
    """Severity levels understood by the logging collaborator."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def logging_level(self) -> int:
        """Equivalent stdlib logging level."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class RecordedError:
    """A failure captured while a case was running."""

    message: str
    status: CaseStatus  # status the case settled in when this was recorded
    exception: BaseException | None = None


@dataclass(frozen=True)
class NextTick:
    """Suspension token: resume on the host's next tick."""


@dataclass(frozen=True)
class WaitSeconds:
    """Suspension token: resume after a number of seconds."""

    seconds: float

    def __post_init__(self) -> None:
        """Validate the delay on creation."""
        if self.seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {self.seconds}")


Suspension: TypeAlias = NextTick | WaitSeconds


@dataclass(frozen=True)
class CaseResult:
    """Outcome of a single attempted case."""

    name: str
    status: CaseStatus
    elapsed_ms: float
    error_count: int


@dataclass(frozen=True)
class BankReport:
    """Summary of a bank execution."""

    context: str
    channel: int
    total: int  # cases in the bank
    attempted: int  # cases that were started
    completed: int  # attempted cases that did not trigger cancellation
    canceled: bool
    results: tuple[CaseResult, ...]  # immutable for frozen dataclass

    @property
    def passed(self) -> bool:
        """True when every case ran and completed."""
        return (
            not self.canceled
            and self.attempted == self.total
            and all(r.status == CaseStatus.COMPLETE for r in self.results)
        )


@dataclass(frozen=True)
class RunReport:
    """Summary of a scheduler run across all drained banks."""

    banks: tuple[BankReport, ...] = ()

    @property
    def total_cases(self) -> int:
        return sum(b.total for b in self.banks)

    @property
    def attempted(self) -> int:
        return sum(b.attempted for b in self.banks)

    @property
    def completed(self) -> int:
        return sum(b.completed for b in self.banks)

    @property
    def failures(self) -> tuple[CaseResult, ...]:
        """Attempted cases that did not finish as COMPLETE."""
        return tuple(
            r
            for b in self.banks
            for r in b.results
            if r.status != CaseStatus.COMPLETE
        )

    @property
    def passed(self) -> bool:
        return all(b.passed for b in self.banks)
