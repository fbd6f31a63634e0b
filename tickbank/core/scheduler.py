"""Cooperative scheduler that drains queued banks one step per host tick.

The scheduler never blocks. Scheduler.run() is a generator: every value it
yields is a suspension token (NextTick or WaitSeconds) that the host's tick
driver consumes before resuming it. The generator's return value is a
RunReport.

Timeouts are advisory. A case is only marked TIMEOUT when the loop gets to
poll it, which requires the test body to hand control back. A plain body
that blocks or loops forever is never interrupted.
"""

import logging
import time
from collections.abc import Callable, Generator

from .bank import TestBank
from .channels import ChannelRegistry
from .models import (
    ALL_CHANNELS,
    BankReport,
    CaseResult,
    NextTick,
    RunReport,
    Severity,
    Suspension,
    WaitSeconds,
)
from .ports import LogSinkPort

logger = logging.getLogger(__name__)

Steps = Generator[Suspension, None, RunReport]
BankSteps = Generator[Suspension, None, BankReport]


class Scheduler:
    """Runs queued banks cooperatively.

    Each instance owns its channel registry and its running flag, so
    independent schedulers can coexist (e.g. one per test).
    """

    def __init__(
        self,
        channels: ChannelRegistry | None = None,
        sink: LogSinkPort | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize scheduler.

        Args:
            channels: Channel registry to drain (a fresh one if omitted).
            sink: Logging collaborator for engine notices. Cases without a
                sink of their own are attached to it before they run.
            clock: Monotonic clock in seconds used to time cases.
        """
        self.channels = channels if channels is not None else ChannelRegistry()
        self.sink = sink
        self.clock = clock
        self.running = False
        self.last_report: RunReport | None = None

    @property
    def is_running(self) -> bool:
        return self.running

    def enqueue(self, bank: TestBank) -> None:
        self.channels.enqueue(bank)

    def clear(self, channel: int = ALL_CHANNELS) -> None:
        self.channels.clear(channel)

    def run(self, delay_seconds: float = 0.0, channel: int = ALL_CHANNELS) -> Steps:
        """Drain a channel (or all channels) and run every bank in order.

        If another run of this scheduler is active the generator finishes
        immediately with an empty report and does no work.
        """
        if self.running:
            logger.debug(f"Scheduler already running, ignoring run on channel {channel}")
            return RunReport()

        self.running = True
        reports: list[BankReport] = []
        try:
            banks = self.channels.drain(channel)
            logger.debug(f"Drained {len(banks)} banks from channel {channel}")

            for bank in banks:
                report = yield from self.run_bank(delay_seconds, bank)
                reports.append(report)
                yield NextTick()
        finally:
            self.running = False

        run_report = RunReport(banks=tuple(reports))
        self.last_report = run_report
        return run_report

    def run_bank(self, delay_seconds: float, bank: TestBank) -> BankSteps:
        """Run a bank's cases in order, stopping early on cancellation.

        Closing the generator while a case is running cancels that case.
        """
        self._console(f"initialized testbed - context: {bank.context}")

        attempted = 0
        completed = 0
        canceled = False
        results: list[CaseResult] = []

        for case in bank:
            if case.sink is None and self.sink is not None:
                case.sink = self.sink

            start = self.clock()
            attempted += 1
            case.run()

            try:
                while case.is_running:
                    case.poll((self.clock() - start) * 1000.0)
                    yield NextTick()
            finally:
                # a closed run must not leave the case RUNNING
                if case.is_running:
                    case.cancel("run aborted")

            results.append(
                CaseResult(
                    name=case.name or "",
                    status=case.status,
                    elapsed_ms=case.elapsed_ms,
                    error_count=len(case.errors),
                )
            )

            if case.should_cancel():
                canceled = True
                self._console(
                    f"cancelled due to {case.status.value} status - context: {bank.context}",
                    Severity.ERROR,
                )
                break

            completed += 1

            if delay_seconds > 0:
                yield WaitSeconds(delay_seconds)
            else:
                yield NextTick()

        noun = "test" if bank.count == 1 else "tests"
        self._console(
            f"completed {completed:,} out of {bank.count:,} {noun} - context: {bank.context}"
        )

        return BankReport(
            context=bank.context,
            channel=bank.channel,
            total=bank.count,
            attempted=attempted,
            completed=completed,
            canceled=canceled,
            results=tuple(results),
        )

    def _console(self, message: str, severity: Severity = Severity.INFO) -> None:
        if self.sink is not None:
            self.sink.console(message, severity)
        else:
            logger.log(severity.logging_level, message)
