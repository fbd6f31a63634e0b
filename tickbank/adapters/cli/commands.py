"""CLI command implementations for tickbank.

Provides human-initiated actions through a command-line interface.

This adapter maps CLI commands (load, run, pending, clear) to Scheduler and
BankSourcePort operations. It handles CLI-specific formatting and error
reporting; every command returns a JSON-serializable dictionary.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from tickbank.adapters.host.asyncio_driver import AsyncioTickDriver
from tickbank.adapters.suite.modules import ModuleSuiteSource
from tickbank.core.models import ALL_CHANNELS, RunReport
from tickbank.core.ports import BankSourcePort
from tickbank.core.scheduler import Scheduler

logger = logging.getLogger(__name__)

SourceFactory = Callable[[Sequence[str]], BankSourcePort]


class CLICommandHandler:
    """Handles CLI commands by delegating to a Scheduler.

    Banks are loaded through a BankSourcePort built per command from the
    requested module names, and runs are driven by an AsyncioTickDriver.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        driver: AsyncioTickDriver,
        source_factory: SourceFactory | None = None,
    ):
        """Initialize the CLI command handler.

        Args:
            scheduler: Scheduler receiving and running the banks.
            driver: Driver consuming the scheduler's suspension tokens.
            source_factory: Builds a bank source from module names
                (defaults to ModuleSuiteSource with the scheduler's sink).
        """
        self.scheduler = scheduler
        self.driver = driver
        self.source_factory = source_factory or (
            lambda modules: ModuleSuiteSource(modules, sink=scheduler.sink)
        )

    async def load_suites(
        self, modules: Sequence[str], channel: int = ALL_CHANNELS
    ) -> dict[str, Any]:
        """Load suite modules and enqueue their banks.

        Args:
            modules: Dotted module paths to import.
            channel: Only enqueue banks for this channel (ALL_CHANNELS for all).

        Returns:
            Dictionary with status, number of banks enqueued and pending count.
        """
        try:
            banks = self.source_factory(modules).load_banks(channel)
        except (ImportError, ValueError) as e:
            logger.error(f"Failed to load suites: {e}")
            return {
                "status": "error",
                "operation": "load",
                "modules": list(modules),
                "message": str(e),
            }

        for bank in banks:
            self.scheduler.enqueue(bank)

        return {
            "status": "success",
            "operation": "load",
            "modules": list(modules),
            "banks_enqueued": len(banks),
            "pending": self.scheduler.channels.pending(),
        }

    async def run_tests(
        self,
        channel: int = ALL_CHANNELS,
        delay_seconds: float = 0.0,
        output_format: str = "json",
    ) -> dict[str, Any]:
        """Run queued banks on a channel and report the outcome.

        Args:
            channel: Channel to drain (ALL_CHANNELS for every channel).
            delay_seconds: Delay inserted between completed cases.
            output_format: "json" for structured data, "text" for a summary.

        Returns:
            Dictionary with status and the run report.
        """
        if self.scheduler.is_running or self.driver.running:
            return {
                "status": "error",
                "operation": "run",
                "message": "A run is already in progress",
            }

        if output_format not in {"json", "text"}:
            return {
                "status": "error",
                "operation": "run",
                "message": f"Unsupported format: {output_format}",
            }

        report: RunReport = await self.driver.drive(
            self.scheduler.run(delay_seconds, channel)
        )
        data: Any = (
            self._format_report_as_text(report)
            if output_format == "text"
            else report_to_dict(report)
        )
        return {
            "status": "success" if report.passed else "failed",
            "operation": "run",
            "channel": channel,
            "data": data,
        }

    async def pending(self, channel: int = ALL_CHANNELS) -> dict[str, Any]:
        """Report how many banks are queued."""
        return {
            "status": "success",
            "operation": "pending",
            "channel": channel,
            "pending": self.scheduler.channels.pending(channel),
            "channels": list(self.scheduler.channels.channels),
        }

    async def clear(self, channel: int = ALL_CHANNELS) -> dict[str, Any]:
        """Discard queued banks on a channel, or all of them."""
        discarded = self.scheduler.channels.pending(channel)
        self.scheduler.clear(channel)
        return {
            "status": "success",
            "operation": "clear",
            "channel": channel,
            "discarded": discarded,
        }

    def _format_report_as_text(self, report: RunReport) -> str:
        """Format a run report as human-readable text.

        Args:
            report: Run report to format.

        Returns:
            Formatted text string.
        """
        lines = []

        for bank in report.banks:
            state = "CANCELED" if bank.canceled else "DONE"
            lines.append(
                f"[{state}] {bank.context} (channel {bank.channel}): "
                f"{bank.completed}/{bank.total} completed"
            )
            for result in bank.results:
                lines.append(
                    f"  - {result.name}: {result.status.value} "
                    f"({result.elapsed_ms:.0f}ms, {result.error_count} errors)"
                )

        lines.append("")
        lines.append(
            f"Total: {report.completed}/{report.total_cases} completed, "
            f"{len(report.failures)} failures"
        )
        return "\n".join(lines)


def report_to_dict(report: RunReport) -> dict[str, Any]:
    """Convert a run report to a JSON-serializable dictionary."""
    return {
        "passed": report.passed,
        "total_cases": report.total_cases,
        "attempted": report.attempted,
        "completed": report.completed,
        "banks": [
            {
                "context": bank.context,
                "channel": bank.channel,
                "total": bank.total,
                "attempted": bank.attempted,
                "completed": bank.completed,
                "canceled": bank.canceled,
                "results": [
                    {
                        "name": r.name,
                        "status": r.status.value,
                        "elapsed_ms": r.elapsed_ms,
                        "error_count": r.error_count,
                    }
                    for r in bank.results
                ],
            }
            for bank in report.banks
        ],
    }


async def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler instance.
        command: Command name ('load', 'run', 'pending', 'clear').
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required argument is missing.
    """
    channel = int(args.get("channel", ALL_CHANNELS))

    if command == "load":
        if "modules" not in args:
            raise ValueError("Missing required parameter: modules")
        modules = args["modules"]
        if isinstance(modules, str):
            modules = [modules]
        return await handler.load_suites(modules, channel)

    elif command == "run":
        return await handler.run_tests(
            channel=channel,
            delay_seconds=float(args.get("delay", 0.0)),
            output_format=args.get("format", "json"),
        )

    elif command == "pending":
        return await handler.pending(channel)

    elif command == "clear":
        return await handler.clear(channel)

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
