"""Stdout log sink adapter.

Implements LogSinkPort by printing engine output to the terminal with
human-readable formatting, the way a host's console would show it.
"""

import sys
import traceback
from typing import TextIO

from tickbank.core.models import Severity
from tickbank.core.ports import LogSinkPort


class StdoutSinkAdapter(LogSinkPort):
    """Prints engine output with a severity tag."""

    def __init__(self, verbose: bool = False, stream: TextIO | None = None):
        """Initialize stdout sink.

        Args:
            verbose: If True, print full tracebacks for attached exceptions.
            stream: Output stream (defaults to sys.stdout at write time).
        """
        self.verbose = verbose
        self.stream = stream

    def console(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        exception: BaseException | None = None,
    ) -> None:
        print(self._format_line(message, severity, exception), file=self.stream or sys.stdout)

        if exception is not None and self.verbose:
            print(self._format_traceback(exception), file=self.stream or sys.stdout)

    @staticmethod
    def _format_line(
        message: str, severity: Severity, exception: BaseException | None
    ) -> str:
        """Format a single console line."""
        line = f"[{severity.value:<7}] {message}"
        if exception is not None:
            line += f" ({type(exception).__name__}: {exception})"
        return line

    @staticmethod
    def _format_traceback(exception: BaseException) -> str:
        """Format an exception traceback block."""
        return "".join(
            traceback.format_exception(type(exception), exception, exception.__traceback__)
        ).rstrip()
