"""Stdlib logging sink adapter.

Implements LogSinkPort on top of the logging module so engine output
flows through whatever handlers the host application configured.
"""

import logging

from tickbank.core.models import Severity
from tickbank.core.ports import LogSinkPort


class LoggingSinkAdapter(LogSinkPort):
    """Forwards engine output to a stdlib logger."""

    def __init__(self, logger_name: str = "tickbank.console"):
        """Initialize logging sink.

        Args:
            logger_name: Name of the logger receiving the messages.
        """
        self.logger = logging.getLogger(logger_name)

    def console(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        exception: BaseException | None = None,
    ) -> None:
        exc_info = (
            (type(exception), exception, exception.__traceback__)
            if exception is not None
            else None
        )
        self.logger.log(severity.logging_level, message, exc_info=exc_info)
