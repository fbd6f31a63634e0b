"""Command-line interface adapter.

Provides commands for loading suites, running channels and inspecting
the scheduler's queues.
"""

from .commands import CLICommandHandler, report_to_dict, run_command

__all__ = ["CLICommandHandler", "report_to_dict", "run_command"]
