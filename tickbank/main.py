"""Composition root for the tickbank engine.

This module is the ONLY location that imports both core orchestration
logic and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Scheduler initialization
- Entry point selection (once, interactive)
"""

import asyncio
import json
import logging
import sys

from tickbank.adapters.cli.commands import CLICommandHandler, run_command
from tickbank.adapters.host.asyncio_driver import AsyncioTickDriver
from tickbank.adapters.sink.logging_sink import LoggingSinkAdapter
from tickbank.adapters.sink.stdout import StdoutSinkAdapter
from tickbank.config import Settings, load_settings
from tickbank.core.ports import LogSinkPort
from tickbank.core.scheduler import Scheduler


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for loading and running suites.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "tickbank> ")
            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            try:
                result = await run_command(cli_handler, command, args)
                print(json.dumps(result, indent=2, default=str))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  load
    Import suite modules and enqueue their banks.
    Required: modules
    Optional: channel

    Example: load {"modules": ["myapp.smoke_tests"], "channel": 1}

  run
    Run queued banks. Channel -1 runs every channel.
    Optional: channel, delay, format (json, text)

    Example: run {"channel": 1, "delay": 0.5, "format": "text"}

  pending
    Show how many banks are queued.
    Optional: channel

  clear
    Discard queued banks.
    Optional: channel

  help
    Show this help message.

  exit
    Exit the CLI.

Note: All commands accept arguments as a single JSON object.
Provide the JSON after the command name on the same line.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_sink(settings: Settings) -> LogSinkPort:
    """Select the log sink adapter from configuration."""
    if settings.sink_backend == "stdout":
        return StdoutSinkAdapter(verbose=settings.debug)
    return LoggingSinkAdapter()


async def bootstrap(settings: Settings | None = None) -> int:
    """Load configuration, wire adapters, and start the application.

    This is the composition root: the single place where all components
    are instantiated and wired together.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters with configuration
    4. Initialize the scheduler
    5. Select and start run mode

    Returns:
        Process exit code: 0 when every attempted case completed, 1 otherwise.
    """
    # Step 1: Load configuration
    if settings is None:
        settings = load_settings()

    # Step 2: Configure logging
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading tickbank...")

    # Step 3: Instantiate adapters
    sink = build_sink(settings)
    logger.info(f"Log sink: {settings.sink_backend}")
    driver = AsyncioTickDriver(tick_interval_seconds=settings.tick_interval_seconds)

    # Step 4: Initialize the scheduler
    scheduler = Scheduler(sink=sink)
    cli_handler = CLICommandHandler(scheduler, driver)

    # Step 5: Select run mode and start
    logger.info(f"Starting in {settings.run_mode} mode...")

    if settings.run_mode == "interactive":
        modules = settings.suite_module_list
        if modules:
            result = await cli_handler.load_suites(modules, settings.run_channel)
            if result["status"] != "success":
                return 1
        await _run_cli_interactive(cli_handler)
        return 0

    modules = settings.suite_module_list
    if not modules:
        logger.error("No suite modules configured (set SUITE_MODULES)")
        return 1

    loaded = await cli_handler.load_suites(modules, settings.run_channel)
    if loaded["status"] != "success":
        return 1

    result = await cli_handler.run_tests(
        channel=settings.run_channel,
        delay_seconds=settings.case_delay_seconds,
        output_format="text",
    )
    print(result["data"])
    return 0 if result["status"] == "success" else 1


def main() -> None:
    """Application entry point.

    Exit codes:
        0: All attempted cases completed
        1: Failures, or a fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        exit_code = asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
