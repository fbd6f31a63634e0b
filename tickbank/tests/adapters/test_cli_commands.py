"""Unit tests for CLI commands.

Tests verify that the load, run, pending and clear commands correctly
delegate to the scheduler and return JSON-serializable results.
"""

import json

import pytest

from tickbank.adapters.cli.commands import CLICommandHandler, run_command
from tickbank.adapters.host.asyncio_driver import AsyncioTickDriver
from tickbank.core.bank import TestBank
from tickbank.core.cases import TestCase
from tickbank.core.scheduler import Scheduler
from tickbank.tests.fakes import FakeBankSource, FakeLogSink

SAMPLE = "tickbank.tests.fixtures.sample_suite"
FAILING = "tickbank.tests.fixtures.failing_suite"


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler(sink=FakeLogSink())


@pytest.fixture
def handler(scheduler: Scheduler) -> CLICommandHandler:
    return CLICommandHandler(scheduler, AsyncioTickDriver())


# ============================================================================
# load
# ============================================================================


@pytest.mark.asyncio
async def test_load_enqueues_banks(handler: CLICommandHandler, scheduler: Scheduler) -> None:
    result = await handler.load_suites([SAMPLE])

    assert result["status"] == "success"
    assert result["banks_enqueued"] == 2
    assert result["pending"] == 2
    assert scheduler.channels.pending(1) == 1


@pytest.mark.asyncio
async def test_load_missing_module_reports_error(handler: CLICommandHandler) -> None:
    result = await handler.load_suites(["tickbank.tests.fixtures.nope"])
    assert result["status"] == "error"
    assert result["operation"] == "load"


@pytest.mark.asyncio
async def test_load_uses_source_factory(scheduler: Scheduler) -> None:
    bank = TestBank("fake")
    bank.add_test(None, None, lambda c: None, TestCase())
    source = FakeBankSource([bank])
    handler = CLICommandHandler(scheduler, AsyncioTickDriver(), lambda modules: source)

    result = await handler.load_suites(["anything"])

    assert result["banks_enqueued"] == 1
    assert source.load_call_count == 1


@pytest.mark.asyncio
async def test_load_source_failure_reports_error(scheduler: Scheduler) -> None:
    source = FakeBankSource()
    source.set_should_fail(True, "bad suite")
    handler = CLICommandHandler(scheduler, AsyncioTickDriver(), lambda modules: source)

    result = await handler.load_suites(["anything"])

    assert result == {
        "status": "error",
        "operation": "load",
        "modules": ["anything"],
        "message": "bad suite",
    }


# ============================================================================
# run
# ============================================================================


@pytest.mark.asyncio
async def test_run_reports_success(handler: CLICommandHandler) -> None:
    await handler.load_suites([SAMPLE])
    result = await handler.run_tests()

    assert result["status"] == "success"
    assert result["data"]["completed"] == 3
    assert result["data"]["passed"] is True
    json.dumps(result)


@pytest.mark.asyncio
async def test_run_reports_failure_and_cancellation(handler: CLICommandHandler) -> None:
    await handler.load_suites([FAILING])
    result = await handler.run_tests(channel=1)

    assert result["status"] == "failed"
    bank = result["data"]["banks"][0]
    assert bank["canceled"] is True
    assert bank["attempted"] == 1
    assert bank["results"][0]["status"] == "failed"


@pytest.mark.asyncio
async def test_run_text_format(handler: CLICommandHandler) -> None:
    await handler.load_suites([FAILING])
    result = await handler.run_tests(output_format="text")

    assert "[CANCELED]" in result["data"]
    assert "broken: failed" in result["data"]
    assert "Total: 0/2 completed, 1 failures" in result["data"]


@pytest.mark.asyncio
async def test_run_unsupported_format(handler: CLICommandHandler) -> None:
    result = await handler.run_tests(output_format="xml")
    assert result["status"] == "error"


@pytest.mark.asyncio
async def test_run_rejected_while_running(
    handler: CLICommandHandler, scheduler: Scheduler
) -> None:
    scheduler.running = True
    result = await handler.run_tests()
    assert result["status"] == "error"
    assert "already in progress" in result["message"]


# ============================================================================
# pending / clear
# ============================================================================


@pytest.mark.asyncio
async def test_pending_and_clear(handler: CLICommandHandler) -> None:
    await handler.load_suites([SAMPLE])

    pending = await handler.pending()
    assert pending["pending"] == 2
    assert pending["channels"] == [1, 2]

    cleared = await handler.clear(channel=2)
    assert cleared["discarded"] == 1
    assert (await handler.pending())["pending"] == 1


# ============================================================================
# run_command dispatch
# ============================================================================


@pytest.mark.asyncio
async def test_run_command_dispatch(handler: CLICommandHandler) -> None:
    loaded = await run_command(handler, "load", {"modules": SAMPLE, "channel": 1})
    assert loaded["banks_enqueued"] == 1

    ran = await run_command(handler, "run", {"channel": 1, "format": "json"})
    assert ran["status"] == "success"


@pytest.mark.asyncio
async def test_run_command_requires_modules(handler: CLICommandHandler) -> None:
    with pytest.raises(ValueError, match="modules"):
        await run_command(handler, "load", {})


@pytest.mark.asyncio
async def test_run_command_unknown(handler: CLICommandHandler) -> None:
    with pytest.raises(ValueError, match="Unknown command"):
        await run_command(handler, "explode", {})
