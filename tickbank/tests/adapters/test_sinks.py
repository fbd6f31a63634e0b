"""Unit tests for the log sink adapters."""

import logging
from io import StringIO

import pytest

from tickbank.adapters.sink.logging_sink import LoggingSinkAdapter
from tickbank.adapters.sink.stdout import StdoutSinkAdapter
from tickbank.core.models import Severity


@pytest.mark.parametrize(
    ("severity", "level"),
    [
        (Severity.INFO, logging.INFO),
        (Severity.WARNING, logging.WARNING),
        (Severity.ERROR, logging.ERROR),
    ],
)
def test_logging_sink_maps_severity(
    caplog: pytest.LogCaptureFixture, severity: Severity, level: int
) -> None:
    sink = LoggingSinkAdapter("tickbank.test-sink")
    with caplog.at_level(logging.DEBUG, logger="tickbank.test-sink"):
        sink.console("hello", severity)

    assert caplog.records[-1].levelno == level
    assert caplog.records[-1].getMessage() == "hello"


def test_logging_sink_attaches_exception(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingSinkAdapter("tickbank.test-sink")
    try:
        raise ValueError("broken")
    except ValueError as e:
        error = e

    with caplog.at_level(logging.ERROR, logger="tickbank.test-sink"):
        sink.console("failed", Severity.ERROR, error)

    record = caplog.records[-1]
    assert record.exc_info is not None
    assert record.exc_info[1] is error


def test_stdout_sink_formats_line() -> None:
    stream = StringIO()
    sink = StdoutSinkAdapter(stream=stream)

    sink.console("bank started")
    sink.console("timed out", Severity.WARNING)

    lines = stream.getvalue().splitlines()
    assert lines == ["[INFO   ] bank started", "[WARNING] timed out"]


def test_stdout_sink_includes_exception_summary() -> None:
    stream = StringIO()
    sink = StdoutSinkAdapter(stream=stream)

    sink.console("fatal", Severity.ERROR, KeyError("slot"))

    assert stream.getvalue().strip() == "[ERROR  ] fatal (KeyError: 'slot')"


def test_stdout_sink_verbose_prints_traceback() -> None:
    stream = StringIO()
    sink = StdoutSinkAdapter(verbose=True, stream=stream)
    try:
        raise RuntimeError("deep")
    except RuntimeError as e:
        sink.console("fatal", Severity.ERROR, e)

    output = stream.getvalue()
    assert "Traceback" in output
    assert "RuntimeError: deep" in output


def test_stdout_sink_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    StdoutSinkAdapter().console("to stdout")
    assert "to stdout" in capsys.readouterr().out
