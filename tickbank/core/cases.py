"""Test case state machine.

A TestCase wraps one test callable together with its pass/fail state,
elapsed duration and timeout policy. The scheduler drives it through
run(), repeated poll() calls and a final should_cancel() check.

State Transitions:
    - NONE → RUNNING (run)
    - terminal → RUNNING (run, keeps recorded errors)
    - RUNNING → COMPLETE (complete, or the body returned)
    - RUNNING → FAILED (fail)
    - RUNNING → FATAL (fatal, or an exception escaped the body)
    - RUNNING → TIMEOUT (time_out, or run_check past the ceiling)
    - RUNNING → CANCELED (cancel)
    - ANY → NONE (reset)

Finalizers are guarded: called outside RUNNING they do nothing. The first
finalizing transition of a run sticks.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Generator
from datetime import timedelta
from typing import Any, TypeAlias

from .models import (
    ALL_CHANNELS,
    DEFAULT_CHANNEL,
    CaseStatus,
    RecordedError,
    Severity,
)
from .ports import LogSinkPort

logger = logging.getLogger(__name__)

# A test body always receives its owning case as the only argument.
TestBody: TypeAlias = Callable[["TestCase"], Any]


class TestCase:
    """A single schedulable unit of work."""

    __test__ = False  # not a pytest test class

    pretty_suffix = ""

    def __init__(
        self,
        name: str | None = None,
        channel: int = DEFAULT_CHANNEL,
        timeout_ms: float = 0.0,
        cancel_on_fail: bool = False,
    ):
        """Initialize an unbound test case.

        Args:
            name: Display name (defaults to the bound callable's name).
            channel: Channel partition this case belongs to.
            timeout_ms: Duration ceiling in milliseconds (<= 0 disables).
            cancel_on_fail: Abort the rest of the bank on any
                non-COMPLETE outcome.

        Raises:
            ValueError: If channel is the ALL_CHANNELS wildcard.
        """
        if channel == ALL_CHANNELS:
            raise ValueError(
                f"channel {ALL_CHANNELS} is reserved for draining all channels"
            )
        self.name = name
        self._channel = channel
        self._timeout_ms = float(timeout_ms)
        self._cancel_on_fail = cancel_on_fail

        self.receiver: Any = None
        self.declaring_type: type | None = None
        self.func: TestBody | None = None
        self.sink: LogSinkPort | None = None

        self._status = CaseStatus.NONE
        self._elapsed_ms = 0.0
        self._errors: list[RecordedError] = []
        self._continuation: Generator[Any, Any, Any] | None = None
        self._future: asyncio.Future[Any] | None = None
        self._run_id = 0

    # ------------------------------------------------------------------
    # Configuration and state
    # ------------------------------------------------------------------

    @property
    def channel(self) -> int:
        return self._channel

    @property
    def timeout_ms(self) -> float:
        return self._timeout_ms

    @property
    def cancel_on_fail(self) -> bool:
        return self._cancel_on_fail

    @property
    def status(self) -> CaseStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status == CaseStatus.RUNNING

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed_ms

    @property
    def duration(self) -> timedelta:
        return timedelta(milliseconds=self._elapsed_ms)

    @property
    def errors(self) -> tuple[RecordedError, ...]:
        return tuple(self._errors)

    @property
    def pretty_name(self) -> str:
        """Console prefix in the form ``type.name|12ms|``."""
        owner = f"{self.declaring_type.__name__}." if self.declaring_type else ""
        return (
            f"{owner}{self.name}|{self._elapsed_ms:.0f}ms|".lower()
            + self.pretty_suffix
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, channel={self._channel}, "
            f"status={self._status.value})"
        )

    # ------------------------------------------------------------------
    # Binding and execution
    # ------------------------------------------------------------------

    def setup(
        self,
        receiver: Any,
        declaring_type: type | None,
        func: Callable[..., Any],
        sink: LogSinkPort | None = None,
    ) -> None:
        """Bind the unit of work.

        A function defined in a class body and given together with a
        receiver is bound to it through the descriptor protocol, so unbound
        methods can be passed as-is. Module-level and nested functions are
        called with the case only, even when a receiver is given.

        Raises:
            ValueError: If the case is currently running.
        """
        if self.is_running:
            raise ValueError(f"Cannot set up test case {self.name} while running")

        if receiver is not None and _is_method_definition(func):
            func = func.__get__(receiver, declaring_type or type(receiver))

        self.receiver = receiver
        self.declaring_type = declaring_type
        self.func = func
        if self.name is None:
            self.name = getattr(func, "__name__", type(self).__name__)
        if sink is not None:
            self.sink = sink

    def run(self) -> None:
        """Start the case and invoke its body.

        The body may return plainly (the case completes unless a finalizer
        already fired), return a generator (advanced once per poll) or
        return an awaitable (scheduled on the running event loop).

        Raises:
            ValueError: If the case is not set up or is already running.
        """
        if self.func is None:
            raise ValueError("test case must be set up before running")
        if self.is_running:
            raise ValueError(f"Cannot run test case {self.name} while it is running")

        self._discard_pending()
        self._run_id += 1
        self._elapsed_ms = 0.0
        self._status = CaseStatus.RUNNING

        try:
            result = self.func(self)
        except Exception as e:
            self._escalate(f"Unhandled {type(e).__name__}: {e}", e)
            return

        if inspect.isgenerator(result):
            self._continuation = result
            self._advance()
        elif inspect.isawaitable(result):
            self._schedule(result)
        else:
            self._on_body_returned()

    def set_duration(self, elapsed_ms: float) -> None:
        """Record elapsed time for the current run (never decreases)."""
        if not self.is_running:
            return
        self._elapsed_ms = max(self._elapsed_ms, float(elapsed_ms))

    def run_check(self) -> None:
        """Apply the timeout policy to the recorded duration."""
        if self._timeout_ms <= 0 or not self.is_running:
            return
        if self._elapsed_ms >= self._timeout_ms:
            self.time_out()

    def poll(self, elapsed_ms: float) -> None:
        """Per-tick update while running.

        Updates the duration, checks the timeout and, if the case is still
        running, advances a generator continuation by one step.
        """
        if not self.is_running:
            self._discard_pending()
            return

        self.set_duration(elapsed_ms)
        self.run_check()

        if self.is_running and self._continuation is not None:
            self._advance()

    # ------------------------------------------------------------------
    # Finalizers
    # ------------------------------------------------------------------

    def complete(self) -> bool:
        """Settle the case as COMPLETE."""
        if not self._transition(CaseStatus.COMPLETE):
            return False
        self.log(f"Complete - {len(self._errors)} excp.")
        return True

    def fail(self, message: str, exception: BaseException | None = None) -> bool:
        """Settle the case as FAILED and record the reason."""
        if not self._transition(CaseStatus.FAILED):
            return False
        self._errors.append(RecordedError(message, CaseStatus.FAILED, exception))
        self.error(f"Fail - {message}", exception)
        return True

    def fatal(self, message: str, exception: BaseException | None = None) -> bool:
        """Settle the case as FATAL and record the reason."""
        if not self._transition(CaseStatus.FATAL):
            return False
        self._errors.append(RecordedError(message, CaseStatus.FATAL, exception))
        self.error(f"Fatal - {message}", exception)
        return True

    def time_out(self) -> bool:
        """Settle the case as TIMEOUT."""
        if not self._transition(CaseStatus.TIMEOUT):
            return False
        self.warn(f"Timed out >= {self._timeout_ms:.0f}ms")
        return True

    def cancel(self, reason: str | None = None) -> bool:
        """Settle the case as CANCELED."""
        if not self._transition(CaseStatus.CANCELED):
            return False
        self.warn(f"Canceled - {reason or 'no reason given'}")
        return True

    def should_cancel(self) -> bool:
        """Whether the owning bank should stop after this case."""
        return self._status == CaseStatus.FATAL or (
            self._cancel_on_fail and self._status != CaseStatus.COMPLETE
        )

    def reset(self) -> None:
        """Return the case to its initial state for reuse."""
        self._discard_pending()
        self._run_id += 1
        self._status = CaseStatus.NONE
        self._elapsed_ms = 0.0
        self._errors.clear()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def log(self, message: object) -> None:
        self._emit(message, Severity.INFO)

    def warn(self, message: object) -> None:
        self._emit(message, Severity.WARNING)

    def error(self, message: object, exception: BaseException | None = None) -> None:
        self._emit(message, Severity.ERROR, exception)

    def _emit(
        self,
        message: object,
        severity: Severity,
        exception: BaseException | None = None,
    ) -> None:
        text = f"{self.pretty_name}  {'no message' if message is None else message}"
        if self.sink is not None:
            self.sink.console(text, severity, exception)
        else:
            logger.log(severity.logging_level, text, exc_info=exception)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, status: CaseStatus) -> bool:
        if not self.is_running:
            return False
        self._status = status
        self._discard_pending()
        return True

    def _escalate(self, message: str, exception: BaseException) -> None:
        """Force FATAL for an exception that escaped the body."""
        self._status = CaseStatus.FATAL
        self._errors.append(RecordedError(message, CaseStatus.FATAL, exception))
        self._discard_pending()
        self.error(f"Fatal - {message}", exception)

    def _on_body_returned(self) -> None:
        """Hook called once the body (or its continuation) has finished."""
        self.complete()

    def _advance(self) -> None:
        continuation = self._continuation
        if continuation is None:
            return
        try:
            next(continuation)
            if not self.is_running:
                self._discard_pending()
        except StopIteration:
            self._continuation = None
            if self.is_running:
                self._on_body_returned()
        except Exception as e:
            self._continuation = None
            self._escalate(f"Unhandled {type(e).__name__}: {e}", e)

    def _schedule(self, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._escalate("Awaitable test body requires a running event loop", e)
            return

        run_id = self._run_id
        future = asyncio.ensure_future(awaitable, loop=loop)
        self._future = future
        future.add_done_callback(lambda f: self._on_future_done(f, run_id))

    def _on_future_done(self, future: "asyncio.Future[Any]", run_id: int) -> None:
        if run_id != self._run_id:
            return
        if self._future is future:
            self._future = None
        if future.cancelled():
            if self.is_running:
                self.cancel("awaitable body was cancelled")
            return
        # an escaped exception forces FATAL even after a finalizer fired
        exception = future.exception()
        if exception is not None:
            self._escalate(f"Unhandled {type(exception).__name__}: {exception}", exception)
            return
        if self.is_running:
            self._on_body_returned()

    def _discard_pending(self) -> None:
        """Drop any continuation or awaitable left over from a run."""
        continuation = self._continuation
        if continuation is not None and not continuation.gi_running:
            self._continuation = None
            continuation.close()

        future = self._future
        if future is not None:
            self._future = None
            if not future.done() and future is not _current_task():
                future.cancel()


def _is_method_definition(func: Callable[..., Any]) -> bool:
    """Whether func is a plain function defined directly in a class body."""
    if not inspect.isfunction(func):
        return False
    owner, _, _ = func.__qualname__.rpartition(".")
    return bool(owner) and not owner.endswith("<locals>")


def _current_task() -> "asyncio.Task[Any] | None":
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class AssertCase(TestCase):
    """Test case variant with assertion helpers.

    Each helper evaluates its predicate, reports the outcome and returns it
    so the body can branch. A failing assertion calls fail(); once the case
    has failed, later assertions still evaluate and report but cannot change
    the status.
    """

    pretty_suffix = "assert|"

    def is_true(self, condition: bool) -> bool:
        if condition:
            return self._passed(f"is_true passed     - [condition] {condition}")
        return self._failed(f"is_true failed     - [condition] {condition}")

    def is_false(self, condition: bool) -> bool:
        if not condition:
            return self._passed(f"is_false passed    - [condition] {condition}")
        return self._failed(f"is_false failed    - [condition] {condition}")

    def is_null(self, value: object) -> bool:
        if value is None:
            return self._passed(f"is_null passed     - [value] {value!r}")
        return self._failed(f"is_null failed     - [value] {value!r}")

    def is_not_null(self, value: object) -> bool:
        if value is not None:
            return self._passed(f"is_not_null passed - [value] {value!r}")
        return self._failed(f"is_not_null failed - [value] {value!r}")

    def are_equal(self, expected: object, actual: object) -> bool:
        if expected == actual:
            return self._passed(f"are_equal passed   - [expected] {expected!r}")
        return self._failed(
            f"are_equal failed   - [expected] {expected!r} [actual] {actual!r}"
        )

    def _passed(self, message: str) -> bool:
        self.log(message)
        return True

    def _failed(self, message: str) -> bool:
        if not self.fail(message):
            self.error(message)
        return False


class WaitUntilCase(TestCase):
    """Test case variant that stays running until done() is called.

    Used for bodies that hand work off to callbacks or host events and
    finish later. The timeout policy still applies while waiting.
    """

    pretty_suffix = "waituntil|"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.finalized = False

    def run(self) -> None:
        if not self.is_running:
            self.finalized = False
        super().run()

    def reset(self) -> None:
        super().reset()
        self.finalized = False

    def done(self) -> bool:
        """Mark the awaited work as finished and complete the case."""
        self.finalized = True
        return self.complete()

    def _on_body_returned(self) -> None:
        if self.finalized:
            self.complete()
