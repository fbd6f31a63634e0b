"""Port interfaces for the tickbank engine.

These abstract base classes define the boundaries between the core
orchestration logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - LogSinkPort: Human-readable output with severity classification

2. **Driving Ports** (adapters feed work into the core)
   - BankSourcePort: Discovery collaborator producing banks to enqueue
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .models import ALL_CHANNELS, Severity

if TYPE_CHECKING:
    from .bank import TestBank


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class LogSinkPort(ABC):
    """Port for emitting human-readable engine output.

    The core emits bank-start notices, per-case and per-assertion notices,
    bank-cancel notices and bank summaries through this port. Formatting
    is up to the adapter, but the severity must be preserved because
    external tooling may filter on it.
    """

    @abstractmethod
    def console(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        exception: BaseException | None = None,
    ) -> None:
        """Emit a single message.

        Args:
            message: Preformatted message text.
            severity: Severity classification of the message.
            exception: Exception associated with the message, if any.

        Implementations must not raise; the scheduler calls this between
        test steps and has no recovery path for a failing sink.
        """


# ============================================================================
# DRIVING PORTS (Adapters feed work into the core)
# ============================================================================


class BankSourcePort(ABC):
    """Port for the discovery collaborator.

    Implementations collect registered test callables from somewhere
    (imported suite modules, plugins, a host's object graph) and return
    them grouped into banks ready to enqueue.
    """

    @abstractmethod
    def load_banks(self, channel: int = ALL_CHANNELS) -> "list[TestBank]":
        """Build banks for the given channel.

        Args:
            channel: Channel to build banks for, or ALL_CHANNELS
                to build one bank per registered channel.

        Returns:
            Ordered list of freshly built banks. The order across calls
            is not guaranteed to match declaration order.

        Raises:
            Exception: If the underlying source cannot be loaded.
        """
