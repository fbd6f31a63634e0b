"""Suite module loader adapter.

Implements BankSourcePort by importing Python modules that declare tests.
A suite module either defines a ``build_banks(channel, sink)`` function
returning banks, or exposes a module-level ``tests`` TestRegistry of free
functions, which is built into one bank per channel with the module name
as context.
"""

import importlib
import logging
from collections.abc import Sequence
from types import ModuleType

from tickbank.core.bank import TestBank
from tickbank.core.models import ALL_CHANNELS
from tickbank.core.ports import BankSourcePort, LogSinkPort
from tickbank.core.registry import TestRegistry

logger = logging.getLogger(__name__)


class ModuleSuiteSource(BankSourcePort):
    """Builds banks from importable suite modules."""

    def __init__(self, module_names: Sequence[str], sink: LogSinkPort | None = None):
        """Initialize suite source.

        Args:
            module_names: Dotted module paths to import.
            sink: Log sink attached to every built case.
        """
        self.module_names = list(module_names)
        self.sink = sink

    def load_banks(self, channel: int = ALL_CHANNELS) -> list[TestBank]:
        """Import each suite module and collect its banks.

        Raises:
            ImportError: If a module cannot be imported.
            ValueError: If a module declares no tests.
        """
        banks: list[TestBank] = []
        for name in self.module_names:
            try:
                module = importlib.import_module(name)
            except ImportError as e:
                logger.error(f"Failed to import suite module {name}: {e}", exc_info=True)
                raise

            module_banks = self._banks_from_module(module, channel)
            logger.info(f"Loaded {len(module_banks)} banks from {name}")
            banks.extend(module_banks)
        return banks

    def _banks_from_module(self, module: ModuleType, channel: int) -> list[TestBank]:
        build_banks = getattr(module, "build_banks", None)
        if callable(build_banks):
            banks = list(build_banks(channel=channel, sink=self.sink))
            if channel == ALL_CHANNELS:
                return banks
            return [b for b in banks if b.channel == channel]

        registry = getattr(module, "tests", None)
        if isinstance(registry, TestRegistry):
            return registry.build_banks(module.__name__, channel=channel, sink=self.sink)

        raise ValueError(
            f"Suite module {module.__name__} defines neither build_banks() "
            "nor a 'tests' TestRegistry"
        )
