"""tickbank: cooperative in-process test orchestration for tick-driven hosts."""

__version__ = "0.1.0"
