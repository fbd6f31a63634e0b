"""External adapters for the tickbank engine.

This package provides implementations of the core port interfaces and the
pieces that connect the engine to a host.

Adapter Organization:

- sink/: Log sinks for engine output (stdlib logging, stdout)
- host/: Tick drivers consuming scheduler suspensions (manual, asyncio)
- suite/: Bank sources that discover registered tests (suite modules)
- cli/: Command-line interface and interactive commands
"""
