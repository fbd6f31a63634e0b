"""Test suite for the tickbank engine.

Organized into three categories:

1. core/: Unit tests for core orchestration logic
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports and clocks

2. adapters/: Tests for adapter implementations
   - Log sinks, host tick drivers, suite loading, CLI commands

3. fakes/: Port implementations for testing
   - In-memory implementations of LogSinkPort, BankSourcePort and a clock
   - Used by core unit tests
"""
