"""Log sink adapters for engine output.

Implementations:
- Logging (forwards to the stdlib logging module)
- Stdout (prints severity-tagged console lines)
"""
