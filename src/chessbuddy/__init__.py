"""
ChessBuddy package bootstrap.

Subpackages:
- interface: Adapters for HTTP, CLI, and telemetry layers.
- domain: Session state machine, difficulty strategies and the computer opponent.
- infrastructure: Configuration and in-memory session storage.
"""

__all__ = ["interface", "domain", "infrastructure"]
