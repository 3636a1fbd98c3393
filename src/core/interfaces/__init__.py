"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) implemented by concrete adapters.
- Inverts dependencies: the core depends on abstractions, not on
  prometheus_client.
"""

from core.interfaces.metrics import ExpositionEncoder, MetricsSnapshot, MetricsSource

__all__ = [
    "ExpositionEncoder",
    "MetricsSnapshot",
    "MetricsSource",
]
