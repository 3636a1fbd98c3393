"""Contracts for the metrics collaborators.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- Lets the dispatcher stay independent of prometheus_client: any registry or
  encoder with the right shape can feed a push, including test fakes.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class MetricsSnapshot(Protocol):
    """Immutable capture of every metric family at one instant.

    Shaped like a prometheus_client collector so the stock exposition
    encoders can serialize it directly.
    """

    def collect(self) -> Iterable[Any]:
        """Yield the captured metric families (same result on every call)."""

        ...


@runtime_checkable
class MetricsSource(Protocol):
    """Something that can produce a snapshot of current measurements."""

    def collect_snapshot(self) -> MetricsSnapshot:
        """Collect all current measurements into a stable snapshot."""

        ...


@runtime_checkable
class ExpositionEncoder(Protocol):
    """Serializes a snapshot into the wire format of a content type."""

    def encode(self, snapshot: MetricsSnapshot, content_type: str) -> bytes:
        ...
