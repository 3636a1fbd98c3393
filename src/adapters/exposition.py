"""prometheus_client adapters: registry snapshot, textfile source, encoder.

Used as the external collaborators of a push:
- `RegistrySource` collects a `CollectorRegistry` once into a `FrozenSnapshot`.
- `TextfileSource` reads an already rendered text exposition file
  (node_exporter textfile style) into the same snapshot shape.
- `PrometheusEncoder` renders a snapshot as text 0.0.4 or OpenMetrics.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from prometheus_client import REGISTRY, CollectorRegistry, generate_latest
from prometheus_client.openmetrics.exposition import (
    generate_latest as generate_openmetrics,
)
from prometheus_client.parser import text_string_to_metric_families

from core.interfaces.metrics import MetricsSnapshot

logger = logging.getLogger(__name__)

OPENMETRICS_MEDIA_TYPE = "application/openmetrics-text"


class FrozenSnapshot:
    """Metric families captured once; `collect()` replays them unchanged."""

    __slots__ = ("_families",)

    def __init__(self, families: Iterable[Any]) -> None:
        self._families = tuple(families)

    def collect(self) -> Iterable[Any]:
        return iter(self._families)

    def __len__(self) -> int:
        return len(self._families)


class RegistrySource:
    """Snapshot source backed by a prometheus_client registry."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else REGISTRY

    def collect_snapshot(self) -> FrozenSnapshot:
        snapshot = FrozenSnapshot(self._registry.collect())
        logger.debug("Collected %d metric families from registry", len(snapshot))
        return snapshot


class TextfileSource:
    """Snapshot source reading a text exposition file from disk."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def collect_snapshot(self) -> FrozenSnapshot:
        raw = self._path.read_text(encoding="utf-8")
        snapshot = FrozenSnapshot(text_string_to_metric_families(raw))
        logger.debug("Parsed %d metric families from %s", len(snapshot), self._path)
        return snapshot


class PrometheusEncoder:
    """Exposition encoder picking the format from the content type."""

    def encode(self, snapshot: MetricsSnapshot, content_type: str) -> bytes:
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type == OPENMETRICS_MEDIA_TYPE:
            return generate_openmetrics(snapshot)
        return generate_latest(snapshot)
