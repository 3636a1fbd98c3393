"""Snapshot builder: one collect, one encode, one shared payload."""

from __future__ import annotations

import logging

from core.config import DEFAULT_CONTENT_TYPE
from core.domain.models import Payload
from core.errors import InvalidArgumentError
from core.interfaces.metrics import ExpositionEncoder, MetricsSource

logger = logging.getLogger(__name__)


def resolve_content_type(content_type: str | None) -> str:
    """Explicit override, or the text exposition default when absent/blank.

    The value goes out as an HTTP header, so it must be plain ASCII.
    """

    if content_type is None or not content_type.strip():
        return DEFAULT_CONTENT_TYPE
    content_type = content_type.strip()
    if not content_type.isascii():
        raise InvalidArgumentError(
            "content_type", "must contain only ASCII characters", value=content_type
        )
    return content_type


def build_payload(
    *,
    source: MetricsSource,
    encoder: ExpositionEncoder,
    content_type: str,
) -> Payload:
    snapshot = source.collect_snapshot()
    body = encoder.encode(snapshot, content_type)
    logger.debug("Encoded snapshot as %r (%d bytes)", content_type, len(body))
    return Payload(body=bytes(body), content_type=content_type)
