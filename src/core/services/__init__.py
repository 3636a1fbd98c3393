"""Push orchestration services.

Public entry points:
- `push` / `push_sync`: push the current metrics, raise on first failure.
- `dispatch`: same fan-out, but returns every outcome as a `PushResult`.
- `build_push_url`: target URL for one endpoint.
"""

from core.services.push_dispatcher import (
    deliver_all,
    dispatch,
    push,
    push_sync,
    raise_for_result,
    resolve_targets,
)
from core.services.snapshot import build_payload, resolve_content_type
from core.services.url_builder import build_push_url

__all__ = [
    "build_payload",
    "build_push_url",
    "deliver_all",
    "dispatch",
    "push",
    "push_sync",
    "raise_for_result",
    "resolve_content_type",
    "resolve_targets",
]
