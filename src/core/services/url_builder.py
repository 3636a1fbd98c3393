"""Pushgateway target URL construction.

`{endpoint}/job/{job}` optionally followed by `/instance/{instance}`.
Pure function: it validates input and never touches the network, so a bad
endpoint is reported before any delivery starts.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from core.errors import InvalidArgumentError

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def _segment(value: str) -> str:
    # One path segment: "/" and other reserved characters are escaped.
    return quote(value, safe="")


def build_push_url(endpoint: str, job: str, instance: str | None = None) -> str:
    """Build the push URL for one endpoint.

    Raises `InvalidArgumentError` for an empty endpoint, an empty job, or an
    endpoint that does not form an absolute http(s) URL. A blank instance is
    treated as absent.
    """

    if not endpoint or not endpoint.strip():
        raise InvalidArgumentError("endpoint", "must not be empty", value=endpoint)
    if not job or not job.strip():
        raise InvalidArgumentError("job", "must not be empty", value=job)

    url = f"{endpoint.rstrip('/')}/job/{_segment(job)}"
    if instance and instance.strip():
        url = f"{url}/instance/{_segment(instance)}"

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidArgumentError(
            "endpoint", f"{endpoint!r} is not a valid URL ({exc})", value=endpoint
        ) from exc

    if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.host:
        raise InvalidArgumentError(
            "endpoint", f"{endpoint!r} must be an absolute http(s) URL", value=endpoint
        )
    return url
