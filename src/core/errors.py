"""Errors raised by the pusher.

Three families:
- `InvalidArgumentError`: bad job/endpoint/content-type input, always raised
  before any network call.
- `DeliveryError`: one endpoint failed (transport fault or non-2xx status).
- `PushTimeoutError`: the whole fan-out/join ran past its budget.
"""

from __future__ import annotations


class PushError(Exception):
    """Base class for everything the pusher raises."""


class InvalidArgumentError(PushError, ValueError):
    """Caller input that can never succeed (empty job, malformed endpoint...)."""

    def __init__(self, param: str, message: str, *, value: str | None = None) -> None:
        self.param = param
        self.value = value
        super().__init__(f"{param}: {message}")


class DeliveryError(PushError):
    """A single delivery to one endpoint did not succeed."""

    def __init__(self, endpoint: str, url: str, message: str) -> None:
        self.endpoint = endpoint
        self.url = url
        super().__init__(f"push to {url} failed: {message}")


class TransportError(DeliveryError):
    """Connection refused, DNS, TLS or timeout while talking to an endpoint."""


class RemoteRejectionError(DeliveryError):
    """The endpoint answered with a non-success HTTP status."""

    def __init__(self, endpoint: str, url: str, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}"
        if reason:
            detail = f"{detail} {reason}"
        super().__init__(endpoint, url, detail)


class PushTimeoutError(PushError):
    """Deliveries were still running when the join budget expired."""

    def __init__(self, timeout: float, pending: list[str]) -> None:
        self.timeout = timeout
        self.pending = pending
        super().__init__(
            f"push did not complete within {timeout}s ({len(pending)} deliveries pending)"
        )
