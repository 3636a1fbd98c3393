"""Domain models (Pydantic v2 + frozen dataclasses).

Why Pydantic here:
- Delivery outcomes are reported to the CLI and to library callers; a model
  gives validation and a stable `model_dump` for free.
- `Payload` stays a plain frozen dataclass: it is raw bytes shared by every
  delivery and must never be copied or re-validated per endpoint.

Note:
- These models describe *what* a push produced, not *how* it was sent.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field, PrivateAttr


@dataclass(frozen=True, slots=True)
class Payload:
    """One encoded snapshot, shared read-only by all deliveries of a push."""

    body: bytes
    content_type: str

    def __len__(self) -> int:
        return len(self.body)


@dataclass(frozen=True, slots=True)
class PushTarget:
    """An endpoint as given by the caller plus the URL built from it."""

    endpoint: str
    url: str


class DeliveryOutcome(BaseModel):
    """Terminal state of one delivery (response received or transport fault)."""

    endpoint: str = Field(
        ...,
        min_length=1,
        description="Endpoint base URL exactly as the caller passed it.",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="Target URL the payload was POSTed to.",
    )
    status_code: int | None = Field(
        default=None,
        description="HTTP status when a response arrived (any code the server sent).",
    )
    reason: str = Field(
        default="",
        description="HTTP reason phrase when a response arrived.",
    )
    error: str | None = Field(
        default=None,
        description="Transport error description when no response arrived.",
    )
    elapsed_ms: float | None = Field(
        default=None,
        ge=0.0,
        description="Wall time of the delivery in milliseconds.",
    )

    _exception: BaseException | None = PrivateAttr(default=None)

    @classmethod
    def from_exception(
        cls,
        *,
        endpoint: str,
        url: str,
        exc: BaseException,
        elapsed_ms: float | None = None,
    ) -> "DeliveryOutcome":
        detail = str(exc) or exc.__class__.__name__
        outcome = cls(endpoint=endpoint, url=url, error=detail, elapsed_ms=elapsed_ms)
        outcome._exception = exc
        return outcome

    @property
    def exception(self) -> BaseException | None:
        """Original transport exception, kept out of `model_dump`."""

        return self._exception

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


class PushResult(BaseModel):
    """Aggregate of every delivery of one push, in endpoint input order."""

    job: str
    instance: str | None = None
    content_type: str
    payload_size: int = Field(ge=0)
    outcomes: list[DeliveryOutcome] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def failures(self) -> list[DeliveryOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def first_failure(self) -> DeliveryOutcome | None:
        """First failed delivery in input order, regardless of completion order."""

        return next((outcome for outcome in self.outcomes if not outcome.ok), None)
