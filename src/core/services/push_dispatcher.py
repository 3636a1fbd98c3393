"""Push dispatcher: fan one payload out to every endpoint, join, evaluate.

Flow of a push:
1. Validate endpoints and job (no I/O, no snapshot yet).
2. Collect and encode one snapshot into a shared `Payload`.
3. Start one POST per endpoint concurrently.
4. Wait for every delivery to be terminal; a failing endpoint never cancels
   its siblings.
5. Walk the outcomes in endpoint input order and raise the first failure.

Only the evaluation step is ordered: completion order is whatever the network
decides, but the reported error is always the earliest failing endpoint in
the list the caller passed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

import httpx
from prometheus_client import CollectorRegistry

from adapters.exposition import PrometheusEncoder, RegistrySource
from adapters.http_client import close_shared_client, get_shared_client
from core.config import PusherSettings
from core.domain.models import DeliveryOutcome, Payload, PushResult, PushTarget
from core.errors import (
    InvalidArgumentError,
    PushTimeoutError,
    RemoteRejectionError,
    TransportError,
)
from core.interfaces.metrics import ExpositionEncoder, MetricsSource
from core.services.snapshot import build_payload, resolve_content_type
from core.services.url_builder import build_push_url

logger = logging.getLogger(__name__)


def resolve_targets(
    endpoints: str | Sequence[str],
    job: str,
    instance: str | None = None,
) -> list[PushTarget]:
    """Validate the whole push up front and build one target per endpoint.

    A single string is a fan-out of one. Duplicates are kept: each one is
    delivered independently.
    """

    if isinstance(endpoints, str):
        endpoints = [endpoints]
    if not endpoints:
        raise InvalidArgumentError("endpoints", "at least one endpoint is required")
    if not job or not job.strip():
        raise InvalidArgumentError("job", "must not be empty", value=job)

    return [
        PushTarget(endpoint=endpoint, url=build_push_url(endpoint, job, instance))
        for endpoint in endpoints
    ]


async def _deliver(
    client: httpx.AsyncClient,
    target: PushTarget,
    payload: Payload,
) -> DeliveryOutcome:
    logger.debug("POST %s (%d bytes)", target.url, len(payload))
    started = time.perf_counter()
    try:
        response = await client.post(
            target.url,
            content=payload.body,
            headers={"Content-Type": payload.content_type},
        )
    except httpx.RequestError as exc:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.warning("Push to %s failed: %s", target.url, exc)
        return DeliveryOutcome.from_exception(
            endpoint=target.endpoint, url=target.url, exc=exc, elapsed_ms=elapsed_ms
        )

    elapsed_ms = (time.perf_counter() - started) * 1000
    outcome = DeliveryOutcome(
        endpoint=target.endpoint,
        url=target.url,
        status_code=response.status_code,
        reason=response.reason_phrase,
        elapsed_ms=elapsed_ms,
    )
    if outcome.ok:
        logger.debug("Push to %s answered HTTP %d", target.url, response.status_code)
    else:
        logger.warning("Push to %s rejected: HTTP %d", target.url, response.status_code)
    return outcome


async def deliver_all(
    targets: Sequence[PushTarget],
    payload: Payload,
    *,
    client: httpx.AsyncClient,
    join_timeout: float | None = None,
) -> list[DeliveryOutcome]:
    """Start every delivery at once and wait until all of them are terminal.

    Outcomes come back in `targets` order. `join_timeout` bounds the join as
    a whole; when it expires every unfinished delivery is cancelled together
    and `PushTimeoutError` is raised.
    """

    tasks = [asyncio.create_task(_deliver(client, target, payload)) for target in targets]
    if not tasks:
        return []
    try:
        _, pending = await asyncio.wait(tasks, timeout=join_timeout)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        pending_urls = [target.url for target, task in zip(targets, tasks) if task in pending]
        raise PushTimeoutError(join_timeout or 0.0, pending_urls)

    return [task.result() for task in tasks]


def raise_for_result(result: PushResult) -> None:
    """Raise the first failed delivery (input order), if any."""

    failure = result.first_failure()
    if failure is None:
        return
    if failure.error is not None:
        raise TransportError(failure.endpoint, failure.url, failure.error) from failure.exception
    raise RemoteRejectionError(
        failure.endpoint,
        failure.url,
        failure.status_code or 0,
        failure.reason,
    )


async def dispatch(
    endpoints: str | Sequence[str] | None = None,
    job: str | None = None,
    instance: str | None = None,
    content_type: str | None = None,
    *,
    registry: CollectorRegistry | None = None,
    source: MetricsSource | None = None,
    encoder: ExpositionEncoder | None = None,
    client: httpx.AsyncClient | None = None,
    settings: PusherSettings | None = None,
    join_timeout: float | None = None,
) -> PushResult:
    """Run a full push and return every outcome without raising delivery errors.

    Invalid input and join timeouts still raise. Arguments left as `None`
    fall back to `settings` (env / .env), then to built-in defaults.
    """

    settings = settings or PusherSettings()
    if endpoints is None:
        endpoints = settings.endpoints
    if job is None:
        job = settings.job or ""
    if instance is None:
        instance = settings.instance
    if content_type is None:
        content_type = settings.content_type
    if join_timeout is None:
        join_timeout = settings.join_timeout_seconds

    targets = resolve_targets(endpoints, job, instance)

    resolved_type = resolve_content_type(content_type)
    payload = build_payload(
        source=source or RegistrySource(registry),
        encoder=encoder or PrometheusEncoder(),
        content_type=resolved_type,
    )

    http = client if client is not None else get_shared_client(settings)
    outcomes = await deliver_all(targets, payload, client=http, join_timeout=join_timeout)

    result = PushResult(
        job=job,
        instance=instance if instance and instance.strip() else None,
        content_type=resolved_type,
        payload_size=len(payload),
        outcomes=outcomes,
    )
    if result.ok:
        logger.info("Pushed %d bytes to %d endpoint(s) for job %r", len(payload), len(targets), job)
    return result


async def push(
    endpoints: str | Sequence[str] | None = None,
    job: str | None = None,
    instance: str | None = None,
    content_type: str | None = None,
    *,
    registry: CollectorRegistry | None = None,
    source: MetricsSource | None = None,
    encoder: ExpositionEncoder | None = None,
    client: httpx.AsyncClient | None = None,
    settings: PusherSettings | None = None,
    join_timeout: float | None = None,
) -> None:
    """Push the current metrics to one or more Pushgateways.

    Returns normally only when every endpoint accepted the payload. Otherwise
    raises the first failure in endpoint order, after all deliveries were
    attempted.
    """

    result = await dispatch(
        endpoints,
        job,
        instance,
        content_type,
        registry=registry,
        source=source,
        encoder=encoder,
        client=client,
        settings=settings,
        join_timeout=join_timeout,
    )
    raise_for_result(result)


def push_sync(
    endpoints: str | Sequence[str] | None = None,
    job: str | None = None,
    instance: str | None = None,
    content_type: str | None = None,
    **kwargs,
) -> None:
    """Blocking `push` for scripts without an event loop.

    Each call runs its own loop, so the shared client is closed before
    returning.
    """

    async def _run() -> None:
        try:
            await push(endpoints, job, instance, content_type, **kwargs)
        finally:
            await close_shared_client()

    asyncio.run(_run())
