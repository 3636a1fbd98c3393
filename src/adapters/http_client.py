"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and pooling for every push.
- Owns the process-wide client so pushes reuse the connection pool instead
  of building a new transport per call.
- Eases testing: a client built on `httpx.MockTransport` can be passed in.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from core.config import PusherSettings

logger = logging.getLogger(__name__)

_shared_client: httpx.AsyncClient | None = None
_shared_loop: asyncio.AbstractEventLoop | None = None
_shared_key: tuple[str, float] | None = None
_retired: list[httpx.AsyncClient] = []


def build_async_client(
    settings: PusherSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with push defaults.

    Why a builder:
    - Centralizes timeouts/headers so every delivery behaves the same.
    - `transport` lets tests swap the network for `httpx.MockTransport`.
    """

    settings = settings or PusherSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _client_key(settings: PusherSettings) -> tuple[str, float]:
    return settings.user_agent, settings.http_timeout_seconds


def get_shared_client(settings: PusherSettings | None = None) -> httpx.AsyncClient:
    """Return the process-wide client, creating it on first use.

    Must be called from a running event loop. asyncio transports cannot cross
    loops, so a client left over from a finished loop is dropped and rebuilt.
    A caller whose settings differ (User-Agent, timeout) gets a fresh client;
    the previous one may still have requests in flight, so it is only closed
    by `close_shared_client`.
    """

    global _shared_client, _shared_loop, _shared_key

    settings = settings or PusherSettings()
    key = _client_key(settings)
    loop = asyncio.get_running_loop()
    if _shared_loop is not None and _shared_loop is not loop:
        logger.debug("Discarding shared HTTP client bound to another event loop")
        _shared_client = None
        _retired.clear()
    if _shared_client is not None and _shared_client.is_closed:
        _shared_client = None
    if _shared_client is not None and _shared_key != key:
        logger.debug("Settings changed, replacing shared HTTP client")
        _retired.append(_shared_client)
        _shared_client = None
    if _shared_client is None:
        _shared_client = build_async_client(settings)
        _shared_loop = loop
        _shared_key = key
        logger.debug("Created shared HTTP client")
    return _shared_client


async def close_shared_client() -> None:
    """Tear down the process-wide client (call once at shutdown)."""

    global _shared_client, _shared_loop, _shared_key

    clients = [*_retired, _shared_client]
    _retired.clear()
    _shared_client, _shared_key = None, None
    loop, _shared_loop = _shared_loop, None
    if loop is not asyncio.get_running_loop():
        # Its connections belong to a loop that is gone; nothing left to flush.
        return
    for client in clients:
        if client is not None and not client.is_closed:
            await client.aclose()
    logger.debug("Closed shared HTTP client")
