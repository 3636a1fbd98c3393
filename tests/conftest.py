# tests/conftest.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import httpx
import pytest
from prometheus_client import CollectorRegistry, Counter, Gauge

from core.config import PusherSettings

Responder = Callable[[httpx.Request], Awaitable[httpx.Response]]


@dataclass
class RecordedRequest:
    method: str
    url: str
    content_type: str | None
    body: bytes


@dataclass
class FakeGateway:
    """Async handler for `httpx.MockTransport` that records every request.

    Per-host behaviour: a status code, an exception, or a custom coroutine.
    Hosts without a rule answer 200.
    """

    requests: list[RecordedRequest] = field(default_factory=list)
    statuses: dict[str, int] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    responders: dict[str, Responder] = field(default_factory=dict)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.requests.append(
            RecordedRequest(
                method=request.method,
                url=str(request.url),
                content_type=request.headers.get("Content-Type"),
                body=request.content,
            )
        )
        if host in self.delays:
            await asyncio.sleep(self.delays[host])
        if host in self.responders:
            return await self.responders[host](request)
        if host in self.errors:
            raise self.errors[host]
        return httpx.Response(self.statuses.get(host, 200))

    def bodies(self) -> list[bytes]:
        return [r.body for r in self.requests]

    def urls(self) -> list[str]:
        return [r.url for r in self.requests]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real env vars and .env files out of every test."""

    for name in (
        "METRIC_PUSHER_ENDPOINTS",
        "METRIC_PUSHER_JOB",
        "METRIC_PUSHER_INSTANCE",
        "METRIC_PUSHER_CONTENT_TYPE",
        "METRIC_PUSHER_JOIN_TIMEOUT_SECONDS",
        "METRIC_PUSHER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> PusherSettings:
    return PusherSettings(_env_file=None)


@pytest.fixture
def registry() -> CollectorRegistry:
    reg = CollectorRegistry()
    rows = Counter("batch_rows_processed", "Rows processed by the batch", registry=reg)
    rows.inc(42)
    last = Gauge("batch_last_success_unixtime", "Last successful run", registry=reg)
    last.set(1_700_000_000)
    return reg


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
async def client(gateway):
    async with httpx.AsyncClient(transport=httpx.MockTransport(gateway)) as http:
        yield http
