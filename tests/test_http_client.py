# tests/test_http_client.py
import asyncio

import httpx
import pytest

from adapters import http_client
from core.config import PusherSettings
from core.services import push_sync


@pytest.mark.asyncio
async def test_shared_client_is_reused_within_a_loop(settings):
    first = http_client.get_shared_client(settings)
    try:
        assert http_client.get_shared_client(settings) is first
        assert first.headers["User-Agent"] == "metric-pusher/0.1"
    finally:
        await http_client.close_shared_client()

    assert first.is_closed


@pytest.mark.asyncio
async def test_closed_shared_client_is_rebuilt(settings):
    first = http_client.get_shared_client(settings)
    await http_client.close_shared_client()

    second = http_client.get_shared_client(settings)
    try:
        assert second is not first
        assert not second.is_closed
    finally:
        await http_client.close_shared_client()


def test_client_from_another_loop_is_replaced(settings):
    async def grab():
        return http_client.get_shared_client(settings)

    first = asyncio.run(grab())

    async def grab_and_close():
        client = http_client.get_shared_client(settings)
        await http_client.close_shared_client()
        return client

    second = asyncio.run(grab_and_close())
    assert second is not first


@pytest.mark.asyncio
async def test_changed_settings_get_a_fresh_client_and_both_are_closed():
    first = http_client.get_shared_client(PusherSettings(_env_file=None, user_agent="a/1"))
    same = http_client.get_shared_client(PusherSettings(_env_file=None, user_agent="a/1"))
    second = http_client.get_shared_client(
        PusherSettings(_env_file=None, user_agent="b/2", http_timeout_seconds=1)
    )
    try:
        assert same is first
        assert second is not first
        assert second.headers["User-Agent"] == "b/2"
        assert second.timeout.connect == 1
        assert not first.is_closed
    finally:
        await http_client.close_shared_client()

    assert first.is_closed
    assert second.is_closed


def test_build_async_client_applies_settings():
    settings = PusherSettings(_env_file=None, http_timeout_seconds=3.5, user_agent="batch/1.0")

    client = http_client.build_async_client(settings, extra_headers={"X-Team": "data"})

    assert client.timeout.connect == 3.5
    assert client.headers["User-Agent"] == "batch/1.0"
    assert client.headers["X-Team"] == "data"


def test_push_sync_uses_and_closes_the_shared_client(monkeypatch, registry, gateway):
    built: list[httpx.AsyncClient] = []

    def fake_builder(settings=None, **_):
        client = httpx.AsyncClient(transport=httpx.MockTransport(gateway))
        built.append(client)
        return client

    monkeypatch.setattr(http_client, "build_async_client", fake_builder)

    push_sync(
        ["http://a:9091", "http://b:9091"],
        "batch1",
        registry=registry,
        settings=PusherSettings(_env_file=None),
    )

    assert len(built) == 1
    assert built[0].is_closed
    assert sorted(gateway.urls()) == ["http://a:9091/job/batch1", "http://b:9091/job/batch1"]
