"""Testes do stream SSE de pareamento e da página do QR."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from api.routes.qr.router import qr_page
from api.routes.qr.sse import format_sse_comment, format_sse_event, pairing_event_stream
from app.protocols.transport_client import TransportEvent
from tests.fakes.fake_gateway import GatewayHarness


def _decode(chunk: str) -> dict[str, object]:
    assert chunk.startswith("data: ")
    assert chunk.endswith("\n\n")
    return json.loads(chunk[len("data: "):].strip())


def test_format_sse_event_prefixes_every_line() -> None:
    assert format_sse_event("a\nb") == "data: a\ndata: b\n\n"
    assert format_sse_event({"status": "ready"}) == 'data: {"status": "ready"}\n\n'


def test_format_sse_comment() -> None:
    assert format_sse_comment("keepalive") == ": keepalive\n\n"


@pytest.mark.asyncio
async def test_stream_starts_with_snapshot_then_relays_pairing_codes() -> None:
    harness = GatewayHarness()
    transport = await harness.start()
    stream = pairing_event_stream(
        harness.manager, AsyncMock(return_value=False), keepalive_seconds=1.0
    )

    first = _decode(await stream.__anext__())
    assert first["status"] == "checking_session"
    assert first["qr"] is None
    assert harness.manager.broadcaster.observer_count == 1

    transport.emit(TransportEvent.QR, "code-1")
    second = _decode(await stream.__anext__())
    assert second["status"] == "qr_ready"
    assert second["qr"] == "data:image/png;base64,code-1"

    await stream.aclose()
    assert harness.manager.broadcaster.observer_count == 0


@pytest.mark.asyncio
async def test_stream_sends_keepalive_when_idle() -> None:
    harness = GatewayHarness()
    stream = pairing_event_stream(
        harness.manager, AsyncMock(return_value=False), keepalive_seconds=0.01
    )

    await stream.__anext__()
    assert await stream.__anext__() == ": keepalive\n\n"

    await stream.aclose()


@pytest.mark.asyncio
async def test_stream_ends_when_client_disconnects() -> None:
    harness = GatewayHarness()
    is_disconnected = AsyncMock(return_value=True)

    chunks = [
        chunk
        async for chunk in pairing_event_stream(
            harness.manager, is_disconnected, keepalive_seconds=1.0
        )
    ]

    assert len(chunks) == 1
    assert harness.manager.broadcaster.observer_count == 0


@pytest.mark.asyncio
async def test_stream_ends_when_broadcaster_closes() -> None:
    harness = GatewayHarness()
    stream = pairing_event_stream(
        harness.manager, AsyncMock(return_value=False), keepalive_seconds=1.0
    )
    await stream.__anext__()

    harness.manager.broadcaster.close()

    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()


@pytest.mark.asyncio
async def test_qr_page_consumes_stream() -> None:
    response = await qr_page()

    assert response.status_code == 200
    assert b'new EventSource("/qr-stream")' in response.body
