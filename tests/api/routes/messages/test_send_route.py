"""Testes do endpoint POST /send."""

from __future__ import annotations

import pytest

from api.routes.messages.router import SendMessageRequest, send_message
from app.infra.whatsapp import LibPhoneNumberNormalizer
from app.services.message_dispatcher import MessageDispatcher
from tests.fakes.fake_gateway import GatewayHarness


def _dispatcher(harness: GatewayHarness) -> MessageDispatcher:
    return MessageDispatcher(harness.manager, LibPhoneNumberNormalizer(default_region="PK"))


@pytest.mark.asyncio
async def test_send_returns_not_ready_before_connection() -> None:
    harness = GatewayHarness()

    body = await send_message(
        SendMessageRequest(phone="03001234567", message="oi"), _dispatcher(harness)
    )

    assert body["status"] == "not_ready"
    assert body["sent"] is False


@pytest.mark.asyncio
async def test_send_delivers_when_ready() -> None:
    harness = GatewayHarness()
    transport = await harness.to_ready()

    body = await send_message(
        SendMessageRequest(phone="03001234567", message="oi"), _dispatcher(harness)
    )

    assert body["status"] == "sent"
    assert body["sent"] is True
    assert body["mobileNumber"] == "923001234567"
    assert transport.sent == [("923001234567@c.us", "oi")]


@pytest.mark.asyncio
async def test_send_accepts_numeric_phone() -> None:
    harness = GatewayHarness()
    await harness.to_ready()

    body = await send_message(
        SendMessageRequest(phone=923001234567, message="oi"), _dispatcher(harness)
    )

    assert body["status"] == "sent"


@pytest.mark.asyncio
async def test_send_rejects_missing_fields() -> None:
    harness = GatewayHarness()
    await harness.to_ready()

    body = await send_message(SendMessageRequest(phone=None, message="oi"), _dispatcher(harness))

    assert body["status"] == "invalid_input"
    assert body["sent"] is False


@pytest.mark.asyncio
async def test_send_classifies_unexpected_json_types() -> None:
    harness = GatewayHarness()
    transport = await harness.to_ready()
    dispatcher = _dispatcher(harness)

    bad_phone = await send_message(
        SendMessageRequest(phone={"number": "x"}, message="oi"), dispatcher
    )
    blank_message = await send_message(
        SendMessageRequest(phone="03001234567", message=None), dispatcher
    )

    assert bad_phone["status"] == "invalid_phone"
    assert blank_message["status"] == "invalid_input"
    assert transport.sent == []
