"""Testes do MessageDispatcher (validação, pré-checagem e classificação)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.services.message_dispatcher import (
    MessageDispatcher,
    SendOutcome,
    SendStatus,
    classify_send_error,
)


class FakeNormalizer:
    """Aceita apenas dígitos; devolve o próprio valor."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def normalize(self, raw_phone: str) -> str | None:
        self.calls.append(raw_phone)
        return raw_phone if raw_phone.isdigit() else None


class FakeConnection:
    def __init__(self, *, ready: bool = True) -> None:
        self.ready = ready
        self.transport = MagicMock()
        self.transport.is_registered_user = AsyncMock(return_value=True)
        self.transport.send_message = AsyncMock(return_value={"id": "1"})

    def is_ready(self) -> bool:
        return self.ready


def _dispatcher(connection: FakeConnection) -> MessageDispatcher:
    return MessageDispatcher(connection, FakeNormalizer())


@pytest.mark.asyncio
async def test_sends_trimmed_body_to_contact_address() -> None:
    connection = FakeConnection()

    outcome = await _dispatcher(connection).send("15551234567", "  hi there  ")

    assert outcome.status == SendStatus.SENT
    assert outcome.sent is True
    connection.transport.is_registered_user.assert_awaited_once_with("15551234567@c.us")
    connection.transport.send_message.assert_awaited_once_with("15551234567@c.us", "hi there")
    assert outcome.to_response() == {
        "status": "sent",
        "message": "Message sent successfully",
        "sent": True,
        "mobileNumber": "15551234567",
        "exists": True,
    }


@pytest.mark.asyncio
async def test_not_ready_never_touches_transport() -> None:
    connection = FakeConnection(ready=False)

    outcome = await _dispatcher(connection).send("15551234567", "hi")

    assert outcome.status == SendStatus.NOT_READY
    connection.transport.is_registered_user.assert_not_awaited()
    connection.transport.send_message.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("phone", "body"),
    [("", "hi"), ("   ", "hi"), (None, "hi"), ("15551234567", ""), ("15551234567", "   ")],
)
async def test_blank_input_is_invalid(phone: str | None, body: str) -> None:
    connection = FakeConnection()

    outcome = await _dispatcher(connection).send(phone, body)

    assert outcome.status == SendStatus.INVALID_INPUT
    connection.transport.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_unparseable_phone_is_invalid_phone() -> None:
    connection = FakeConnection()

    outcome = await _dispatcher(connection).send("not-a-number", "hi")

    assert outcome.status == SendStatus.INVALID_PHONE
    connection.transport.is_registered_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_unregistered_recipient_is_skipped_without_send() -> None:
    connection = FakeConnection()
    connection.transport.is_registered_user.return_value = False

    outcome = await _dispatcher(connection).send("15551234567", "hi")

    assert outcome.status == SendStatus.SKIPPED
    assert outcome.exists is False
    connection.transport.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_existence_check_error_is_skipped() -> None:
    connection = FakeConnection()
    connection.transport.is_registered_user.side_effect = RuntimeError("Evaluation failed")

    outcome = await _dispatcher(connection).send("15551234567", "hi")

    assert outcome.status == SendStatus.SKIPPED
    connection.transport.send_message.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "status"),
    [
        (RuntimeError("Rate limit exceeded"), SendStatus.RATE_LIMITED),
        (RuntimeError("too many requests"), SendStatus.RATE_LIMITED),
        (RuntimeError("phone number is not registered"), SendStatus.SKIPPED),
        (RuntimeError("The number does not exist"), SendStatus.SKIPPED),
        (RuntimeError("Evaluation failed: t"), SendStatus.FAILED),
    ],
)
async def test_send_errors_are_classified(error: Exception, status: SendStatus) -> None:
    connection = FakeConnection()
    connection.transport.send_message.side_effect = error

    outcome = await _dispatcher(connection).send("15551234567", "hi")

    assert outcome.status == status
    assert outcome.number == "15551234567"


def test_failed_outcome_keeps_error_message() -> None:
    outcome = classify_send_error(RuntimeError("Evaluation failed: t"), "15551234567")

    assert outcome.status == SendStatus.FAILED
    body = outcome.to_response()
    assert body["error"] == "Evaluation failed: t"
    assert body["sent"] is False
    assert body["exists"] is True


def test_rate_limited_response_shape() -> None:
    body = classify_send_error(RuntimeError("rate limit"), "15551234567").to_response()
    assert body == {
        "status": "rate_limited",
        "message": "Rate limited, try again later",
        "sent": False,
        "mobileNumber": "15551234567",
        "exists": True,
        "error": "Rate limited",
    }


def test_outcome_without_number_omits_optional_keys() -> None:
    body = SendOutcome(status=SendStatus.NOT_READY, message="WhatsApp client not ready").to_response()
    assert body == {"status": "not_ready", "message": "WhatsApp client not ready", "sent": False}
