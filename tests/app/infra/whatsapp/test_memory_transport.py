"""Testes do MemoryTransportClient e do carregamento de factories."""

from __future__ import annotations

import pytest

from app.infra.stores import MemoryAuthSessionStore
from app.infra.whatsapp import (
    MemoryTransportClient,
    create_memory_transport,
    load_transport_factory,
)
from app.protocols.transport_client import TransportEvent, TransportOptions
from utils.errors import TransportUnavailableError

OPTIONS = TransportOptions(session_id="RemoteAuth-test")


def _recorder(transport: MemoryTransportClient) -> list[tuple[str, tuple]]:
    events: list[tuple[str, tuple]] = []
    for event in TransportEvent:
        transport.on(event, lambda *args, _event=event: events.append((_event.value, args)))
    return events


class TestMemoryTransportClient:
    @pytest.mark.asyncio
    async def test_start_without_session_emits_qr(self) -> None:
        store = MemoryAuthSessionStore()
        transport = create_memory_transport(store, OPTIONS)
        events = _recorder(transport)

        await transport.start()

        assert [name for name, _ in events] == ["qr"]
        assert events[0][1][0].startswith("2@")
        assert transport.get_info() is None

    @pytest.mark.asyncio
    async def test_complete_pairing_saves_session(self) -> None:
        store = MemoryAuthSessionStore()
        transport = create_memory_transport(store, OPTIONS)
        events = _recorder(transport)
        await transport.start()

        await transport.complete_pairing()

        assert [name for name, _ in events] == [
            "qr",
            "authenticated",
            "ready",
            "remote_session_saved",
        ]
        assert await store.exists("RemoteAuth-test") is True
        assert transport.get_info()["platform"] == "memory"

    @pytest.mark.asyncio
    async def test_start_with_session_restores(self) -> None:
        store = MemoryAuthSessionStore()
        await store.save("RemoteAuth-test", b"blob")
        transport = create_memory_transport(store, OPTIONS)
        events = _recorder(transport)

        await transport.start()

        assert [name for name, _ in events] == [
            "remote_session_loaded",
            "authenticated",
            "ready",
        ]

    @pytest.mark.asyncio
    async def test_send_and_registered_users(self) -> None:
        transport = MemoryTransportClient(
            MemoryAuthSessionStore(),
            OPTIONS,
            registered_users={"923001234567@c.us"},
        )

        assert await transport.is_registered_user("923001234567@c.us") is True
        assert await transport.is_registered_user("15551234567@c.us") is False

        await transport.send_message("923001234567@c.us", "hi")
        assert transport.sent == [("923001234567@c.us", "hi")]

        transport.send_error = RuntimeError("rate limit")
        with pytest.raises(RuntimeError):
            await transport.send_message("923001234567@c.us", "hi")

    @pytest.mark.asyncio
    async def test_stop(self) -> None:
        transport = create_memory_transport(MemoryAuthSessionStore(), OPTIONS)
        transport.emit(TransportEvent.READY)
        await transport.stop()
        assert transport.stopped is True
        assert transport.get_info() is None


class TestLoadTransportFactory:
    def test_memory_backend(self) -> None:
        assert load_transport_factory("memory") is create_memory_transport

    def test_dotted_path(self) -> None:
        factory = load_transport_factory("app.infra.whatsapp.memory_transport:create_memory_transport")
        assert factory is create_memory_transport

    @pytest.mark.parametrize("backend", ["puppeteer", "module:", ":callable"])
    def test_invalid_format(self, backend: str) -> None:
        with pytest.raises(ValueError):
            load_transport_factory(backend)

    def test_missing_module(self) -> None:
        with pytest.raises(TransportUnavailableError):
            load_transport_factory("nonexistent_transport_pkg.client:build")

    def test_missing_attribute(self) -> None:
        with pytest.raises(TransportUnavailableError):
            load_transport_factory("app.infra.whatsapp.memory_transport:does_not_exist")
