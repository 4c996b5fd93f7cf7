"""Transport em memória: apenas para desenvolvimento e testes.

Simula o handshake do WhatsApp Web: sem blob salvo emite um QR; com
blob restaura a sessão e chega a READY. `complete_pairing()` simula a
leitura do QR no celular. Todos os eventos podem ser emitidos à mão.

ATENÇÃO: Não envia mensagens reais.
"""

from __future__ import annotations

import logging
import secrets
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from app.protocols.transport_client import TransportEvent, TransportOptions

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.session_store import AuthSessionStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_INFO: dict[str, Any] = {
    "wid": "000000000000@c.us",
    "pushname": "wa-gateway (memory)",
    "platform": "memory",
}


class MemoryTransportClient:
    """Transport scriptável em processo.

    Args:
        store: Store do blob de sessão
        options: Opções de construção
        auto_handshake: Emite QR/restauração em `start()`
        registered_users: Endereços existentes (None = todos existem)
        account_info: Retorno de `get_info()` após READY
    """

    def __init__(
        self,
        store: AuthSessionStoreProtocol,
        options: TransportOptions,
        *,
        auto_handshake: bool = True,
        registered_users: set[str] | None = None,
        account_info: dict[str, Any] | None = None,
    ) -> None:
        self._store = store
        self._options = options
        self._handlers: dict[TransportEvent, list[Callable[..., None]]] = defaultdict(list)
        self._auto_handshake = auto_handshake
        self._account_info = dict(account_info or DEFAULT_ACCOUNT_INFO)
        self._ready = False
        self.registered_users = registered_users
        self.sent: list[tuple[str, str]] = []
        self.start_error: BaseException | None = None
        self.send_error: BaseException | None = None
        self.check_error: BaseException | None = None
        self.started = False
        self.stopped = False

    @property
    def options(self) -> TransportOptions:
        return self._options

    def on(self, event: TransportEvent, handler: Callable[..., None]) -> None:
        self._handlers[TransportEvent(event)].append(handler)

    def emit(self, event: TransportEvent, *args: Any) -> None:
        """Dispara `event` para os handlers registrados."""
        event = TransportEvent(event)
        if event == TransportEvent.READY:
            self._ready = True
        elif event in (TransportEvent.DISCONNECTED, TransportEvent.AUTH_FAILURE):
            self._ready = False
        for handler in list(self._handlers.get(event, ())):
            handler(*args)

    async def start(self) -> None:
        self.started = True
        if self.start_error is not None:
            raise self.start_error
        if not self._auto_handshake:
            return

        if await self._store.exists(self._options.session_id):
            logger.info("memory_transport_session_restored")
            self.emit(TransportEvent.REMOTE_SESSION_LOADED)
            self.emit(TransportEvent.AUTHENTICATED)
            self.emit(TransportEvent.READY)
            return

        self.emit(TransportEvent.QR, self.new_pairing_code())

    async def complete_pairing(self) -> None:
        """Simula a leitura do QR: autentica, salva o blob e fica READY."""
        self.emit(TransportEvent.AUTHENTICATED)
        self.emit(TransportEvent.READY)
        await self._store.save(self._options.session_id, secrets.token_bytes(32))
        self.emit(TransportEvent.REMOTE_SESSION_SAVED)

    async def stop(self) -> None:
        self.stopped = True
        self._ready = False

    async def is_registered_user(self, address: str) -> bool:
        if self.check_error is not None:
            raise self.check_error
        if self.registered_users is None:
            return True
        return address in self.registered_users

    async def send_message(self, address: str, body: str) -> dict[str, Any]:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((address, body))
        return {"id": f"memory-{len(self.sent)}", "to": address}

    def get_info(self) -> dict[str, Any] | None:
        return dict(self._account_info) if self._ready else None

    @staticmethod
    def new_pairing_code() -> str:
        return f"2@{secrets.token_urlsafe(24)},{secrets.token_urlsafe(16)}"


def create_memory_transport(
    store: AuthSessionStoreProtocol,
    options: TransportOptions,
) -> MemoryTransportClient:
    """TransportFactory do backend `memory`."""
    return MemoryTransportClient(store, options)
