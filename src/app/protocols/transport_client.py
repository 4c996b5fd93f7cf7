"""Protocolo do transport client do WhatsApp Web.

O transport mantém a sessão de rede com o WhatsApp (navegador
headless, protocolo de socket, sidecar...). O gateway não conhece o
protocolo de fio: apenas constrói o transport, registra handlers de
eventos, inicia o handshake e usa as capacidades de envio.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from .session_store import AuthSessionStoreProtocol


class TransportEvent(StrEnum):
    """Eventos emitidos pelo transport (nomes do WhatsApp Web)."""

    QR = "qr"
    REMOTE_SESSION_SAVED = "remote_session_saved"
    REMOTE_SESSION_LOADED = "remote_session_loaded"
    REMOTE_SESSION_FAILED = "remote_session_failed"
    AUTHENTICATED = "authenticated"
    AUTH_FAILURE = "auth_failure"
    READY = "ready"
    DISCONNECTED = "disconnected"
    CHANGE_STATE = "change_state"
    LOADING_SCREEN = "loading_screen"


# Estados reportados em CHANGE_STATE que exigem restart
CONFLICT_STATES = frozenset({"CONFLICT", "UNPAIRED"})


@dataclass(frozen=True, slots=True)
class TransportOptions:
    """Opções de construção do transport.

    Attributes:
        session_id: Chave do blob de sessão no store
        backup_sync_interval_ms: Intervalo de backup do blob no store
    """

    session_id: str
    backup_sync_interval_ms: int = 300_000


class TransportClientProtocol(Protocol):
    """Contrato mínimo do transport client.

    Handlers registrados via `on` são síncronos e não devem ser
    aguardados pelo transport.
    """

    def on(self, event: TransportEvent, handler: Callable[..., None]) -> None:
        """Registra `handler` para `event`.

        O handler pode ser chamado de qualquer thread; o manager o
        reenfileira no event loop quando necessário.
        """
        ...

    async def start(self) -> None:
        """Inicia o handshake; eventos reportam o progresso."""
        ...

    async def stop(self) -> None: ...

    async def is_registered_user(self, address: str) -> bool: ...

    async def send_message(self, address: str, body: str) -> Any: ...

    def get_info(self) -> dict[str, Any] | None:
        """Dados da conta conectada (wid, pushname, platform) ou None."""
        ...


class TransportFactory(Protocol):
    """Constrói um transport vinculado ao store de sessão."""

    def __call__(
        self,
        store: AuthSessionStoreProtocol,
        options: TransportOptions,
    ) -> TransportClientProtocol: ...
