"""Protocolo de leitura do estado da conexão (usado pelo envio)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .transport_client import TransportClientProtocol


class ConnectionReaderProtocol(Protocol):
    """Visão somente leitura do ConnectionLifecycleManager."""

    def is_ready(self) -> bool: ...

    @property
    def transport(self) -> TransportClientProtocol | None: ...
