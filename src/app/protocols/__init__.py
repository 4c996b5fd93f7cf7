"""Protocolos e contratos do core da aplicação."""

from .connection import ConnectionReaderProtocol
from .normalizer import PhoneNormalizerProtocol
from .session_store import AuthSessionStoreProtocol
from .transport_client import (
    CONFLICT_STATES,
    TransportClientProtocol,
    TransportEvent,
    TransportFactory,
    TransportOptions,
)

__all__ = [
    "CONFLICT_STATES",
    "AuthSessionStoreProtocol",
    "ConnectionReaderProtocol",
    "PhoneNormalizerProtocol",
    "TransportClientProtocol",
    "TransportEvent",
    "TransportFactory",
    "TransportOptions",
]
