"""
Exports públicos do módulo fsm/states.

Estados canônicos da conexão com o WhatsApp Web.
"""

from fsm.states.connection import (
    DEFAULT_INITIAL_STATE,
    HANDSHAKE_STATES,
    RESTARTABLE_STATES,
    ConnectionState,
    is_restartable,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "HANDSHAKE_STATES",
    "RESTARTABLE_STATES",
    "ConnectionState",
    "is_restartable",
]
