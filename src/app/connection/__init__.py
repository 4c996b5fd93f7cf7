"""Ciclo de vida da conexão WhatsApp Web.

Exporta o manager, a política de restart e o fan-out de pareamento.
"""

from app.connection.broadcaster import (
    ObserverClosedError,
    ObserverHandle,
    PairingBroadcaster,
)
from app.connection.loop_errors import (
    build_loop_exception_handler,
    install_loop_exception_handler,
)
from app.connection.manager import ConnectionLifecycleManager
from app.connection.models import PairingArtifact, PairingEvent, PairingStatus
from app.connection.restart_policy import (
    TRANSIENT_ERROR_SIGNATURES,
    FailureClass,
    GiveUp,
    RestartCounter,
    RestartDecision,
    RestartPolicy,
    RetryAfter,
    is_transient_transport_error,
)

__all__ = [
    "TRANSIENT_ERROR_SIGNATURES",
    "ConnectionLifecycleManager",
    "FailureClass",
    "GiveUp",
    "ObserverClosedError",
    "ObserverHandle",
    "PairingArtifact",
    "PairingBroadcaster",
    "PairingEvent",
    "PairingStatus",
    "RestartCounter",
    "RestartDecision",
    "RestartPolicy",
    "RetryAfter",
    "build_loop_exception_handler",
    "install_loop_exception_handler",
    "is_transient_transport_error",
]
