"""Modelos do ciclo de vida da conexão: artefato de pareamento e eventos.

Eventos de pareamento são o payload empurrado aos observers do
QR stream: `{"status", "qr", "timestamp"}`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class PairingStatus(StrEnum):
    """Status publicados no QR stream (valores do wire)."""

    CHECKING_SESSION = "checking_session"
    PAIRING_READY = "qr_ready"
    SESSION_LOADED = "session_loaded"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    AUTH_FAILURE = "auth_failure"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class PairingArtifact:
    """Código de pareamento corrente e sua imagem renderizada.

    Attributes:
        raw_code: Conteúdo do QR emitido pelo transport (opaco)
        rendered_image: Data URL PNG (`data:image/png;base64,...`) ou None
        issued_at: Momento de emissão (UTC)
    """

    raw_code: str
    rendered_image: str | None = None
    issued_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True)
class PairingEvent:
    """Evento de ciclo de vida entregue aos observers."""

    status: PairingStatus
    pairing: PairingArtifact | None = None
    timestamp: datetime = field(default_factory=_utcnow)

    def to_payload(self) -> dict[str, Any]:
        """Serializa no formato do QR stream."""
        return {
            "status": self.status.value,
            "qr": self.pairing.rendered_image if self.pairing else None,
            "timestamp": self.timestamp.isoformat(),
        }
