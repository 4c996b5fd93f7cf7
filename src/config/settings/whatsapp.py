"""Settings específicas do canal WhatsApp Web.

Política de reconexão, transport, normalização de telefone e
fan-out de eventos de pareamento.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

# Sufixo de endereço de contato individual no WhatsApp Web
CONTACT_ADDRESS_SUFFIX: str = "@c.us"

# Teto de tentativas de restart sem passar por READY
DEFAULT_RESTART_CEILING: int = 5


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp Web.

    Attributes:
        restart_ceiling: Máximo de restarts automáticos consecutivos
        transient_retry_delay_seconds: Atraso após erro transitório do transport
        logout_retry_delay_seconds: Atraso após desconexão/logout
        conflict_retry_delay_seconds: Atraso após CONFLICT/UNPAIRED
        default_phone_region: Região padrão (ISO 3166) para números sem DDI
        recipient_suffix: Sufixo do endereço de destino no transport
        transport_backend: "memory" ou caminho "modulo:callable" da factory
        observer_queue_size: Capacidade da fila de cada observer do QR stream
        sse_keepalive_seconds: Intervalo de keepalive do stream SSE
        backup_sync_interval_ms: Intervalo de backup do blob de sessão
        print_qr_terminal: Renderiza o QR em ASCII no log (headless)
    """

    # Política de restart
    restart_ceiling: int = DEFAULT_RESTART_CEILING
    transient_retry_delay_seconds: float = 10.0
    logout_retry_delay_seconds: float = 5.0
    conflict_retry_delay_seconds: float = 10.0

    # Envio
    default_phone_region: str = "PK"
    recipient_suffix: str = CONTACT_ADDRESS_SUFFIX

    # Transport
    transport_backend: str = "memory"
    backup_sync_interval_ms: int = 300_000  # 5 min

    # Fan-out de pareamento
    observer_queue_size: int = 16
    sse_keepalive_seconds: float = 15.0
    print_qr_terminal: bool = False

    def validate(self, base: BaseSettings | None = None) -> list[str]:
        """Valida configurações mínimas do canal.

        Args:
            base: BaseSettings para regras dependentes de ambiente.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.restart_ceiling < 0:
            errors.append("GATEWAY_RESTART_CEILING deve ser >= 0")

        for name, value in (
            ("GATEWAY_TRANSIENT_RETRY_DELAY_SECONDS", self.transient_retry_delay_seconds),
            ("GATEWAY_LOGOUT_RETRY_DELAY_SECONDS", self.logout_retry_delay_seconds),
            ("GATEWAY_CONFLICT_RETRY_DELAY_SECONDS", self.conflict_retry_delay_seconds),
        ):
            if value < 0:
                errors.append(f"{name} deve ser >= 0")

        if len(self.default_phone_region) != 2 or not self.default_phone_region.isalpha():
            errors.append(
                f"GATEWAY_DEFAULT_PHONE_REGION inválida: {self.default_phone_region}"
            )

        if not self.recipient_suffix.startswith("@"):
            errors.append("GATEWAY_RECIPIENT_SUFFIX deve começar com '@'")

        if self.transport_backend != "memory" and ":" not in self.transport_backend:
            errors.append(
                "GATEWAY_TRANSPORT_BACKEND deve ser 'memory' ou 'modulo:callable'"
            )

        if self.transport_backend == "memory" and base is not None and not base.is_development:
            errors.append("GATEWAY_TRANSPORT_BACKEND=memory proibido em staging/production")

        if self.observer_queue_size < 1:
            errors.append("GATEWAY_OBSERVER_QUEUE_SIZE deve ser >= 1")

        if self.sse_keepalive_seconds <= 0:
            errors.append("GATEWAY_SSE_KEEPALIVE_SECONDS deve ser > 0")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        restart_ceiling=int(
            os.getenv("GATEWAY_RESTART_CEILING", str(DEFAULT_RESTART_CEILING))
        ),
        transient_retry_delay_seconds=float(
            os.getenv("GATEWAY_TRANSIENT_RETRY_DELAY_SECONDS", "10")
        ),
        logout_retry_delay_seconds=float(
            os.getenv("GATEWAY_LOGOUT_RETRY_DELAY_SECONDS", "5")
        ),
        conflict_retry_delay_seconds=float(
            os.getenv("GATEWAY_CONFLICT_RETRY_DELAY_SECONDS", "10")
        ),
        default_phone_region=os.getenv("GATEWAY_DEFAULT_PHONE_REGION", "PK").upper(),
        recipient_suffix=os.getenv("GATEWAY_RECIPIENT_SUFFIX", CONTACT_ADDRESS_SUFFIX),
        transport_backend=os.getenv("GATEWAY_TRANSPORT_BACKEND", "memory"),
        backup_sync_interval_ms=int(
            os.getenv("GATEWAY_BACKUP_SYNC_INTERVAL_MS", "300000")
        ),
        observer_queue_size=int(os.getenv("GATEWAY_OBSERVER_QUEUE_SIZE", "16")),
        sse_keepalive_seconds=float(os.getenv("GATEWAY_SSE_KEEPALIVE_SECONDS", "15")),
        print_qr_terminal=os.getenv("GATEWAY_PRINT_QR_TERMINAL", "").lower()
        in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
