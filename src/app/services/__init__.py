"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.message_dispatcher import (
    MessageDispatcher,
    SendOutcome,
    SendStatus,
    classify_send_error,
)

__all__ = [
    "MessageDispatcher",
    "SendOutcome",
    "SendStatus",
    "classify_send_error",
]
