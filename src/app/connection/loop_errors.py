"""Handler de exceções não tratadas do event loop.

Erros de protocolo do transport que escapam das tasks viram erro de
inicialização transitório no manager; destruição de contexto de
execução é ruído de navegação do navegador headless.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import asyncio

    from app.connection.manager import ConnectionLifecycleManager

logger = logging.getLogger(__name__)

PROTOCOL_ERROR_SIGNATURE = "Protocol error"
NAVIGATION_NOISE_SIGNATURE = "Execution context was destroyed"


def build_loop_exception_handler(manager: ConnectionLifecycleManager):
    """Cria o handler para `loop.set_exception_handler`."""

    def _handle(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        message = str(exc) if exc is not None else str(context.get("message", ""))

        if NAVIGATION_NOISE_SIGNATURE in message:
            logger.info("navigation_noise_ignored", extra={"error": message})
            return

        if PROTOCOL_ERROR_SIGNATURE in message:
            logger.warning("unhandled_protocol_error", extra={"error": message})
            manager.on_initialization_error(exc if exc is not None else message)
            return

        logger.error(
            "unhandled_loop_exception",
            extra={"error": message, "error_type": type(exc).__name__ if exc else None},
            exc_info=exc,
        )

    return _handle


def install_loop_exception_handler(
    manager: ConnectionLifecycleManager,
    loop: asyncio.AbstractEventLoop,
) -> None:
    loop.set_exception_handler(build_loop_exception_handler(manager))
