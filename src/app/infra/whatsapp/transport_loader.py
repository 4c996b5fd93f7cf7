"""Resolve a TransportFactory configurada em GATEWAY_TRANSPORT_BACKEND."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from app.infra.whatsapp.memory_transport import create_memory_transport
from utils.errors import TransportUnavailableError

if TYPE_CHECKING:
    from app.protocols.transport_client import TransportFactory

logger = logging.getLogger(__name__)

MEMORY_BACKEND = "memory"


def load_transport_factory(backend: str) -> TransportFactory:
    """Retorna a factory para `memory` ou para um caminho `modulo:callable`.

    Raises:
        ValueError: Formato inválido
        TransportUnavailableError: Módulo/atributo não encontrado
    """
    backend = backend.strip()
    if backend == MEMORY_BACKEND:
        logger.info("transport_factory_loaded", extra={"backend": MEMORY_BACKEND})
        return create_memory_transport

    module_name, sep, attr = backend.partition(":")
    if not sep or not module_name or not attr:
        msg = f"GATEWAY_TRANSPORT_BACKEND inválido: {backend!r}"
        raise ValueError(msg)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise TransportUnavailableError(f"Módulo de transport não encontrado: {module_name}") from exc

    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise TransportUnavailableError(f"Factory de transport inválida: {backend}")

    logger.info("transport_factory_loaded", extra={"backend": backend})
    return factory
