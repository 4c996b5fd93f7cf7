"""Factories de componentes: stores, transport, manager e dispatcher.

Este módulo centraliza a criação de implementações concretas a
partir das configurações de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client
from app.connection import ConnectionLifecycleManager
from app.infra.stores import MemoryAuthSessionStore, RedisAuthSessionStore
from app.infra.whatsapp import LibPhoneNumberNormalizer, load_transport_factory
from app.services.message_dispatcher import MessageDispatcher
from config.settings import (
    get_base_settings,
    get_session_settings,
    get_whatsapp_settings,
)

if TYPE_CHECKING:
    from app.protocols.session_store import AuthSessionStoreProtocol
    from config.settings import BaseSettings, SessionSettings, WhatsAppSettings

logger = logging.getLogger(__name__)


def create_session_store(
    session_settings: SessionSettings | None = None,
    base_settings: BaseSettings | None = None,
) -> AuthSessionStoreProtocol:
    """Cria store do blob de sessão baseado na configuração."""
    session_settings = session_settings or get_session_settings()
    base_settings = base_settings or get_base_settings()
    backend = session_settings.store_backend

    if backend == "redis":
        store = RedisAuthSessionStore(
            create_async_redis_client(),
            key_prefix=session_settings.key_prefix,
        )
        logger.info("session_store_created", extra={"backend": "redis"})
        return store

    if backend == "memory":
        if not base_settings.is_development:
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": base_settings.environment},
            )
        logger.info("session_store_created", extra={"backend": "memory"})
        return MemoryAuthSessionStore()

    msg = f"SESSION_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_connection_manager(
    whatsapp_settings: WhatsAppSettings | None = None,
    session_settings: SessionSettings | None = None,
) -> ConnectionLifecycleManager:
    """Cria o manager com a factory de transport configurada."""
    whatsapp_settings = whatsapp_settings or get_whatsapp_settings()
    session_settings = session_settings or get_session_settings()
    return ConnectionLifecycleManager(
        load_transport_factory(whatsapp_settings.transport_backend),
        session_id=session_settings.session_id,
        settings=whatsapp_settings,
    )


def create_message_dispatcher(
    manager: ConnectionLifecycleManager,
    whatsapp_settings: WhatsAppSettings | None = None,
) -> MessageDispatcher:
    """Cria o dispatcher de envio ligado ao manager."""
    whatsapp_settings = whatsapp_settings or get_whatsapp_settings()
    return MessageDispatcher(
        manager,
        LibPhoneNumberNormalizer(whatsapp_settings.default_phone_region),
        recipient_suffix=whatsapp_settings.recipient_suffix,
    )
