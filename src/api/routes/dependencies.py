"""Acesso aos componentes do gateway registrados em `app.state`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, Request

if TYPE_CHECKING:
    from app.connection import ConnectionLifecycleManager
    from app.services.message_dispatcher import MessageDispatcher


def get_connection_manager(request: Request) -> ConnectionLifecycleManager:
    manager = getattr(request.app.state, "connection_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="connection manager not initialized")
    return manager


def get_message_dispatcher(request: Request) -> MessageDispatcher:
    dispatcher = getattr(request.app.state, "message_dispatcher", None)
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="message dispatcher not initialized")
    return dispatcher
