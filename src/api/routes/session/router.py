"""Endpoints da sessão de autenticação e reinicialização manual."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.routes.dependencies import get_connection_manager
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from app.connection import ConnectionLifecycleManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/session-status")
async def session_status(
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    """Estado do store e da conexão."""
    store = manager.store
    store_connected = False
    session_exists = False
    if store is not None:
        store_connected = await store.ping()
        if store_connected:
            try:
                session_exists = await manager.session_exists()
            except InfrastructureError as exc:
                logger.warning(
                    "session_status_store_failed",
                    extra={"error_type": type(exc).__name__},
                )
                store_connected = False

    return {
        "storeConnected": store_connected,
        "storeInitialized": store is not None,
        "clientReady": manager.is_ready(),
        "sessionExists": session_exists,
        "state": manager.current_state().value,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.post("/reset-session")
async def reset_session(
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> JSONResponse:
    """Apaga o blob de sessão; o próximo handshake exige novo QR."""
    if manager.store is None:
        return JSONResponse(content={"error": "Session store not initialized"}, status_code=500)
    try:
        deleted = await manager.reset_session()
    except InfrastructureError as exc:
        logger.error("session_reset_failed", extra={"error_type": type(exc).__name__})
        return JSONResponse(content={"error": "Failed to reset session"}, status_code=500)
    return JSONResponse(
        content={
            "message": "Session reset successfully. Restart the client to pair again.",
            "deleted": deleted,
        }
    )


@router.post("/initialize")
async def initialize(
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> JSONResponse:
    """Reinicialização manual (após FAILED ou teto de restarts)."""
    started = manager.initialize(manager.store)
    state = manager.current_state().value
    if not started:
        return JSONResponse(
            content={"initialized": False, "state": state},
            status_code=409,
        )
    return JSONResponse(content={"initialized": True, "state": state}, status_code=202)
