"""Endpoints de status do gateway: raiz, liveness, readiness e info."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.routes.dependencies import get_connection_manager

if TYPE_CHECKING:
    from app.connection import ConnectionLifecycleManager
    from app.protocols.session_store import AuthSessionStoreProtocol

logger = logging.getLogger(__name__)

router = APIRouter()

ENDPOINTS: dict[str, str] = {
    "health": "/health",
    "ready": "/ready",
    "info": "/info",
    "qrCode": "/qr",
    "qrStream": "/qr-stream",
    "sessionStatus": "/session-status",
    "sendMessage": "POST /send",
    "resetSession": "POST /reset-session",
    "initialize": "POST /initialize",
}


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: Literal["ready", "not_ready"]
    state: str
    timestamp: str


class RootResponse(HealthResponse):
    """Resposta da raiz com o mapa de endpoints."""

    message: str
    endpoints: dict[str, str]


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


def _status(manager: ConnectionLifecycleManager) -> Literal["ready", "not_ready"]:
    return "ready" if manager.is_ready() else "not_ready"


@router.get("/", response_model=RootResponse)
async def root(
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> RootResponse:
    """Teste de conectividade com a lista de endpoints."""
    return RootResponse(
        message="WhatsApp gateway is running",
        status=_status(manager),
        state=manager.current_state().value,
        timestamp=datetime.now(UTC).isoformat(),
        endpoints=ENDPOINTS,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> HealthResponse:
    """Liveness probe: responde 200 mesmo sem conexão com o WhatsApp."""
    return HealthResponse(
        status=_status(manager),
        state=manager.current_state().value,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: store acessível e conexão em READY."""
    manager = getattr(request.app.state, "connection_manager", None)
    store_check = await _check_store(getattr(request.app.state, "session_store", None))
    if manager is None:
        connection_check = DependencyCheck(status="failed", error="not_configured")
    elif manager.is_ready():
        connection_check = DependencyCheck(status="ok")
    else:
        connection_check = DependencyCheck(status="failed", error=manager.current_state().value)

    ready = store_check.status == "ok" and connection_check.status == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "session_store": store_check.as_dict(),
            "connection": connection_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


@router.get("/info")
async def client_info(
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> JSONResponse:
    """Dados da conta conectada; 500 fora de READY."""
    info = manager.client_info()
    if info is None:
        return JSONResponse(content={"error": "Client not ready"}, status_code=500)
    return JSONResponse(
        content={
            "status": "ready",
            "clientInfo": {
                "wid": info.get("wid"),
                "pushname": info.get("pushname"),
                "platform": info.get("platform"),
            },
        }
    )


async def _check_store(store: AuthSessionStoreProtocol | None) -> DependencyCheck:
    if store is None:
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        ok = await asyncio.wait_for(store.ping(), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_store_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    if not ok:
        return DependencyCheck(status="failed", latency_ms=round(latency_ms, 2), error="ping_failed")
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
