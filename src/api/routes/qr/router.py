"""Endpoints de pareamento: página do QR e stream SSE."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, StreamingResponse

from api.routes.dependencies import get_connection_manager
from api.routes.qr.page import QR_PAGE_HTML
from api.routes.qr.sse import SSE_HEADERS, pairing_event_stream
from config.settings import get_whatsapp_settings

if TYPE_CHECKING:
    from app.connection import ConnectionLifecycleManager

router = APIRouter()


@router.get("/qr", response_class=HTMLResponse)
async def qr_page() -> HTMLResponse:
    """Visualizador do QR de pareamento."""
    return HTMLResponse(content=QR_PAGE_HTML)


@router.get("/qr-stream")
async def qr_stream(
    request: Request,
    manager: ConnectionLifecycleManager = Depends(get_connection_manager),
) -> StreamingResponse:
    """Stream SSE de `{status, qr, timestamp}`."""
    return StreamingResponse(
        pairing_event_stream(
            manager,
            request.is_disconnected,
            keepalive_seconds=get_whatsapp_settings().sse_keepalive_seconds,
        ),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
