"""Agregador de rotas: registra todos os routers do gateway.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.messages.router import router as messages_router
from api.routes.qr.router import router as qr_router
from api.routes.session.router import router as session_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Status (/, /health, /ready, /info na raiz)
    api_router.include_router(health_router, tags=["health"])

    # Pareamento
    api_router.include_router(qr_router, tags=["pairing"])

    # Envio
    api_router.include_router(messages_router, tags=["messages"])

    # Sessão
    api_router.include_router(session_router, tags=["session"])

    return api_router
