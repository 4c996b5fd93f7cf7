"""Entrypoint do gateway WhatsApp Web.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import (
    create_connection_manager,
    create_message_dispatcher,
    create_session_store,
)
from app.connection import install_loop_exception_handler
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

CORRELATION_HEADER = "x-correlation-id"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria store, manager e dispatcher
    - Dispara a inicialização do transport (sem aguardar o handshake)

    Shutdown:
    - Cancela restart pendente e encerra o transport
    - Fecha observers e conexões
    """
    logger.info("app_starting", extra={"service": "wa-gateway"})
    validate_runtime_settings()

    store = create_session_store()
    manager = create_connection_manager()
    app.state.session_store = store
    app.state.connection_manager = manager
    app.state.message_dispatcher = create_message_dispatcher(manager)

    install_loop_exception_handler(manager, asyncio.get_running_loop())
    manager.initialize(store)

    yield

    logger.info("app_shutting_down", extra={"service": "wa-gateway"})
    await manager.shutdown()
    await store.close()


async def correlation_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga `x-correlation-id` para os logs da requisição."""
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
    finally:
        reset_correlation_id(token)


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="wa-gateway",
        description="Gateway HTTP para envio de mensagens pelo WhatsApp Web",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.middleware("http")(correlation_id_middleware)

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "wa-gateway"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    port = get_base_settings().port
    logger.info("starting_dev_server", extra={"port": port})
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=port,
        reload=True,
    )


if __name__ == "__main__":
    main()
