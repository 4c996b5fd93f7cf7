"""Rotas HTTP do gateway.

Responsabilidades:
- Definir endpoints HTTP (status, pareamento, envio, sessão)
- Validação inicial de request
- Delegação para o ConnectionLifecycleManager e o MessageDispatcher

Estrutura:
- routes/health/: raiz, liveness, readiness, info
- routes/qr/: página do QR e stream SSE
- routes/messages/: POST /send
- routes/session/: status/reset da sessão e initialize manual

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
