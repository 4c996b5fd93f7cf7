"""Stores em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import logging

from app.protocols.session_store import AuthSessionStoreProtocol

logger = logging.getLogger(__name__)


class MemoryAuthSessionStore(AuthSessionStoreProtocol):
    """Store de sessão em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}

    async def exists(self, session_id: str) -> bool:
        return session_id in self._store

    async def save(self, session_id: str, blob: bytes) -> None:
        self._store[session_id] = bytes(blob)
        logger.debug("auth_session_saved", extra={"session_id": session_id, "size": len(blob)})

    async def extract(self, session_id: str) -> bytes | None:
        return self._store.get(session_id)

    async def delete(self, session_id: str) -> bool:
        found = self._store.pop(session_id, None) is not None
        logger.info("auth_session_deleted", extra={"session_id": session_id, "found": found})
        return found

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._store.clear()
