"""Redis Auth Session Store: blob de autenticação do WhatsApp Web.

O transport salva periodicamente o blob opaco da sessão (RemoteAuth)
e o recupera no handshake para evitar novo pareamento por QR.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.session_store import AuthSessionStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de sessões
SESSION_PREFIX = "wa-session:"


class RedisAuthSessionStore(AuthSessionStoreProtocol):
    """Store de sessão usando Redis assíncrono.

    Sem TTL: a sessão vale até logout ou reset explícito.

    Args:
        redis_client: Cliente Redis assíncrono
        key_prefix: Namespace das chaves
    """

    def __init__(
        self,
        redis_client: AsyncRedis[bytes],
        *,
        key_prefix: str = SESSION_PREFIX,
    ) -> None:
        self._redis = redis_client
        self._prefix = key_prefix

    def _key(self, session_id: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._prefix}{session_id}"

    async def exists(self, session_id: str) -> bool:
        try:
            return bool(await self._redis.exists(self._key(session_id)))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar sessão no Redis") from exc

    async def save(self, session_id: str, blob: bytes) -> None:
        try:
            await self._redis.set(self._key(session_id), blob)
        except Exception as exc:
            raise RedisConnectionError("Falha ao salvar sessão no Redis") from exc
        logger.debug("auth_session_saved", extra={"session_id": session_id, "size": len(blob)})

    async def extract(self, session_id: str) -> bytes | None:
        try:
            data = await self._redis.get(self._key(session_id))
        except Exception as exc:
            raise RedisConnectionError("Falha ao ler sessão no Redis") from exc
        if data is None:
            return None
        return data if isinstance(data, bytes) else str(data).encode()

    async def delete(self, session_id: str) -> bool:
        try:
            result = await self._redis.delete(self._key(session_id))
        except Exception as exc:
            raise RedisConnectionError("Falha ao remover sessão no Redis") from exc
        logger.info("auth_session_deleted", extra={"session_id": session_id, "found": bool(result)})
        return bool(result)

    async def ping(self) -> bool:
        """Verifica conectividade (usado por /ready e /session-status)."""
        try:
            return bool(await self._redis.ping())
        except Exception as exc:
            logger.warning("redis_ping_failed", extra={"error_type": type(exc).__name__})
            return False

    async def close(self) -> None:
        await self._redis.aclose()
