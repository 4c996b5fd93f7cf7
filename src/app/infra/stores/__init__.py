"""Stores: implementações concretas do store de sessão de autenticação.

Módulos disponíveis:
    - redis_session_store: Blob de sessão no Redis
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryAuthSessionStore
from app.infra.stores.redis_session_store import RedisAuthSessionStore

__all__ = [
    "MemoryAuthSessionStore",
    "RedisAuthSessionStore",
]
