"""Settings do store de sessão de autenticação.

A sessão do WhatsApp Web é um blob opaco (zip do perfil do navegador)
persistido por um store externo. O gateway só consulta existência,
salva, extrai e apaga esse blob.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

SessionStoreBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class SessionSettings:
    """Configurações do store de sessão.

    Attributes:
        store_backend: Backend para armazenamento do blob de sessão
        session_id: Identificador da sessão (chave do blob)
        key_prefix: Prefixo de namespace das chaves no Redis
    """

    store_backend: SessionStoreBackend = "memory"
    session_id: str = "RemoteAuth-mySession"
    key_prefix: str = "wa-session:"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        valid_backends = {"memory", "redis"}
        if self.store_backend not in valid_backends:
            errors.append(f"SESSION_STORE_BACKEND inválido: {self.store_backend}")

        if not self.session_id.strip():
            errors.append("SESSION_ID não pode ser vazio")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("SESSION_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("REDIS_URL obrigatório com SESSION_STORE_BACKEND=redis")

        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    backend_str = os.getenv("SESSION_STORE_BACKEND", "memory").lower()
    backend: SessionStoreBackend = (
        backend_str if backend_str in ("memory", "redis") else "memory"
    )
    return SessionSettings(
        store_backend=backend,
        session_id=os.getenv("SESSION_ID", "RemoteAuth-mySession"),
        key_prefix=os.getenv("SESSION_KEY_PREFIX", "wa-session:"),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
