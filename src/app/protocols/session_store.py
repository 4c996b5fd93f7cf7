"""Protocolo de domínio para o store do blob de sessão de autenticação.

O conteúdo do blob é opaco para o gateway: o transport decide o que
salvar e o que restaurar. O core apenas consulta existência (status)
e apaga (reset de sessão).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AuthSessionStoreProtocol(ABC):
    """Contrato assíncrono mínimo para persistência do blob de sessão."""

    @abstractmethod
    async def exists(self, session_id: str) -> bool: ...

    @abstractmethod
    async def save(self, session_id: str, blob: bytes) -> None: ...

    @abstractmethod
    async def extract(self, session_id: str) -> bytes | None: ...

    @abstractmethod
    async def delete(self, session_id: str) -> bool: ...

    @abstractmethod
    async def ping(self) -> bool:
        """Retorna True se o backend do store está acessível."""

    async def close(self) -> None:
        """Libera conexões do backend (shutdown)."""
        return None
