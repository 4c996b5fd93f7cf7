"""correlation_id dos logs do gateway.

Dois escopos compartilham a mesma ContextVar:
- requisição HTTP: valor de `x-correlation-id` (ou UUID novo), definido
  pelo middleware;
- geração de transport: cada (re)inicialização ganha um id `conn-...`,
  ativo enquanto os handlers de eventos daquele transport executam.
  Assim QR, autenticação, queda e restart de uma mesma tentativa
  aparecem agrupados nos logs, mesmo fora de qualquer requisição.

Uso:
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        ...
    finally:
        reset_correlation_id(token)

    with correlation_scope(new_connection_correlation_id()):
        handler(*args)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

CONNECTION_PREFIX = "conn-"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """correlation_id ativo, ou string vazia fora de qualquer escopo."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; None gera um UUID v4.

    Returns:
        Token para `reset_correlation_id()`.
    """
    return _correlation_id.set(correlation_id or str(uuid.uuid4()))


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def new_connection_correlation_id() -> str:
    """Id de uma geração de transport (`conn-<hex>`)."""
    return f"{CONNECTION_PREFIX}{uuid.uuid4().hex[:16]}"


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Ativa `correlation_id` durante o bloco e restaura o anterior."""
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)
