"""Observabilidade: correlation_id para logs estruturados.

Uso:
    from app.observability import correlation_scope, get_correlation_id
"""

from app.observability.correlation import (
    CONNECTION_PREFIX,
    correlation_scope,
    get_correlation_id,
    new_connection_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

__all__ = [
    "CONNECTION_PREFIX",
    "correlation_scope",
    "get_correlation_id",
    "new_connection_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
