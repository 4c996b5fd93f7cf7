"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    RedisConnectionError,
    TransportUnavailableError,
)

__all__ = [
    "InfrastructureError",
    "RedisConnectionError",
    "TransportUnavailableError",
]
