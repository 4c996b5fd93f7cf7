"""Configuração centralizada de logging.

Funções para configurar logging estruturado JSON com:
- Campos obrigatórios (correlation_id, service, level, logger, message)
- Níveis configuráveis por ambiente
- Mascaramento de telefone (nunca logar número completo)

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="wa_gateway")

    logger = get_logger(__name__)
    logger.info("message_sent", extra={"recipient": mask_phone(number)})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Nome padrão do serviço
DEFAULT_SERVICE_NAME = "wa_gateway"

# Dígitos finais mantidos visíveis em telefones mascarados
_VISIBLE_PHONE_DIGITS = 4


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Deve ser chamada uma vez na inicialização do serviço (app/bootstrap/).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função opcional que retorna o correlation_id
            do contexto atual (ex: de ContextVar).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]

    # uvicorn instala handlers próprios; propaga para o root JSON
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado.

    O filter injeta automaticamente service e correlation_id.
    """
    return logging.getLogger(name)


def mask_phone(number: str | None) -> str:
    """Mascara número de telefone para logs (sem PII).

    Args:
        number: Número normalizado ou bruto.

    Returns:
        Número com apenas os últimos dígitos visíveis (ex: "*******4567").

    Exemplo:
        >>> mask_phone("923001234567")
        '********4567'
    """
    if not number:
        return ""
    if len(number) <= _VISIBLE_PHONE_DIGITS:
        return "*" * len(number)
    hidden = len(number) - _VISIBLE_PHONE_DIGITS
    return "*" * hidden + number[-_VISIBLE_PHONE_DIGITS:]
