"""Política de restart do transport por classe de falha.

Um único contador é compartilhado entre as classes: qualquer retry
consome uma tentativa; apenas READY ou initialize manual zeram.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from config.settings.whatsapp import DEFAULT_RESTART_CEILING

logger = logging.getLogger(__name__)

# Assinaturas de erros transitórios do navegador/protocolo do transport
TRANSIENT_ERROR_SIGNATURES: tuple[str, ...] = (
    "Protocol error",
    "Execution context was destroyed",
    "Target closed",
    "Session closed",
)


class FailureClass(StrEnum):
    """Classes de falha recuperáveis."""

    TRANSIENT = "transient"
    LOGOUT = "logout"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True)
class RetryAfter:
    """Reinicializar após `delay_seconds`."""

    delay_seconds: float
    attempt: int


@dataclass(frozen=True, slots=True)
class GiveUp:
    """Teto atingido: sem novos restarts até initialize manual."""

    attempts: int


RestartDecision = RetryAfter | GiveUp


def is_transient_transport_error(error: BaseException | str | None) -> bool:
    """Indica se o erro carrega uma assinatura transitória conhecida."""
    if error is None:
        return False
    message = error if isinstance(error, str) else str(error)
    return any(signature in message for signature in TRANSIENT_ERROR_SIGNATURES)


class RestartCounter:
    """Contador de tentativas com teto fixo."""

    __slots__ = ("_attempts", "_ceiling")

    def __init__(self, ceiling: int = DEFAULT_RESTART_CEILING) -> None:
        if ceiling < 0:
            raise ValueError("ceiling must be >= 0")
        self._ceiling = ceiling
        self._attempts = 0

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def ceiling(self) -> int:
        return self._ceiling

    def increment(self) -> int:
        self._attempts += 1
        return self._attempts

    def reset(self) -> None:
        self._attempts = 0


class RestartPolicy:
    """Decide retry ou desistência para cada falha reportada.

    Síncrona; o único efeito colateral é o contador. O agendamento do
    restart fica com o ConnectionLifecycleManager.
    """

    __slots__ = ("_counter", "_delays")

    def __init__(
        self,
        *,
        ceiling: int = DEFAULT_RESTART_CEILING,
        transient_delay: float = 10.0,
        logout_delay: float = 5.0,
        conflict_delay: float = 10.0,
    ) -> None:
        self._counter = RestartCounter(ceiling)
        self._delays: dict[FailureClass, float] = {
            FailureClass.TRANSIENT: transient_delay,
            FailureClass.LOGOUT: logout_delay,
            FailureClass.CONFLICT: conflict_delay,
        }

    @property
    def attempts(self) -> int:
        return self._counter.attempts

    @property
    def ceiling(self) -> int:
        return self._counter.ceiling

    def delay_for(self, failure_class: FailureClass) -> float:
        return self._delays[failure_class]

    def on_failure(self, failure_class: FailureClass) -> RestartDecision:
        """Registra uma falha e retorna a decisão.

        Args:
            failure_class: Classe da falha observada

        Returns:
            RetryAfter com o atraso da classe, ou GiveUp quando
            as tentativas excedem o teto.
        """
        attempt = self._counter.increment()

        if attempt > self._counter.ceiling:
            logger.error(
                "restart_ceiling_reached",
                extra={
                    "failure_class": failure_class.value,
                    "attempts": attempt,
                    "ceiling": self._counter.ceiling,
                },
            )
            return GiveUp(attempts=attempt)

        delay = self._delays[failure_class]
        logger.info(
            "restart_scheduled_decision",
            extra={
                "failure_class": failure_class.value,
                "attempt": attempt,
                "ceiling": self._counter.ceiling,
                "delay_seconds": delay,
            },
        )
        return RetryAfter(delay_seconds=delay, attempt=attempt)

    def reset(self) -> None:
        self._counter.reset()
