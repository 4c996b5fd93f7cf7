"""
Máquina de estados (ConnectionStateMachine) da conexão do gateway.

Este módulo implementa a FSM que controla transições de estado da
conexão com o WhatsApp Web e mantém um histórico recente rastreável.
A máquina não agenda nada e não conhece o transport: quem decide
*quando* transitar é o ConnectionLifecycleManager.
"""

from collections import deque
from typing import Any

from fsm.states.connection import (
    DEFAULT_INITIAL_STATE,
    ConnectionState,
    is_restartable,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Processo é long-lived: histórico limitado às transições mais recentes
DEFAULT_HISTORY_SIZE = 50


class ConnectionStateMachine:
    """
    Máquina de estados da conexão.

    Gerencia o estado atual, valida transições e mantém
    histórico recente para auditoria.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas (mais recentes)
    """

    __slots__ = ("_current_state", "_history", "_connection_id")

    def __init__(
        self,
        initial_state: ConnectionState | None = None,
        connection_id: str = "",
        history_size: int = DEFAULT_HISTORY_SIZE,
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            initial_state: Estado inicial (usa DEFAULT_INITIAL_STATE se None)
            connection_id: Identificador da conexão para logs
            history_size: Quantidade máxima de transições mantidas
        """
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: deque[StateTransition] = deque(maxlen=history_size)
        self._connection_id = connection_id

    @property
    def current_state(self) -> ConnectionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def connection_id(self) -> str:
        """Identificador da conexão."""
        return self._connection_id

    @property
    def is_restartable(self) -> bool:
        """Verifica se o estado atual aceita nova inicialização."""
        return is_restartable(self._current_state)

    def get_valid_targets(self) -> frozenset[ConnectionState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Evento que causou a transição (ex: 'qr', 'disconnected')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "connection_id": self._connection_id,
            "current_state": self._current_state.name,
            "is_restartable": self.is_restartable,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]
