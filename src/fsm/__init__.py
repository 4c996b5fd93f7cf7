"""
Módulo FSM: Máquina de Estados da conexão com o WhatsApp Web.

Este módulo implementa a FSM determinística que governa
as transições de estado da conexão do gateway.

Estrutura:
    - states/: Definições dos estados (ConnectionState enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - manager/: Máquina de estados (ConnectionStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import ConnectionStateMachine
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    HANDSHAKE_STATES,
    RESTARTABLE_STATES,
    ConnectionState,
    is_restartable,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "HANDSHAKE_STATES",
    "RESTARTABLE_STATES",
    "VALID_TRANSITIONS",
    "ConnectionState",
    "ConnectionStateMachine",
    "StateTransition",
    "TransitionResult",
    "get_valid_targets",
    "is_restartable",
    "is_transition_valid",
    "validate_transition_map",
]
