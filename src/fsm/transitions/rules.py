"""
Regras de transição válidas entre estados da conexão.

Este módulo define o grafo de transições da máquina de estados da
conexão. Eventos do transport que não correspondem a uma aresta
deste grafo são rejeitados pela máquina e não alteram o estado.
"""

from fsm.states.connection import ConnectionState

# Tipagem explícita do mapa de transições
TransitionMap = dict[ConnectionState, frozenset[ConnectionState]]

# Mapa de transições válidas
# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # UNINITIALIZED: só sai via initialize (ou falha antes dele)
    ConnectionState.UNINITIALIZED: frozenset({
        ConnectionState.INITIALIZING,
        ConnectionState.FAILED,
    }),

    # INITIALIZING: QR emitido, sessão restaurada, queda ou erro
    ConnectionState.INITIALIZING: frozenset({
        ConnectionState.AWAITING_PAIRING,
        ConnectionState.AUTHENTICATING,
        ConnectionState.DISCONNECTED,
        ConnectionState.FAILED,
    }),

    # AWAITING_PAIRING: novo QR substitui o anterior (reentrada)
    ConnectionState.AWAITING_PAIRING: frozenset({
        ConnectionState.AWAITING_PAIRING,
        ConnectionState.AUTHENTICATING,
        ConnectionState.DISCONNECTED,
        ConnectionState.FAILED,
    }),

    # AUTHENTICATING: "authenticated" pode chegar após sessão restaurada
    ConnectionState.AUTHENTICATING: frozenset({
        ConnectionState.AUTHENTICATING,
        ConnectionState.READY,
        ConnectionState.DISCONNECTED,
        ConnectionState.FAILED,
    }),

    ConnectionState.READY: frozenset({
        ConnectionState.DISCONNECTED,
        ConnectionState.FAILED,
    }),

    # Estados de parada: saída apenas via initialize (manual ou restart)
    ConnectionState.DISCONNECTED: frozenset({
        ConnectionState.INITIALIZING,
        ConnectionState.FAILED,
    }),
    ConnectionState.FAILED: frozenset({
        ConnectionState.INITIALIZING,
        ConnectionState.FAILED,
    }),
}


def get_valid_targets(state: ConnectionState) -> frozenset[ConnectionState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ConnectionState, to_state: ConnectionState) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Todo estado é alcançável a partir de outro estado
    - Nenhuma transição aponta para estado inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in ConnectionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    reachable = set().union(*VALID_TRANSITIONS.values())
    for state in ConnectionState:
        if state is not ConnectionState.UNINITIALIZED and state not in reachable:
            errors.append(f"Estado {state.name} inalcançável")

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, ConnectionState):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors
