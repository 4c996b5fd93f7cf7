"""
Estados canônicos da conexão com o WhatsApp Web.

Este módulo define os estados que a conexão do gateway pode assumir
durante seu ciclo de vida. Existe uma única conexão por processo,
governada pelo ConnectionLifecycleManager.
"""

from enum import StrEnum


class ConnectionState(StrEnum):
    """
    Estados canônicos da conexão com a rede de chat.

    Estados de handshake (inicialização em andamento):
        - INITIALIZING: Transport construído, handshake em curso
        - AWAITING_PAIRING: QR emitido, aguardando leitura no celular
        - AUTHENTICATING: Credenciais aceitas, sincronizando até ficar pronto

    Estado operacional:
        - READY: Conexão pronta para envio de mensagens

    Estados de parada (saída apenas via initialize):
        - UNINITIALIZED: Nenhuma inicialização foi feita ainda
        - DISCONNECTED: Sessão encerrada pelo remoto (logout)
        - FAILED: Conflito, falha de autenticação ou erro de inicialização
    """

    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZING = "INITIALIZING"
    AWAITING_PAIRING = "AWAITING_PAIRING"
    AUTHENTICATING = "AUTHENTICATING"
    READY = "READY"
    DISCONNECTED = "DISCONNECTED"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value


# Estados a partir dos quais uma nova inicialização é permitida
RESTARTABLE_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.UNINITIALIZED,
    ConnectionState.DISCONNECTED,
    ConnectionState.FAILED,
})

# Estados em que o handshake do transport está em andamento
HANDSHAKE_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.INITIALIZING,
    ConnectionState.AWAITING_PAIRING,
    ConnectionState.AUTHENTICATING,
})

DEFAULT_INITIAL_STATE: ConnectionState = ConnectionState.UNINITIALIZED


def is_restartable(state: ConnectionState) -> bool:
    """
    Verifica se o estado aceita uma nova inicialização.

    Args:
        state: Estado a ser verificado

    Returns:
        True se initialize pode partir deste estado
    """
    return state in RESTARTABLE_STATES
