"""
Exports públicos do módulo fsm/manager.

Máquina de estados (ConnectionStateMachine) da conexão do gateway.
"""

from fsm.manager.machine import ConnectionStateMachine

__all__ = [
    "ConnectionStateMachine",
]
