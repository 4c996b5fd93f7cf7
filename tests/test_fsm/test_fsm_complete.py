"""
Testes abrangentes para o módulo FSM da conexão.

- Testamos comportamento e contrato público
- Um teste cobre múltiplos componentes relacionados
- Foco em cenários válidos + inválidos + bordas
"""

from datetime import datetime

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    HANDSHAKE_STATES,
    RESTARTABLE_STATES,
    VALID_TRANSITIONS,
    ConnectionState,
    ConnectionStateMachine,
    StateTransition,
    TransitionResult,
    get_valid_targets,
    is_restartable,
    is_transition_valid,
    validate_transition_map,
)
from fsm.states.connection import ConnectionState as DirectConnectionState


class TestConnectionStates:
    """Testa ConnectionState, RESTARTABLE_STATES e HANDSHAKE_STATES."""

    def test_enum_has_seven_states_split_between_groups(self) -> None:
        assert len(list(ConnectionState)) == 7

        assert {
            ConnectionState.UNINITIALIZED,
            ConnectionState.DISCONNECTED,
            ConnectionState.FAILED,
        } == RESTARTABLE_STATES
        assert {
            ConnectionState.INITIALIZING,
            ConnectionState.AWAITING_PAIRING,
            ConnectionState.AUTHENTICATING,
        } == HANDSHAKE_STATES
        assert not RESTARTABLE_STATES & HANDSHAKE_STATES
        assert ConnectionState.READY not in RESTARTABLE_STATES | HANDSHAKE_STATES

        for state in ConnectionState:
            assert is_restartable(state) is (state in RESTARTABLE_STATES)

        assert DEFAULT_INITIAL_STATE == ConnectionState.UNINITIALIZED

    def test_direct_import_matches_reexport(self) -> None:
        assert DirectConnectionState is ConnectionState

    def test_state_values_are_explicit_strings(self) -> None:
        for state in ConnectionState:
            assert state.value == state.name
            assert str(state) == state.name


class TestValidTransitionsAndRules:
    """Testa VALID_TRANSITIONS, get_valid_targets e is_transition_valid."""

    def test_transition_map_covers_every_state_and_is_valid(self) -> None:
        for state in ConnectionState:
            assert state in VALID_TRANSITIONS
            assert len(VALID_TRANSITIONS[state]) > 0
        assert validate_transition_map() == []

    def test_get_valid_targets_and_is_transition_valid_consistency(self) -> None:
        for from_state in ConnectionState:
            valid_targets = get_valid_targets(from_state)
            for to_state in ConnectionState:
                expected = to_state in valid_targets
                assert is_transition_valid(from_state, to_state) == expected, (
                    f"{from_state} → {to_state}"
                )

    def test_lifecycle_paths(self) -> None:
        # Caminho de pareamento
        assert is_transition_valid(ConnectionState.UNINITIALIZED, ConnectionState.INITIALIZING)
        assert is_transition_valid(ConnectionState.INITIALIZING, ConnectionState.AWAITING_PAIRING)
        assert is_transition_valid(ConnectionState.AWAITING_PAIRING, ConnectionState.AWAITING_PAIRING)
        assert is_transition_valid(ConnectionState.AWAITING_PAIRING, ConnectionState.AUTHENTICATING)
        assert is_transition_valid(ConnectionState.AUTHENTICATING, ConnectionState.READY)

        # Sessão restaurada pula o QR
        assert is_transition_valid(ConnectionState.INITIALIZING, ConnectionState.AUTHENTICATING)

        # Restart
        assert is_transition_valid(ConnectionState.READY, ConnectionState.DISCONNECTED)
        assert is_transition_valid(ConnectionState.DISCONNECTED, ConnectionState.INITIALIZING)
        assert is_transition_valid(ConnectionState.FAILED, ConnectionState.INITIALIZING)

        # Qualquer estado pode falhar
        for state in ConnectionState:
            assert is_transition_valid(state, ConnectionState.FAILED)

        # Inválidas
        assert not is_transition_valid(ConnectionState.UNINITIALIZED, ConnectionState.READY)
        assert not is_transition_valid(ConnectionState.READY, ConnectionState.AWAITING_PAIRING)
        assert not is_transition_valid(ConnectionState.READY, ConnectionState.INITIALIZING)
        assert not is_transition_valid(ConnectionState.DISCONNECTED, ConnectionState.READY)


class TestTypes:
    """Testa StateTransition e TransitionResult."""

    def test_state_transition_is_immutable_and_log_safe(self) -> None:
        transition = StateTransition(
            from_state=ConnectionState.AUTHENTICATING,
            to_state=ConnectionState.READY,
            trigger="ready",
            metadata={"attempt": 1},
        )
        assert isinstance(transition.timestamp, datetime)

        with pytest.raises(AttributeError):
            transition.trigger = "other"  # type: ignore[misc]

        log = transition.to_log_dict()
        assert log["from_state"] == "AUTHENTICATING"
        assert log["to_state"] == "READY"
        assert log["trigger"] == "ready"
        assert log["metadata"] == {"attempt": 1}

    @pytest.mark.parametrize("trigger", ["", "   "])
    def test_state_transition_requires_trigger(self, trigger: str) -> None:
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(
                from_state=ConnectionState.UNINITIALIZED,
                to_state=ConnectionState.INITIALIZING,
                trigger=trigger,
            )

    def test_transition_result_consistency(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)

        result = TransitionResult(success=False, error_reason="invalid")
        assert result.transition is None


class TestConnectionStateMachine:
    """Testa ConnectionStateMachine."""

    def test_full_pairing_cycle_records_history(self) -> None:
        machine = ConnectionStateMachine(connection_id="RemoteAuth-test")
        assert machine.current_state == ConnectionState.UNINITIALIZED
        assert machine.connection_id == "RemoteAuth-test"
        assert machine.is_restartable is True

        for target, trigger in (
            (ConnectionState.INITIALIZING, "manual_initialize"),
            (ConnectionState.AWAITING_PAIRING, "qr"),
            (ConnectionState.AWAITING_PAIRING, "qr"),
            (ConnectionState.AUTHENTICATING, "authenticated"),
            (ConnectionState.READY, "ready"),
        ):
            result = machine.transition(target, trigger)
            assert result.success is True
            assert result.transition is not None
            assert result.transition.to_state == target

        assert machine.current_state == ConnectionState.READY
        assert machine.is_restartable is False
        assert [t.trigger for t in machine.history] == [
            "manual_initialize",
            "qr",
            "qr",
            "authenticated",
            "ready",
        ]

        summary = machine.get_state_summary()
        assert summary["current_state"] == "READY"
        assert summary["transition_count"] == 5
        assert summary["valid_targets"] == ["DISCONNECTED", "FAILED"]

    def test_invalid_transition_leaves_state_unchanged(self) -> None:
        machine = ConnectionStateMachine(connection_id="s")
        result = machine.transition(ConnectionState.READY, "ready")

        assert result.success is False
        assert result.error_reason is not None
        assert "UNINITIALIZED" in result.error_reason
        assert machine.current_state == ConnectionState.UNINITIALIZED
        assert machine.history == []
        assert ConnectionState.INITIALIZING in machine.get_valid_targets()
        assert ConnectionState.READY not in machine.get_valid_targets()

    def test_history_is_bounded(self) -> None:
        machine = ConnectionStateMachine(
            initial_state=ConnectionState.FAILED,
            connection_id="s",
            history_size=3,
        )
        for _ in range(5):
            assert machine.transition(ConnectionState.FAILED, "initialization_error").success

        assert len(machine.history) == 3
        assert len(machine.get_history_summary()) == 3
