"""Testes da RestartPolicy, RestartCounter e taxonomia de erros transitórios."""

from __future__ import annotations

import pytest

from app.connection import (
    FailureClass,
    GiveUp,
    RestartCounter,
    RestartPolicy,
    RetryAfter,
    is_transient_transport_error,
)


class TestRestartPolicy:
    @pytest.mark.parametrize(
        ("failure_class", "delay"),
        [
            (FailureClass.TRANSIENT, 10.0),
            (FailureClass.LOGOUT, 5.0),
            (FailureClass.CONFLICT, 10.0),
        ],
    )
    def test_first_failure_retries_with_class_delay(
        self, failure_class: FailureClass, delay: float
    ) -> None:
        policy = RestartPolicy()

        decision = policy.on_failure(failure_class)

        assert decision == RetryAfter(delay_seconds=delay, attempt=1)
        assert policy.attempts == 1

    def test_delay_is_fixed_not_exponential(self) -> None:
        policy = RestartPolicy()
        delays = [policy.on_failure(FailureClass.LOGOUT).delay_seconds for _ in range(5)]
        assert delays == [5.0] * 5

    def test_gives_up_after_ceiling_plus_one_mixed_failures(self) -> None:
        policy = RestartPolicy(ceiling=5)
        classes = [
            FailureClass.TRANSIENT,
            FailureClass.LOGOUT,
            FailureClass.CONFLICT,
            FailureClass.LOGOUT,
            FailureClass.TRANSIENT,
        ]

        for failure_class in classes:
            assert isinstance(policy.on_failure(failure_class), RetryAfter)

        decision = policy.on_failure(FailureClass.CONFLICT)

        assert decision == GiveUp(attempts=6)
        # Continua desistindo até reset
        assert isinstance(policy.on_failure(FailureClass.LOGOUT), GiveUp)

    def test_reset_restores_budget(self) -> None:
        policy = RestartPolicy(ceiling=1)
        policy.on_failure(FailureClass.LOGOUT)
        assert isinstance(policy.on_failure(FailureClass.LOGOUT), GiveUp)

        policy.reset()

        assert policy.attempts == 0
        assert isinstance(policy.on_failure(FailureClass.LOGOUT), RetryAfter)

    def test_zero_ceiling_gives_up_immediately(self) -> None:
        assert isinstance(RestartPolicy(ceiling=0).on_failure(FailureClass.TRANSIENT), GiveUp)

    def test_ceiling_reached_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        policy = RestartPolicy(ceiling=0)
        with caplog.at_level("ERROR"):
            policy.on_failure(FailureClass.CONFLICT)
        assert any(r.getMessage() == "restart_ceiling_reached" for r in caplog.records)

    def test_custom_delays(self) -> None:
        policy = RestartPolicy(transient_delay=0.5, logout_delay=0.1, conflict_delay=0.2)
        assert policy.delay_for(FailureClass.TRANSIENT) == 0.5
        assert policy.delay_for(FailureClass.LOGOUT) == 0.1
        assert policy.delay_for(FailureClass.CONFLICT) == 0.2


class TestRestartCounter:
    def test_increment_and_reset(self) -> None:
        counter = RestartCounter(ceiling=3)
        assert counter.increment() == 1
        assert counter.increment() == 2
        counter.reset()
        assert counter.attempts == 0
        assert counter.ceiling == 3

    def test_negative_ceiling_rejected(self) -> None:
        with pytest.raises(ValueError):
            RestartCounter(ceiling=-1)


class TestTransientErrors:
    @pytest.mark.parametrize(
        "message",
        [
            "Protocol error (Runtime.callFunctionOn): Target closed.",
            "Execution context was destroyed, most likely because of a navigation.",
            "Target closed",
            "Session closed. Most likely the page has been closed.",
        ],
    )
    def test_known_signatures_are_transient(self, message: str) -> None:
        assert is_transient_transport_error(RuntimeError(message)) is True
        assert is_transient_transport_error(message) is True

    def test_other_errors_are_not_transient(self) -> None:
        assert is_transient_transport_error(ValueError("invalid session blob")) is False
        assert is_transient_transport_error(None) is False
