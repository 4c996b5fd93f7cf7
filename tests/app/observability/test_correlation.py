"""Testes do correlation_id (requisição e geração de transport)."""

from __future__ import annotations

import uuid

from app.observability import (
    CONNECTION_PREFIX,
    correlation_scope,
    get_correlation_id,
    new_connection_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)


def test_set_without_value_generates_uuid() -> None:
    token = set_correlation_id(None)
    try:
        uuid.UUID(get_correlation_id())
    finally:
        reset_correlation_id(token)

    assert get_correlation_id() == ""


def test_scope_restores_previous_value() -> None:
    token = set_correlation_id("req-1")
    try:
        with correlation_scope("conn-abc") as active:
            assert active == "conn-abc"
            assert get_correlation_id() == "conn-abc"
        assert get_correlation_id() == "req-1"
    finally:
        reset_correlation_id(token)


def test_connection_ids_are_prefixed_and_unique() -> None:
    first = new_connection_correlation_id()
    second = new_connection_correlation_id()

    assert first.startswith(CONNECTION_PREFIX)
    assert len(first) == len(CONNECTION_PREFIX) + 16
    assert first != second
