"""Testes do app FastAPI montado por create_app (sem lifespan)."""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.app import CORRELATION_HEADER, create_app


def test_correlation_id_is_echoed() -> None:
    client = TestClient(create_app())

    resp = client.get("/health", headers={CORRELATION_HEADER: "corr-123"})

    assert resp.headers[CORRELATION_HEADER] == "corr-123"


def test_correlation_id_is_generated_when_missing() -> None:
    client = TestClient(create_app())

    resp = client.get("/qr")

    assert resp.status_code == 200
    assert len(resp.headers[CORRELATION_HEADER]) == 36
