"""Protocolo de normalização de telefone para envio."""

from __future__ import annotations

from typing import Protocol


class PhoneNormalizerProtocol(Protocol):
    """Contrato mínimo para normalizar telefone em dígitos E.164 sem '+'."""

    def normalize(self, raw_phone: str) -> str | None: ...
