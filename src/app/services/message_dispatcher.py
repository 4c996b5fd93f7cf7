"""MessageDispatcher: envio de mensagens de texto pelo transport.

Valida a entrada, normaliza o número, verifica existência do contato
e classifica erros do transport em resultados estruturados. Nunca
levanta exceção e nunca altera o estado da conexão.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from config.logging import mask_phone
from config.settings.whatsapp import CONTACT_ADDRESS_SUFFIX

if TYPE_CHECKING:
    from app.protocols.connection import ConnectionReaderProtocol
    from app.protocols.normalizer import PhoneNormalizerProtocol

logger = logging.getLogger(__name__)

# Substrings (minúsculas) de erros do transport por classificação
_NOT_REGISTERED_MARKERS: tuple[str, ...] = (
    "number does not exist",
    "phone number is not registered",
)
_RATE_LIMIT_MARKERS: tuple[str, ...] = ("rate limit", "too many")


class SendStatus(StrEnum):
    SENT = "sent"
    SKIPPED = "skipped"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"
    NOT_READY = "not_ready"
    INVALID_INPUT = "invalid_input"
    INVALID_PHONE = "invalid_phone"


@dataclass(frozen=True, slots=True)
class SendOutcome:
    """Resultado estruturado de um envio.

    Attributes:
        status: Classificação do resultado
        message: Descrição legível
        number: Número normalizado (quando disponível)
        exists: Contato existe no WhatsApp (None = não verificado)
        error: Detalhe do erro (failed/rate_limited/validação)
    """

    status: SendStatus
    message: str
    number: str | None = None
    exists: bool | None = None
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status == SendStatus.SENT

    def to_response(self) -> dict[str, Any]:
        """Corpo JSON da resposta de POST /send."""
        body: dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "sent": self.sent,
        }
        if self.number is not None:
            body["mobileNumber"] = self.number
        if self.exists is not None:
            body["exists"] = self.exists
        if self.error is not None:
            body["error"] = self.error
        return body


def classify_send_error(error: BaseException, number: str) -> SendOutcome:
    """Classifica um erro do transport por substring da mensagem."""
    text = str(error).lower()

    if any(marker in text for marker in _NOT_REGISTERED_MARKERS):
        return SendOutcome(
            status=SendStatus.SKIPPED,
            message="Number does not exist",
            number=number,
            exists=False,
        )

    if any(marker in text for marker in _RATE_LIMIT_MARKERS):
        return SendOutcome(
            status=SendStatus.RATE_LIMITED,
            message="Rate limited, try again later",
            number=number,
            exists=True,
            error="Rate limited",
        )

    return SendOutcome(
        status=SendStatus.FAILED,
        message="Failed to send message",
        number=number,
        exists=True,
        error=str(error) or type(error).__name__,
    )


class MessageDispatcher:
    """Orquestra validação, normalização, pré-checagem e envio."""

    def __init__(
        self,
        connection: ConnectionReaderProtocol,
        normalizer: PhoneNormalizerProtocol,
        *,
        recipient_suffix: str = CONTACT_ADDRESS_SUFFIX,
    ) -> None:
        self._connection = connection
        self._normalizer = normalizer
        self._recipient_suffix = recipient_suffix

    async def send(self, raw_phone: Any, body: Any) -> SendOutcome:
        """Envia `body` para `raw_phone`.

        Returns:
            SendOutcome; exceções do transport são classificadas.
        """
        transport = self._connection.transport
        if not self._connection.is_ready() or transport is None:
            logger.info("send_rejected_not_ready")
            return SendOutcome(
                status=SendStatus.NOT_READY,
                message="WhatsApp client not ready",
                error="WhatsApp client not ready",
            )

        phone = "" if raw_phone is None else str(raw_phone).strip()
        if not phone:
            return SendOutcome(
                status=SendStatus.INVALID_INPUT,
                message="Phone number is required",
                error="Phone number is required",
            )

        text = "" if body is None else str(body).strip()
        if not text:
            return SendOutcome(
                status=SendStatus.INVALID_INPUT,
                message="Message is required",
                error="Message is required",
            )

        number = self._normalizer.normalize(phone)
        if not number:
            logger.info("send_invalid_phone")
            return SendOutcome(
                status=SendStatus.INVALID_PHONE,
                message="Invalid phone number format",
                error="Invalid phone number format",
            )

        address = f"{number}{self._recipient_suffix}"
        masked = mask_phone(number)

        try:
            exists = await transport.is_registered_user(address)
        except Exception as exc:
            logger.warning(
                "send_existence_check_failed",
                extra={"to": masked, "error_type": type(exc).__name__},
            )
            exists = False

        if not exists:
            logger.info("send_skipped_not_registered", extra={"to": masked})
            return SendOutcome(
                status=SendStatus.SKIPPED,
                message="Number does not exist on WhatsApp",
                number=number,
                exists=False,
            )

        try:
            await transport.send_message(address, text)
        except Exception as exc:
            outcome = classify_send_error(exc, number)
            logger.warning(
                "send_failed",
                extra={
                    "to": masked,
                    "status": outcome.status.value,
                    "error_type": type(exc).__name__,
                },
            )
            return outcome

        logger.info("message_sent", extra={"to": masked})
        return SendOutcome(
            status=SendStatus.SENT,
            message="Message sent successfully",
            number=number,
            exists=True,
        )
