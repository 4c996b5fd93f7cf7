"""Endpoint de envio de mensagens de texto."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.routes.dependencies import get_message_dispatcher

if TYPE_CHECKING:
    from app.services.message_dispatcher import MessageDispatcher

router = APIRouter()


class SendMessageRequest(BaseModel):
    """Corpo de POST /send.

    Campos sem tipo: qualquer JSON chega ao dispatcher, que responde
    `invalid_input`/`invalid_phone` em vez de 422.
    """

    phone: Any = None
    message: Any = None


@router.post("/send")
async def send_message(
    payload: SendMessageRequest,
    dispatcher: MessageDispatcher = Depends(get_message_dispatcher),
) -> dict[str, Any]:
    """Envia uma mensagem; sempre 200 com `status` estruturado."""
    outcome = await dispatcher.send(payload.phone, payload.message)
    return outcome.to_response()
