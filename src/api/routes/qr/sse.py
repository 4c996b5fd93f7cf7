"""Server-Sent Events do stream de pareamento."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from app.connection import ConnectionLifecycleManager

logger = logging.getLogger(__name__)

SSE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse_event(data: Any) -> str:
    """Formata `data` (JSON) como evento SSE sem nome."""
    payload = data if isinstance(data, str) else json.dumps(data, default=str)
    lines = [f"data: {line}" for line in payload.split("\n")]
    return "\n".join(lines) + "\n\n"


def format_sse_comment(comment: str) -> str:
    """Comentário SSE (keepalive)."""
    return f": {comment}\n\n"


async def pairing_event_stream(
    manager: ConnectionLifecycleManager,
    is_disconnected: Callable[[], Awaitable[bool]],
    *,
    keepalive_seconds: float = 15.0,
) -> AsyncIterator[str]:
    """Gera eventos do broadcaster até o cliente desconectar.

    O primeiro evento é sempre o snapshot do estado corrente. Observers
    derrubados pelo broadcaster (fila cheia) encerram o stream.
    """
    handle = manager.subscribe()
    logger.info("qr_stream_opened", extra={"observer_id": handle.observer_id})
    try:
        while True:
            try:
                event = await asyncio.wait_for(handle.next_event(), timeout=keepalive_seconds)
            except TimeoutError:
                if await is_disconnected():
                    break
                yield format_sse_comment("keepalive")
                continue

            if event is None:
                break
            yield format_sse_event(event.to_payload())
            if await is_disconnected():
                break
    finally:
        manager.unsubscribe(handle)
        logger.info("qr_stream_closed", extra={"observer_id": handle.observer_id})
