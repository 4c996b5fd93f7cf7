"""Fan-out de eventos de pareamento/ciclo de vida para observers.

Cada observer é uma fila asyncio limitada alimentada com `put_nowait`:
o notify nunca bloqueia. Fila cheia ou fechada conta como falha de
entrega e remove o observer sem afetar os demais.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from .models import PairingEvent

logger = logging.getLogger(__name__)

_observer_ids = itertools.count(1)


class ObserverClosedError(RuntimeError):
    """Entrega para um observer já encerrado."""


class ObserverHandle:
    """Um assinante vivo do stream de pareamento.

    Igualdade por identidade. O consumidor lê via `next_event()` ou
    iterando com `async for`; `None` sinaliza encerramento.
    """

    __slots__ = ("_closed", "_queue", "observer_id")

    def __init__(self, maxsize: int) -> None:
        self.observer_id = next(_observer_ids)
        self._queue: asyncio.Queue[PairingEvent | None] = asyncio.Queue(maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        return self._queue.qsize()

    def deliver(self, event: PairingEvent) -> None:
        """Enfileira sem bloquear.

        Raises:
            ObserverClosedError: Observer encerrado
            asyncio.QueueFull: Consumidor não acompanha o stream
        """
        if self._closed:
            raise ObserverClosedError(f"observer {self.observer_id} closed")
        self._queue.put_nowait(event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Acorda um consumidor parado em get(); com fila cheia ele
        # drena o que resta e vê o handle fechado.
        if not self._queue.full():
            self._queue.put_nowait(None)

    async def next_event(self) -> PairingEvent | None:
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    async def __aiter__(self) -> AsyncIterator[PairingEvent]:
        while True:
            event = await self.next_event()
            if event is None:
                return
            yield event

    def __repr__(self) -> str:
        return f"ObserverHandle(id={self.observer_id}, closed={self._closed})"


class PairingBroadcaster:
    """Registro de observers com entrega isolada por falha.

    Args:
        snapshot_factory: Retorna o evento de snapshot enviado a cada
            novo assinante (ready / qr_ready / checking_session)
        queue_size: Capacidade da fila de cada observer
    """

    __slots__ = ("_observers", "_queue_size", "_snapshot_factory")

    def __init__(
        self,
        snapshot_factory: Callable[[], PairingEvent],
        *,
        queue_size: int = 16,
    ) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be >= 1")
        self._snapshot_factory = snapshot_factory
        self._queue_size = queue_size
        self._observers: list[ObserverHandle] = []

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def subscribe(self) -> ObserverHandle:
        """Registra um observer e enfileira exatamente um snapshot."""
        handle = ObserverHandle(self._queue_size)
        self._observers.append(handle)
        snapshot = self._snapshot_factory()
        self._deliver(handle, snapshot)
        logger.info(
            "pairing_observer_subscribed",
            extra={
                "observer_id": handle.observer_id,
                "snapshot_status": snapshot.status.value,
                "observer_count": len(self._observers),
            },
        )
        return handle

    def unsubscribe(self, handle: ObserverHandle) -> None:
        """Remove o observer (idempotente) e encerra sua fila."""
        if handle in self._observers:
            self._observers.remove(handle)
            logger.info(
                "pairing_observer_unsubscribed",
                extra={
                    "observer_id": handle.observer_id,
                    "observer_count": len(self._observers),
                },
            )
        handle.close()

    def notify(self, event: PairingEvent) -> int:
        """Entrega o evento a todos os observers registrados.

        Returns:
            Quantidade de entregas bem-sucedidas.
        """
        delivered = 0
        for handle in list(self._observers):
            if self._deliver(handle, event):
                delivered += 1
        return delivered

    def close(self) -> None:
        """Encerra todos os observers (shutdown)."""
        observers, self._observers = self._observers, []
        for handle in observers:
            handle.close()

    def _deliver(self, handle: ObserverHandle, event: PairingEvent) -> bool:
        try:
            handle.deliver(event)
        except (asyncio.QueueFull, ObserverClosedError) as exc:
            self._drop(handle, exc)
            return False
        return True

    def _drop(self, handle: ObserverHandle, exc: Exception) -> None:
        if handle in self._observers:
            self._observers.remove(handle)
        handle.close()
        logger.warning(
            "pairing_observer_dropped",
            extra={
                "observer_id": handle.observer_id,
                "error_type": type(exc).__name__,
                "observer_count": len(self._observers),
            },
        )
