"""ConnectionLifecycleManager: dono da conexão com o WhatsApp Web.

Responsabilidades:
- Máquina de estados da conexão (fsm.ConnectionStateMachine)
- Construção/reconstrução do transport vinculado ao store de sessão
- Tradução de eventos do transport em transições
- Agendamento de restarts segundo a RestartPolicy
- Publicação de eventos de pareamento no PairingBroadcaster

Modelo de concorrência: todos os handlers são síncronos e executam no
event loop do processo, que serializa as mutações. Callbacks vindos de
threads do adapter são reenfileirados no loop. O handshake do transport
roda em background task; restarts usam `loop.call_later`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from app.connection.broadcaster import PairingBroadcaster
from app.connection.models import PairingArtifact, PairingEvent, PairingStatus
from app.connection.restart_policy import (
    FailureClass,
    GiveUp,
    RestartPolicy,
    is_transient_transport_error,
)
from app.infra.whatsapp.qr_renderer import render_qr_ascii, render_qr_data_url
from app.observability.correlation import correlation_scope, new_connection_correlation_id
from app.protocols.transport_client import (
    CONFLICT_STATES,
    TransportEvent,
    TransportOptions,
)
from config.settings.whatsapp import WhatsAppSettings
from fsm import ConnectionState, ConnectionStateMachine, is_restartable

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.connection.broadcaster import ObserverHandle
    from app.protocols.session_store import AuthSessionStoreProtocol
    from app.protocols.transport_client import (
        TransportClientProtocol,
        TransportFactory,
    )

logger = logging.getLogger(__name__)

_RESTORABLE_FROM = frozenset({ConnectionState.INITIALIZING, ConnectionState.AWAITING_PAIRING})


class ConnectionLifecycleManager:
    """Gerencia o ciclo de vida de uma conexão WhatsApp Web.

    Uma instância por processo, criada no lifespan da aplicação.

    Args:
        transport_factory: Constrói o transport a partir do store
        session_id: Chave do blob de sessão no store
        settings: WhatsAppSettings (política de restart, fan-out)
        restart_policy: Política customizada (default: derivada de settings)
        qr_renderer: Converte o código de pareamento em data URL
    """

    __slots__ = (
        "_background_tasks",
        "_broadcaster",
        "_correlation_id",
        "_fsm",
        "_initializing",
        "_loop",
        "_pairing",
        "_policy",
        "_qr_renderer",
        "_restart_handle",
        "_session_id",
        "_settings",
        "_start_task",
        "_store",
        "_transport",
        "_transport_factory",
    )

    def __init__(
        self,
        transport_factory: TransportFactory,
        *,
        session_id: str,
        settings: WhatsAppSettings | None = None,
        restart_policy: RestartPolicy | None = None,
        qr_renderer: Callable[[str], str | None] = render_qr_data_url,
    ) -> None:
        self._settings = settings or WhatsAppSettings()
        self._transport_factory = transport_factory
        self._session_id = session_id
        self._policy = restart_policy or RestartPolicy(
            ceiling=self._settings.restart_ceiling,
            transient_delay=self._settings.transient_retry_delay_seconds,
            logout_delay=self._settings.logout_retry_delay_seconds,
            conflict_delay=self._settings.conflict_retry_delay_seconds,
        )
        self._qr_renderer = qr_renderer
        self._fsm = ConnectionStateMachine(connection_id=session_id)
        self._broadcaster = PairingBroadcaster(
            self._snapshot,
            queue_size=self._settings.observer_queue_size,
        )
        self._pairing: PairingArtifact | None = None
        self._initializing = False
        self._store: AuthSessionStoreProtocol | None = None
        self._transport: TransportClientProtocol | None = None
        self._start_task: asyncio.Task[None] | None = None
        self._restart_handle: asyncio.TimerHandle | None = None
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._correlation_id = ""

    # ──────────────────────────────────────────────────────────────
    # Consultas (puras, não bloqueantes)
    # ──────────────────────────────────────────────────────────────

    def is_ready(self) -> bool:
        return self._fsm.current_state == ConnectionState.READY

    def current_state(self) -> ConnectionState:
        return self._fsm.current_state

    def current_pairing(self) -> PairingArtifact | None:
        return self._pairing

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def store(self) -> AuthSessionStoreProtocol | None:
        return self._store

    @property
    def transport(self) -> TransportClientProtocol | None:
        return self._transport

    @property
    def broadcaster(self) -> PairingBroadcaster:
        return self._broadcaster

    @property
    def restart_attempts(self) -> int:
        return self._policy.attempts

    @property
    def initializing(self) -> bool:
        return self._initializing

    @property
    def connection_correlation_id(self) -> str:
        """Id de log da geração de transport corrente."""
        return self._correlation_id

    def has_pending_restart(self) -> bool:
        return self._restart_handle is not None

    def history(self) -> list[dict[str, Any]]:
        return self._fsm.get_history_summary()

    def client_info(self) -> dict[str, Any] | None:
        """Dados da conta conectada, apenas em READY."""
        if not self.is_ready() or self._transport is None:
            return None
        return self._transport.get_info()

    def subscribe(self) -> ObserverHandle:
        return self._broadcaster.subscribe()

    def unsubscribe(self, handle: ObserverHandle) -> None:
        self._broadcaster.unsubscribe(handle)

    # ──────────────────────────────────────────────────────────────
    # Inicialização
    # ──────────────────────────────────────────────────────────────

    def initialize(self, store: AuthSessionStoreProtocol | None) -> bool:
        """Inicialização manual do transport.

        Zera o contador de restarts, transiciona para INITIALIZING e
        dispara o handshake em background sem aguardá-lo.

        Returns:
            True se uma inicialização foi iniciada.
        """
        if store is None:
            logger.error("initialize_without_store", extra={"session_id": self._session_id})
            return False

        if self._initializing:
            logger.info(
                "initialize_ignored_in_progress",
                extra={"state": self._fsm.current_state.value},
            )
            return False

        if not is_restartable(self._fsm.current_state):
            logger.info(
                "initialize_ignored",
                extra={"state": self._fsm.current_state.value},
            )
            return False

        self._policy.reset()
        return self._start_client(store, trigger="manual_initialize")

    def _reinitialize(self) -> None:
        """Restart agendado; não zera o contador."""
        self._restart_handle = None

        if self._store is None:
            logger.error("restart_without_store", extra={"session_id": self._session_id})
            return

        if self._initializing or not is_restartable(self._fsm.current_state):
            logger.info(
                "restart_skipped",
                extra={"state": self._fsm.current_state.value},
            )
            return

        logger.info(
            "restart_executing",
            extra={"attempt": self._policy.attempts, "ceiling": self._policy.ceiling},
        )
        self._start_client(self._store, trigger="scheduled_restart")

    def _start_client(self, store: AuthSessionStoreProtocol, *, trigger: str) -> bool:
        self._cancel_pending_restart()

        if not self._transition(ConnectionState.INITIALIZING, trigger):
            return False

        self._initializing = True
        self._store = store
        self._loop = asyncio.get_running_loop()
        self._correlation_id = new_connection_correlation_id()

        previous = self._transport
        self._transport = None
        if previous is not None:
            self._spawn(self._stop_transport(previous), name="transport_stop")

        options = TransportOptions(
            session_id=self._session_id,
            backup_sync_interval_ms=self._settings.backup_sync_interval_ms,
        )
        try:
            transport = self._transport_factory(store, options)
        except Exception as exc:
            logger.exception(
                "transport_build_failed",
                extra={"error_type": type(exc).__name__},
            )
            self.on_initialization_error(exc)
            return False

        self._transport = transport
        self._wire(transport, self._correlation_id)
        self._start_task = self._spawn(
            self._run_start(transport, self._correlation_id),
            name="transport_start",
        )

        logger.info(
            "transport_initializing",
            extra={
                "trigger": trigger,
                "session_id": self._session_id,
                "connection_correlation_id": self._correlation_id,
            },
        )
        return True

    def _wire(self, transport: TransportClientProtocol, correlation_id: str) -> None:
        handlers: dict[TransportEvent, Callable[..., None]] = {
            TransportEvent.QR: self.on_pairing_code_issued,
            TransportEvent.REMOTE_SESSION_LOADED: self.on_remote_session_restored,
            TransportEvent.REMOTE_SESSION_SAVED: self._on_remote_session_saved,
            TransportEvent.REMOTE_SESSION_FAILED: self._on_remote_session_failed,
            TransportEvent.AUTHENTICATED: self.on_authenticated,
            TransportEvent.AUTH_FAILURE: self.on_authentication_failed,
            TransportEvent.READY: self.on_ready,
            TransportEvent.DISCONNECTED: self.on_disconnected,
            TransportEvent.CHANGE_STATE: self._on_change_state,
            TransportEvent.LOADING_SCREEN: self._on_loading_screen,
        }
        for event, handler in handlers.items():
            transport.on(event, self._bind(transport, event, handler, correlation_id))

    def _bind(
        self,
        transport: TransportClientProtocol,
        event: TransportEvent,
        handler: Callable[..., None],
        correlation_id: str,
    ) -> Callable[..., None]:
        """Descarta eventos de transports substituídos e isola exceções.

        Callbacks disparados fora do event loop (threads do adapter) são
        reenfileirados no loop com `call_soon_threadsafe`: o estado só é
        mutado pelo loop.
        """

        def _dispatch(*args: Any) -> None:
            loop = self._loop
            if loop is not None and not _running_on(loop):
                loop.call_soon_threadsafe(_dispatch, *args)
                return
            if transport is not self._transport:
                logger.debug("transport_event_stale", extra={"event": event.value})
                return
            with correlation_scope(correlation_id):
                try:
                    handler(*args)
                except Exception:
                    logger.exception(
                        "transport_event_handler_failed",
                        extra={"event": event.value},
                    )

        return _dispatch

    async def _run_start(self, transport: TransportClientProtocol, correlation_id: str) -> None:
        with correlation_scope(correlation_id):
            try:
                await transport.start()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                if transport is not self._transport:
                    logger.info(
                        "transport_start_failed_stale",
                        extra={"error_type": type(exc).__name__},
                    )
                    return
                self.on_initialization_error(exc)

    # ──────────────────────────────────────────────────────────────
    # Handlers de eventos do transport
    # ──────────────────────────────────────────────────────────────

    def on_pairing_code_issued(self, code: str) -> None:
        if not self._transition(ConnectionState.AWAITING_PAIRING, "qr"):
            return

        self._pairing = PairingArtifact(raw_code=code, rendered_image=self._qr_renderer(code))
        logger.info(
            "pairing_code_issued",
            extra={"rendered": self._pairing.rendered_image is not None},
        )
        if self._settings.print_qr_terminal:
            logger.info("pairing_code_ascii", extra={"qr_ascii": render_qr_ascii(code)})

        self._broadcaster.notify(PairingEvent(PairingStatus.PAIRING_READY, self._pairing))

    def on_remote_session_restored(self) -> None:
        current = self._fsm.current_state
        if current not in _RESTORABLE_FROM:
            self._log_rejected(current, ConnectionState.AUTHENTICATING, "remote_session_loaded")
            return
        if not self._transition(ConnectionState.AUTHENTICATING, "remote_session_loaded"):
            return
        logger.info("remote_session_restored", extra={"session_id": self._session_id})
        self._broadcaster.notify(PairingEvent(PairingStatus.SESSION_LOADED))

    def on_authenticated(self) -> None:
        if not self._transition(ConnectionState.AUTHENTICATING, "authenticated"):
            return
        logger.info("transport_authenticated")
        self._broadcaster.notify(PairingEvent(PairingStatus.AUTHENTICATED))

    def on_authentication_failed(self, reason: Any = None) -> None:
        if not self._transition(ConnectionState.FAILED, "auth_failure"):
            return
        self._initializing = False
        logger.error("transport_auth_failure", extra={"reason": str(reason)})
        self._broadcaster.notify(PairingEvent(PairingStatus.AUTH_FAILURE))

    def on_ready(self) -> None:
        if not self._transition(ConnectionState.READY, "ready"):
            return
        self._initializing = False
        self._policy.reset()
        logger.info(
            "transport_ready",
            extra={"session_id": self._session_id, "state_history": len(self._fsm.history)},
        )
        self._broadcaster.notify(PairingEvent(PairingStatus.READY))

    def on_disconnected(self, reason: Any = None) -> None:
        if not self._transition(ConnectionState.DISCONNECTED, "disconnected"):
            return
        self._initializing = False
        logger.warning("transport_disconnected", extra={"reason": str(reason)})
        self._schedule_restart(FailureClass.LOGOUT)

    def on_state_conflict(self, kind: str) -> None:
        if not self._transition(ConnectionState.FAILED, "change_state", {"kind": kind}):
            return
        self._initializing = False
        logger.warning("transport_state_conflict", extra={"kind": kind})
        self._schedule_restart(FailureClass.CONFLICT)

    def on_initialization_error(self, error: BaseException | str) -> None:
        if not self._transition(ConnectionState.FAILED, "initialization_error"):
            return
        self._initializing = False

        if is_transient_transport_error(error):
            logger.warning(
                "transport_transient_error",
                extra={"error": str(error)},
            )
            self._schedule_restart(FailureClass.TRANSIENT)
            return

        logger.error(
            "transport_initialization_failed",
            extra={"error": str(error), "error_type": type(error).__name__},
        )

    def _on_change_state(self, state: Any) -> None:
        kind = str(state)
        if kind in CONFLICT_STATES:
            self.on_state_conflict(kind)
            return
        logger.info("transport_state_changed", extra={"transport_state": kind})

    def _on_remote_session_saved(self) -> None:
        logger.info("remote_session_saved", extra={"session_id": self._session_id})

    def _on_remote_session_failed(self, error: Any = None) -> None:
        logger.warning("remote_session_failed", extra={"error": str(error)})

    def _on_loading_screen(self, percent: Any = None, message: Any = None) -> None:
        logger.info(
            "transport_loading",
            extra={"percent": percent, "loading_message": message},
        )

    # ──────────────────────────────────────────────────────────────
    # Sessão e encerramento
    # ──────────────────────────────────────────────────────────────

    async def session_exists(self) -> bool:
        if self._store is None:
            return False
        return await self._store.exists(self._session_id)

    async def reset_session(self) -> bool:
        """Apaga o blob de sessão e descarta o QR corrente.

        O estado da conexão não muda; o próximo handshake parte do zero.

        Returns:
            True se havia blob para apagar.
        """
        if self._store is None:
            logger.warning("reset_session_without_store")
            return False
        deleted = await self._store.delete(self._session_id)
        self._pairing = None
        logger.info(
            "session_reset",
            extra={"session_id": self._session_id, "deleted": deleted},
        )
        return deleted

    async def shutdown(self) -> None:
        """Cancela restart pendente, encerra transport e observers."""
        self._cancel_pending_restart()

        if self._start_task is not None and not self._start_task.done():
            self._start_task.cancel()

        transport, self._transport = self._transport, None
        if transport is not None:
            await self._stop_transport(transport)

        for task in list(self._background_tasks):
            task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

        self._initializing = False
        self._broadcaster.close()
        logger.info("connection_manager_shutdown", extra=self._fsm.get_state_summary())

    # ──────────────────────────────────────────────────────────────
    # Internos
    # ──────────────────────────────────────────────────────────────

    def _snapshot(self) -> PairingEvent:
        if self.is_ready():
            return PairingEvent(PairingStatus.READY)
        if self._pairing is not None:
            return PairingEvent(PairingStatus.PAIRING_READY, self._pairing)
        return PairingEvent(PairingStatus.CHECKING_SESSION)

    def _transition(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        current = self._fsm.current_state
        result = self._fsm.transition(target, trigger, metadata)
        if not result.success:
            self._log_rejected(current, target, trigger)
            return False

        if target != ConnectionState.AWAITING_PAIRING:
            self._pairing = None

        if result.transition is not None:
            logger.info("connection_state_transition", extra=result.transition.to_log_dict())
        return True

    def _log_rejected(
        self,
        current: ConnectionState,
        target: ConnectionState,
        trigger: str,
    ) -> None:
        logger.warning(
            "connection_event_rejected",
            extra={
                "from_state": current.value,
                "to_state": target.value,
                "trigger": trigger,
            },
        )

    def _schedule_restart(self, failure_class: FailureClass) -> None:
        decision = self._policy.on_failure(failure_class)
        if isinstance(decision, GiveUp):
            # Parado em FAILED até initialize manual
            self._cancel_pending_restart()
            self._transition(ConnectionState.FAILED, "restart_ceiling_reached")
            return

        self._cancel_pending_restart()
        loop = asyncio.get_running_loop()
        self._restart_handle = loop.call_later(decision.delay_seconds, self._reinitialize)

    def _cancel_pending_restart(self) -> None:
        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

    def _spawn(self, coro: Any, *, name: str) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _stop_transport(self, transport: TransportClientProtocol) -> None:
        try:
            await transport.stop()
        except Exception as exc:
            logger.warning(
                "transport_stop_failed",
                extra={"error_type": type(exc).__name__},
            )


def _running_on(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False
