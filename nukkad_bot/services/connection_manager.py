import logging
from typing import Awaitable, Callable, Optional

from nukkad_bot.logging_config import get_logger, log_connection
from nukkad_bot.schemas.status import ConnectionStatus
from nukkad_bot.schemas.whatsapp import ConnectionUpdate, CredsUpdate, InboundEvent, LastDisconnect, MessagesUpsert
from nukkad_bot.services.alert_service import alert_warning
from nukkad_bot.services.auth_state import AuthStateStore
from nukkad_bot.services.connection_state import (
    TERMINAL_STATES,
    ConnectionState,
    DisconnectCause,
    classify_disconnect,
    is_terminal,
    terminal_state_for,
    transition,
)
from nukkad_bot.services.orchestrator import ConversationOrchestrator
from nukkad_bot.services.scheduler import Scheduler, TimerHandle
from nukkad_bot.services.transport import (
    PRESENCE_AVAILABLE,
    PRESENCE_COMPOSING,
    PRESENCE_PAUSED,
    Transport,
    TransportDeliveryFailure,
)

logger = get_logger("connection_manager")

Alerter = Callable[[str, Optional[dict]], Awaitable[bool]]


class ConnectionManager:
    """Owns the WhatsApp connection lifecycle and the inbound event intake.

    State moves Disconnected -> Pairing -> Connected. Recoverable drops go through
    Reconnecting with one pending retry timer at a time; terminal drops (logout,
    forbidden, bad session) stop there until a new pairing cycle is started.
    """

    def __init__(
        self,
        transport: Transport,
        auth_state: AuthStateStore,
        scheduler: Scheduler,
        orchestrator: ConversationOrchestrator,
        keepalive_interval: float = 30.0,
        reconnect_delay: float = 5.0,
        connect_retry_delay: float = 10.0,
        alerter: Optional[Alerter] = None,
    ):
        self.transport = transport
        self.auth_state = auth_state
        self.scheduler = scheduler
        self.orchestrator = orchestrator
        self.keepalive_interval = keepalive_interval
        self.reconnect_delay = reconnect_delay
        self.connect_retry_delay = connect_retry_delay
        self._alert = alerter or alert_warning

        self.state = ConnectionState.DISCONNECTED
        self.pairing_artifact: Optional[str] = None
        self.reconnect_attempts = 0
        self.last_cause: Optional[DisconnectCause] = None
        self._running = False
        self._credentials: Optional[dict] = None
        self._heartbeat: Optional[TimerHandle] = None
        self._reconnect: Optional[TimerHandle] = None

    # --- State ---------------------------------------------------------------

    def _transition(self, to_state: ConnectionState) -> None:
        if self.state == to_state:
            return
        previous = self.state
        self.state = transition(previous, to_state)
        if previous == ConnectionState.CONNECTED:
            self._stop_heartbeat()
        logger.info(
            "Connection state changed",
            extra={"context": {"from": previous.value, "to": to_state.value}},
        )

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat is not None

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect is not None

    def status(self) -> ConnectionStatus:
        return ConnectionStatus(
            connection_state=self.state.value,
            pairing_artifact=self.pairing_artifact,
            reconnect_attempts=self.reconnect_attempts,
            last_disconnect_cause=self.last_cause.value if self.last_cause else None,
            heartbeat_running=self.heartbeat_running,
        )

    # --- Lifecycle -----------------------------------------------------------

    async def start(self) -> None:
        """Begin a pairing cycle with whatever credentials are stored."""
        self._running = True
        log_connection("STARTING")
        self._credentials = self.auth_state.load()
        if self.state in (ConnectionState.DISCONNECTED, ConnectionState.LOGGED_OUT):
            self._transition(ConnectionState.PAIRING)
        await self._connect()

    async def stop(self) -> None:
        self._running = False
        self._stop_heartbeat()
        self._cancel_reconnect()
        self.pairing_artifact = None
        self._transition(ConnectionState.DISCONNECTED)
        try:
            await self.transport.disconnect()
        except TransportDeliveryFailure as e:
            logger.warning(f"Gateway disconnect failed: {e}")
        await self.transport.aclose()
        log_connection("STOPPED")

    async def _connect(self) -> bool:
        try:
            await self.transport.connect(self._credentials)
        except TransportDeliveryFailure as e:
            log_connection("CONNECT_FAILED", logging.ERROR, error=str(e), retry_in=self.connect_retry_delay)
            self._transition(ConnectionState.RECONNECTING)
            self._schedule_reconnect(self.connect_retry_delay)
            return False
        return True

    def _schedule_reconnect(self, delay: float) -> None:
        if self._reconnect is not None:
            return
        self._reconnect = self.scheduler.call_later(delay, self._attempt_reconnect)

    def _cancel_reconnect(self) -> None:
        if self._reconnect is None:
            return
        self._reconnect.cancel()
        self._reconnect = None

    async def _attempt_reconnect(self) -> None:
        self._reconnect = None
        if not self._running or self.state != ConnectionState.RECONNECTING:
            return
        self.reconnect_attempts += 1
        log_connection("RECONNECTING", attempt=self.reconnect_attempts)
        await self._connect()

    # --- Heartbeat -----------------------------------------------------------

    def _start_heartbeat(self) -> None:
        if self._heartbeat is not None:
            return
        self._heartbeat = self.scheduler.call_every(self.keepalive_interval, self._send_heartbeat)

    def _stop_heartbeat(self) -> None:
        if self._heartbeat is None:
            return
        self._heartbeat.cancel()
        self._heartbeat = None

    async def _send_heartbeat(self) -> None:
        if self.state != ConnectionState.CONNECTED:
            return
        try:
            await self.transport.send_presence(PRESENCE_AVAILABLE)
        except TransportDeliveryFailure as e:
            logger.warning(f"Keepalive presence failed: {e}")

    # --- Gateway events ------------------------------------------------------

    async def on_connection_update(self, update: ConnectionUpdate) -> None:
        if update.qr:
            self._on_pairing_artifact(update.qr)

        if update.connection == "open":
            self._on_open()
        elif update.connection == "close":
            await self._on_close(update.lastDisconnect)
        elif update.connection == "connecting":
            log_connection("CONNECTING", logging.DEBUG)

    def _on_pairing_artifact(self, artifact: str) -> None:
        if self.state == ConnectionState.CONNECTED:
            logger.warning("Pairing code received while connected, ignoring")
            return
        self._cancel_reconnect()
        self._transition(ConnectionState.PAIRING)
        self.pairing_artifact = artifact
        log_connection("QR_GENERATED")

    def _on_open(self) -> None:
        if self.state in TERMINAL_STATES:
            if not self._running and self.state == ConnectionState.DISCONNECTED:
                logger.warning("Connection opened while stopped, ignoring")
                return
            # Gateway finished a pairing on its own after a terminal drop
            self._transition(ConnectionState.PAIRING)
        self._cancel_reconnect()
        self._transition(ConnectionState.CONNECTED)
        self.pairing_artifact = None
        self.reconnect_attempts = 0
        self.last_cause = None
        self._start_heartbeat()
        log_connection("CONNECTED")

    async def _on_close(self, last_disconnect: Optional[LastDisconnect]) -> None:
        status_code = last_disconnect.statusCode if last_disconnect else None
        reason = last_disconnect.reason if last_disconnect else None
        cause = classify_disconnect(status_code, reason)
        self.last_cause = cause
        self._stop_heartbeat()
        log_connection("DISCONNECTED", cause=cause.value, status_code=status_code)

        if not self._running or self.state in TERMINAL_STATES:
            return

        if is_terminal(cause):
            self._cancel_reconnect()
            self.pairing_artifact = None
            self._transition(terminal_state_for(cause))
            log_connection(self.state.value.upper(), logging.WARNING, cause=cause.value)
            await self._alert(
                "WhatsApp session ended, re-pairing required",
                {"cause": cause.value, "status_code": status_code},
            )
            return

        self._transition(ConnectionState.RECONNECTING)
        self._schedule_reconnect(self.reconnect_delay)
        log_connection("RECONNECT_SCHEDULED", delay=self.reconnect_delay)

    def on_credentials_update(self, update: CredsUpdate) -> None:
        self.auth_state.save(update.creds)
        self._credentials = update.creds
        log_connection("CREDENTIALS_SAVED", logging.DEBUG)

    # --- Inbound intake ------------------------------------------------------

    async def handle_upsert(self, upsert: MessagesUpsert) -> int:
        processed = 0
        for message in upsert.messages:
            if await self.handle_event(InboundEvent.from_message(message)):
                processed += 1
        return processed

    async def handle_event(self, event: InboundEvent) -> bool:
        """Run one turn for an accepted event. Returns False when the event is filtered out."""
        if event.is_self or event.is_group:
            return False
        if not event.selection_id and not event.text_content:
            return False

        jid = event.sender_id
        if event.message_id:
            try:
                await self.transport.mark_read(jid, event.message_id, event.participant)
            except TransportDeliveryFailure as e:
                logger.warning(f"Mark read failed: {e}", extra={"context": {"jid": jid}})

        await self._set_presence(PRESENCE_COMPOSING, jid)
        try:
            await self.orchestrator.handle_turn(event)
        finally:
            await self._set_presence(PRESENCE_PAUSED, jid)
        return True

    async def _set_presence(self, presence: str, jid: str) -> None:
        try:
            await self.transport.send_presence(presence, jid)
        except TransportDeliveryFailure as e:
            logger.warning(f"Presence update failed: {e}", extra={"context": {"jid": jid, "presence": presence}})
