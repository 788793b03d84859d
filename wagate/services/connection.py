"""Connection manager: owns the one Baileys session of this gateway.

Every event coming out of the session goes through ``dispatch``; nothing else
mutates the connection state.
"""

import asyncio
import enum
from typing import Awaitable, Callable

from wagate.core.exceptions import AppException, CollaboratorError, PersistenceError
from wagate.core.logging import log
from wagate.core.scheduler import TaskScheduler
from wagate.services.credentials import CredentialStore
from wagate.services.notifications import NotificationChannel
from wagate.whatsapp.base import Session, SessionFactory
from wagate.whatsapp.events import (
    CredentialsUpdated,
    GroupsChanged,
    KeysUpdated,
    QrIssued,
    SessionClosed,
    SessionEvent,
    SessionOpened,
)

RECONNECT = "reconnect"
CONNECT = "connect"
REFRESH_AFTER_CONNECT = "refresh-after-connect"


class ConnectionStatus(str, enum.Enum):
    DISCONNECTED = "disconnected"
    AWAITING_SCAN = "awaiting_scan"
    CONNECTED = "connected"


class ConnectionManager:
    def __init__(
        self,
        factory: SessionFactory,
        credentials: CredentialStore,
        notifications: NotificationChannel,
        scheduler: TaskScheduler,
        refresh_delay_after_connect: float = 2.0,
        refresh_delay_after_group_change: float = 1.0,
        sidecar_retry_delay: float = 5.0,
    ):
        self.factory = factory
        self.credentials = credentials
        self.notifications = notifications
        self.scheduler = scheduler
        self.refresh_delay_after_connect = refresh_delay_after_connect
        self.refresh_delay_after_group_change = refresh_delay_after_group_change
        self.sidecar_retry_delay = sidecar_retry_delay

        self.status = ConnectionStatus.DISCONNECTED
        self.qr: str | None = None
        self.logged_out = False
        self.session: Session | None = None
        self.connect_attempts = 0
        self.refresh_groups: Callable[[], Awaitable[object]] | None = None

        self._connect_lock = asyncio.Lock()
        # Bumped on every close and reset; a start that spans a bump is stale
        self._generation = 0

    @property
    def connected(self) -> bool:
        return self.status == ConnectionStatus.CONNECTED and self.session is not None

    @property
    def connecting(self) -> bool:
        return self._connect_lock.locked()

    @property
    def needs_qr(self) -> bool:
        return not self.connected and self.qr is not None

    def connected_session(self) -> Session | None:
        return self.session if self.connected else None

    # ─── Lifecycle ───

    def start(self) -> None:
        """Kick off the first connection without blocking startup."""
        self.scheduler.schedule(CONNECT, 0, self._connect_or_retry)

    async def connect(self) -> bool:
        """Open a new session from the stored credentials.

        Returns False when nothing was started: a connect is already in
        flight, the session is already up, or the device was logged out. Also
        False when the session closed or was reset before its start returned;
        the handle is then discarded and one reconnect is scheduled.
        """
        if self.logged_out:
            log.warning("Logged out; not reconnecting until the session is reset")
            return False
        if self.connecting:
            log.debug("Connect already in flight")
            return False
        if self.connected:
            return False

        async with self._connect_lock:
            self.connect_attempts += 1
            generation = self._generation
            credentials = self.credentials.load()
            session = await self.factory.open_session(credentials, self.dispatch)

            if generation == self._generation:
                self.session = session
                log.info(f"Session {session.session_id} started (attempt {self.connect_attempts})")
                return True

            # Closed or reset while the start was in flight
            log.warning(f"Session {session.session_id} was dropped while starting; discarding it")
            await self._close_handle(session)

        if not self.logged_out:
            self.scheduler.schedule(RECONNECT, 0, self._connect_or_retry)
        return False

    async def _connect_or_retry(self) -> None:
        try:
            await self.connect()
        except CollaboratorError as e:
            log.error(f"Could not start session: {e.message}; retrying in {self.sidecar_retry_delay}s")
            self.scheduler.schedule(RECONNECT, self.sidecar_retry_delay, self._connect_or_retry)

    async def reset(self) -> None:
        """Drop the linked device and start over with a fresh pairing.

        The manager always ends up restarting. If the stored credentials could
        not be wiped the restart still happens and the failure is raised
        afterwards.
        """
        self._generation += 1
        await self._close_session()

        clear_error = None
        try:
            self.credentials.clear()
        except PersistenceError as e:
            log.error(f"Failed to clear credentials: {e}")
            clear_error = e

        self.logged_out = False
        self.status = ConnectionStatus.DISCONNECTED
        self.qr = None
        await self.notifications.publish_status(False, "Session reset")
        # An in-flight start notices the reset and reconnects by itself
        if not self.connecting:
            self.start()

        if clear_error is not None:
            raise AppException(f"Session restarted but stored credentials could not be cleared: {clear_error.reason}")

    async def close(self) -> None:
        await self.scheduler.cancel_all()
        await self._close_session()

    async def _close_session(self) -> None:
        session, self.session = self.session, None
        if session is not None:
            await self._close_handle(session)

    async def _close_handle(self, session: Session) -> None:
        try:
            await session.close()
        except CollaboratorError as e:
            log.warning(f"Error closing session {session.session_id}: {e.message}")

    # ─── Event dispatch ───

    async def dispatch(self, event: SessionEvent) -> None:
        if isinstance(event, QrIssued):
            await self._on_qr(event)
        elif isinstance(event, SessionOpened):
            await self._on_open()
        elif isinstance(event, SessionClosed):
            await self._on_close(event)
        elif isinstance(event, CredentialsUpdated):
            self._save(self.credentials.save_creds, event.creds, "creds")
        elif isinstance(event, KeysUpdated):
            self._save(self.credentials.save_keys, event.keys, "keys")
        elif isinstance(event, GroupsChanged):
            log.info(f"Group update received: {event.trigger}")
            self.scheduler.schedule(event.trigger, self.refresh_delay_after_group_change, self._refresh_groups)

    async def _on_qr(self, event: QrIssued) -> None:
        self.qr = event.payload
        self.status = ConnectionStatus.AWAITING_SCAN
        log.info("QR Code generated. Scan to authenticate.")
        await self.notifications.publish_qr(event.payload)

    async def _on_open(self) -> None:
        self.status = ConnectionStatus.CONNECTED
        self.qr = None
        log.info("WhatsApp connection established!")
        await self.notifications.publish_status(True, "Connected")
        self.scheduler.schedule(REFRESH_AFTER_CONNECT, self.refresh_delay_after_connect, self._refresh_groups)

    async def _on_close(self, event: SessionClosed) -> None:
        log.info(f"Connection closed due to {event.reason} (status {event.status_code})")
        self.status = ConnectionStatus.DISCONNECTED
        self.session = None
        self._generation += 1

        if event.logged_out:
            self.logged_out = True
            log.warning("Disconnected permanently. Reset the session to pair again.")
            await self.notifications.publish_status(False, "Disconnected permanently")
            return

        log.info("Reconnecting...")
        await self.notifications.publish_status(False, "Reconnecting")
        if self.connecting:
            log.debug("Close arrived during start; the pending start reconnects")
            return
        # TODO: exponential backoff; a session that keeps closing is retried in a tight loop
        self.scheduler.schedule(RECONNECT, 0, self._connect_or_retry)

    def _save(self, save, payload, what: str) -> None:
        try:
            save(payload)
        except PersistenceError as e:
            log.error(f"Failed to save {what}: {e}")

    async def _refresh_groups(self) -> None:
        if not self.connected or self.refresh_groups is None:
            log.debug("Skipping group refresh, session not connected")
            return
        await self.refresh_groups()
