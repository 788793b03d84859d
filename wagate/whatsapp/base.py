"""Protocol client seam.

The WhatsApp protocol itself lives in Baileys. The gateway only needs a way
to open a session from stored credentials and a handle that can send, list
groups and report what happens to it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from wagate.core.logging import log
from wagate.whatsapp.events import SessionEvent, parse_event

EventListener = Callable[[SessionEvent], Awaitable[None]]


@dataclass
class CredentialState:
    """Opaque Baileys auth state: ``creds`` plus the signal ``keys`` by type."""

    creds: dict[str, Any] = field(default_factory=dict)
    keys: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def registered(self) -> bool:
        return bool(self.creds.get("me"))


class Session(ABC):
    """A live (or starting) session handle."""

    def __init__(self, session_id: str, listener: EventListener):
        self.session_id = session_id
        self._listener = listener

    async def deliver(self, event: str, data: Any) -> int:
        """Feed one raw event from the protocol client to the listener.

        Returns the number of session events dispatched.
        """
        events = parse_event(event, data)
        if not events:
            log.debug(f"Ignoring session event {event}")
        for item in events:
            await self._listener(item)
        return len(events)

    @abstractmethod
    async def send_message(self, jid: str, content: dict[str, Any]) -> dict[str, Any]:
        """Send ``content`` (Baileys AnyMessageContent) to ``jid``."""

    @abstractmethod
    async def group_fetch_all_participating(self) -> dict[str, dict[str, Any]]:
        """Return group metadata keyed by group JID."""

    @abstractmethod
    async def close(self) -> None:
        """Tear the session down without logging out."""


class SessionFactory(ABC):
    """Creates session handles from stored credentials."""

    @abstractmethod
    async def open_session(self, credentials: CredentialState, listener: EventListener) -> Session:
        pass
