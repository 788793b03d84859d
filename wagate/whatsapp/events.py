"""Session events pushed by the Baileys sidecar.

The sidecar forwards Baileys' ``sock.ev`` stream as
``{"sessionId": ..., "event": ..., "data": ...}``. ``parse_event`` turns one
such payload into the small set of variants the connection manager
dispatches on.
"""

from dataclasses import dataclass, field
from typing import Any

# Baileys DisconnectReason.loggedOut
LOGGED_OUT_STATUS = 401

CONNECTION_UPDATE = "connection.update"
CREDS_UPDATE = "creds.update"
KEYS_UPDATE = "keys.update"
GROUPS_UPDATE = "groups.update"
GROUP_PARTICIPANTS_UPDATE = "group-participants.update"

GROUP_CHANGE_EVENTS = (GROUPS_UPDATE, GROUP_PARTICIPANTS_UPDATE)


@dataclass(frozen=True)
class QrIssued:
    payload: str


@dataclass(frozen=True)
class SessionOpened:
    pass


@dataclass(frozen=True)
class SessionClosed:
    status_code: int | None = None
    reason: str | None = None

    @property
    def logged_out(self) -> bool:
        return self.status_code == LOGGED_OUT_STATUS


@dataclass(frozen=True)
class CredentialsUpdated:
    creds: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class KeysUpdated:
    keys: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class GroupsChanged:
    trigger: str
    data: Any = None


SessionEvent = QrIssued | SessionOpened | SessionClosed | CredentialsUpdated | KeysUpdated | GroupsChanged


def _parse_connection_update(data: dict[str, Any]) -> list[SessionEvent]:
    events: list[SessionEvent] = []

    qr = data.get("qr")
    if qr:
        events.append(QrIssued(payload=str(qr)))

    connection = data.get("connection")
    if connection == "open":
        events.append(SessionOpened())
    elif connection == "close":
        last = data.get("lastDisconnect") or {}
        status_code = last.get("statusCode")
        events.append(
            SessionClosed(
                status_code=int(status_code) if status_code is not None else None,
                reason=last.get("message"),
            )
        )

    return events


def parse_event(event: str, data: Any) -> list[SessionEvent]:
    """Map a raw sidecar event to zero or more session events."""
    if event == CONNECTION_UPDATE:
        return _parse_connection_update(data or {})
    if event == CREDS_UPDATE:
        return [CredentialsUpdated(creds=dict(data or {}))]
    if event == KEYS_UPDATE:
        return [KeysUpdated(keys=dict(data or {}))]
    if event in GROUP_CHANGE_EVENTS:
        return [GroupsChanged(trigger=event, data=data)]
    return []
