"""Baileys sidecar client.

The Node sidecar owns the actual ``makeWASocket`` instance. We start it with
our stored credentials and it posts the socket's events back to
``WEBHOOK_URL``.
"""

from typing import Any

import httpx

from wagate.core.exceptions import CollaboratorError
from wagate.core.logging import log
from wagate.whatsapp.base import CredentialState, EventListener, Session, SessionFactory


def _error_message(response: httpx.Response) -> str:
    """Pull the sidecar's own error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class BaileysClient:
    """Thin httpx wrapper around the sidecar REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def headers(self) -> dict:
        return {
            "X-API-Key": self.api_key,
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        path: str,
        operation: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    json=json,
                    headers=self.headers,
                )
        except httpx.HTTPError as e:
            log.error(f"Baileys {operation} failed: {e}")
            raise CollaboratorError(str(e) or type(e).__name__, operation=operation)

        if response.status_code >= 400:
            message = _error_message(response)
            log.error(f"Baileys {operation} rejected: {response.status_code} {message}")
            raise CollaboratorError(message, operation=operation)

        if not response.content:
            return {}
        return response.json()


class BaileysSession(Session):
    def __init__(self, session_id: str, listener: EventListener, client: BaileysClient):
        super().__init__(session_id, listener)
        self.client = client

    async def send_message(self, jid: str, content: dict[str, Any]) -> dict[str, Any]:
        return await self.client.request(
            "POST",
            f"/sessions/{self.session_id}/send",
            operation="send",
            json={"to": jid, "content": content},
        )

    async def group_fetch_all_participating(self) -> dict[str, dict[str, Any]]:
        data = await self.client.request(
            "GET",
            f"/sessions/{self.session_id}/groups",
            operation="groups",
        )
        if isinstance(data, dict) and isinstance(data.get("groups"), dict):
            return data["groups"]
        return data or {}

    async def close(self) -> None:
        await self.client.request(
            "POST",
            f"/sessions/{self.session_id}/disconnect",
            operation="disconnect",
        )


class BaileysSessionFactory(SessionFactory):
    """Starts sidecar sessions and routes the sidecar's webhook events to them."""

    def __init__(
        self,
        client: BaileysClient,
        session_id: str,
        webhook_url: str,
        browser: list[str] | None = None,
    ):
        self.client = client
        self.session_id = session_id
        self.webhook_url = webhook_url
        self.browser = list(browser or [])
        self._handles: dict[str, BaileysSession] = {}

    async def open_session(self, credentials: CredentialState, listener: EventListener) -> Session:
        log.info(
            f"Starting Baileys session {self.session_id} "
            f"({'registered' if credentials.registered else 'new device'})"
        )
        session = BaileysSession(self.session_id, listener, self.client)
        # Registered before the start call: the sidecar may emit a QR right away.
        previous = self._handles.get(self.session_id)
        self._handles[self.session_id] = session
        try:
            await self.client.request(
                "POST",
                f"/sessions/{self.session_id}/start",
                operation="start",
                json={
                    "creds": credentials.creds,
                    "keys": credentials.keys,
                    "webhookUrl": self.webhook_url,
                    "browser": self.browser,
                },
            )
        except CollaboratorError:
            if previous is None:
                self._handles.pop(self.session_id, None)
            else:
                self._handles[self.session_id] = previous
            raise
        return session

    async def deliver(self, session_id: str, event: str, data: Any) -> int | None:
        """Route one webhook event to its session handle.

        Returns None when no handle exists for ``session_id``.
        """
        session = self._handles.get(session_id)
        if session is None:
            return None
        return await session.deliver(event, data)
