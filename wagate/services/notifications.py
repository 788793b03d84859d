"""Live status push to browser viewers over WebSocket"""

import asyncio
from typing import Any

from fastapi import WebSocket

from wagate.core.logging import log

STATUS_EVENT = "status"
QR_EVENT = "qr"


class NotificationChannel:
    """Best-effort fan-out. Late subscribers get no history."""

    def __init__(self, send_timeout: float = 2.0):
        self.send_timeout = send_timeout
        self._clients: set[WebSocket] = set()

    @property
    def subscribers(self) -> int:
        return len(self._clients)

    def subscribe(self, websocket: WebSocket) -> None:
        self._clients.add(websocket)
        log.info(f"Viewer connected ({len(self._clients)} total)")

    def unsubscribe(self, websocket: WebSocket) -> None:
        if websocket in self._clients:
            self._clients.discard(websocket)
            log.info(f"Viewer disconnected ({len(self._clients)} total)")

    async def publish(self, event: str, data: Any) -> None:
        payload = {"event": event, "data": data}
        clients = list(self._clients)
        if not clients:
            return
        await asyncio.gather(*(self._send(client, payload) for client in clients))

    async def _send(self, client: WebSocket, payload: dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(client.send_json(payload), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            log.warning("WebSocket send timeout, removing viewer")
            self.unsubscribe(client)
        except Exception as e:
            log.info(f"WebSocket connection lost: {e}")
            self.unsubscribe(client)

    async def publish_status(self, connected: bool, message: str) -> None:
        await self.publish(STATUS_EVENT, {"connected": connected, "message": message})

    async def publish_qr(self, payload: str) -> None:
        await self.publish(QR_EVENT, {"payload": payload})
