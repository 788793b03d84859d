"""WebSocket push channel for dashboard viewers"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from wagate.api.dependencies import Gateway
from wagate.core.logging import log

router = APIRouter()


@router.websocket("/ws")
async def live_updates(websocket: WebSocket, gateway: Gateway):
    """Push ``status`` and ``qr`` events. Anything the viewer sends is ignored."""
    await websocket.accept()
    channel = gateway.notifications
    channel.subscribe(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    except Exception as e:
        log.warning(f"WebSocket error: {e}")
    finally:
        channel.unsubscribe(websocket)
