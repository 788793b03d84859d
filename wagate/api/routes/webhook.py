"""Event webhook for the Baileys sidecar.

The sidecar posts every ``sock.ev`` event it cares about here. Events for a
session we never started, or that we do not handle, are acknowledged and
dropped so the sidecar does not retry them.
"""

from typing import Annotated

from fastapi import APIRouter, Header

from wagate.api.dependencies import Gateway
from wagate.api.schemas import WebhookEvent
from wagate.core.exceptions import AuthenticationError
from wagate.core.logging import log

router = APIRouter()


@router.post("/events")
async def handle_sidecar_event(
    payload: WebhookEvent,
    gateway: Gateway,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
):
    if x_api_key != gateway.webhook_api_key:
        raise AuthenticationError()

    deliver = getattr(gateway.factory, "deliver", None)
    if deliver is None:
        return {"status": "ignored", "reason": "session factory does not accept webhook events"}

    log.debug(f"Sidecar event {payload.event} for session {payload.session_id}")
    dispatched = await deliver(payload.session_id, payload.event, payload.data)

    if dispatched is None:
        log.warning(f"Event {payload.event} for unknown session {payload.session_id}")
        return {"status": "ignored", "reason": "unknown session"}
    if dispatched == 0:
        return {"status": "ignored", "reason": "unhandled event"}
    return {"status": "received"}
