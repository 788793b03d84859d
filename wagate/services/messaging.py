"""Outbound message sending"""

from typing import Any

from wagate.core.logging import log
from wagate.whatsapp.base import Session


def build_content(message: str, attachment: str | None = None) -> dict[str, Any]:
    """Baileys message content: plain text, or an image with ``message`` as caption."""
    if attachment:
        return {"image": {"url": attachment}, "caption": message}
    return {"text": message}


async def send_message(session: Session, jid: str, message: str, attachment: str | None = None) -> None:
    kind = "image" if attachment else "text"
    log.info(f"Sending {kind} message to {jid}")
    await session.send_message(jid, build_content(message, attachment))
