"""Send text/image messages to contacts and groups"""

from fastapi import APIRouter

from wagate.api.dependencies import ConnectedSession
from wagate.api.schemas import ActionResponse, SendRequest, SendToContactRequest, SendToGroupRequest
from wagate.core.exceptions import ValidationError
from wagate.services.messaging import send_message
from wagate.whatsapp.jid import normalize_group, normalize_phone

router = APIRouter()


@router.post("/send-to-contact", response_model=ActionResponse)
async def send_to_contact(session: ConnectedSession, request: SendToContactRequest | None = None):
    request = request or SendToContactRequest()
    if not request.phone or not request.message:
        raise ValidationError("Phone number and message are required")

    await send_message(session, normalize_phone(request.phone), request.message, request.attachment)
    return ActionResponse(message="Message sent successfully")


@router.post("/send-to-group", response_model=ActionResponse)
async def send_to_group(session: ConnectedSession, request: SendToGroupRequest | None = None):
    request = request or SendToGroupRequest()
    if not request.group or not request.message:
        raise ValidationError("Group ID and message are required")

    await send_message(session, normalize_group(request.group), request.message, request.attachment)
    return ActionResponse(message="Message sent to group successfully")


@router.post("/send", response_model=ActionResponse)
async def send(session: ConnectedSession, request: SendRequest | None = None):
    """Unified endpoint for contacts and groups."""
    request = request or SendRequest()
    if (not request.phone and not request.group) or not request.message:
        raise ValidationError("Either phone number or group ID is required, along with a message")

    recipient = normalize_phone(request.phone) if request.phone else normalize_group(request.group)
    await send_message(session, recipient, request.message, request.attachment)
    return ActionResponse(message="Message sent successfully")
