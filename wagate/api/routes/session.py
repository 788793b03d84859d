"""Connection status, QR pairing page and dashboard"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from wagate.api.dependencies import Gateway
from wagate.api.schemas import ActionResponse, StatusResponse
from wagate.core.exceptions import AppException, NotFoundError
from wagate.core.logging import log
from wagate.web.pages import render_index, render_qr_page
from wagate.web.qr import render_qr_data_url

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def dashboard(gateway: Gateway):
    """Status, QR link and group list for a human operator."""
    return HTMLResponse(render_index(gateway.app_name))


@router.get("/status", response_model=StatusResponse)
async def get_status(gateway: Gateway):
    connection = gateway.connection
    return StatusResponse(connected=connection.connected, needs_qr=connection.needs_qr)


@router.get("/qr", response_class=HTMLResponse)
async def get_qr(gateway: Gateway):
    """Pairing page with the current QR code rendered inline."""
    qr = gateway.connection.qr
    if not qr:
        raise NotFoundError("QR code not available")

    try:
        qr_image = render_qr_data_url(qr)
    except Exception as e:
        log.error(f"Error generating QR code: {e}")
        raise AppException(str(e), status_code=500)

    return HTMLResponse(render_qr_page(gateway.app_name, qr_image))


@router.post("/reset", response_model=ActionResponse)
async def reset_session(gateway: Gateway):
    """Forget the linked device and start a fresh pairing."""
    await gateway.connection.reset()
    return ActionResponse(message="Session reset. Scan the new QR code to link a device.")
