"""QR image rendering for the pairing page"""

import base64
import io

import qrcode


def render_qr_data_url(payload: str) -> str:
    """Render a pairing payload as an inline PNG ``data:`` URL."""
    img = qrcode.make(payload)
    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    encoded = base64.b64encode(buffered.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"
