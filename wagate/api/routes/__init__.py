"""HTTP routes"""

from fastapi import APIRouter

from .groups import router as groups_router
from .live import router as live_router
from .messages import router as messages_router
from .session import router as session_router
from .webhook import router as webhook_router

router = APIRouter()

# Dashboard, status, QR pairing
router.include_router(session_router, tags=["session"])

router.include_router(groups_router, tags=["groups"])
router.include_router(messages_router, tags=["messages"])

# Live status push to browser viewers
router.include_router(live_router, tags=["live"])

# Events from the Baileys sidecar
router.include_router(webhook_router, prefix="/webhook", tags=["webhook"])
