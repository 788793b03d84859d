"""Group listing and refresh"""

from fastapi import APIRouter

from wagate.api.dependencies import ConnectedSession, Gateway
from wagate.api.schemas import GroupsResponse, RefreshGroupsResponse

router = APIRouter()


@router.get("/groups", response_model=GroupsResponse)
async def list_groups(gateway: Gateway, _session: ConnectedSession):
    """Cached groups; never touches the network."""
    return GroupsResponse(groups=gateway.groups.list())


@router.post("/refresh-groups", response_model=RefreshGroupsResponse)
async def refresh_groups(gateway: Gateway, _session: ConnectedSession):
    """Re-enumerate groups from WhatsApp and rewrite the snapshot."""
    groups = await gateway.groups.refresh()
    return RefreshGroupsResponse(groups=groups)
