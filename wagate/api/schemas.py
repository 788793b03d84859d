"""Request/response models for the HTTP API"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wagate.services.groups import GroupSummary


class _SendBase(BaseModel):
    # Callers often post phone numbers as JSON numbers
    model_config = ConfigDict(coerce_numbers_to_str=True)

    message: str | None = None
    attachment: str | None = None


class SendToContactRequest(_SendBase):
    phone: str | None = None


class SendToGroupRequest(_SendBase):
    group: str | None = None


class SendRequest(_SendBase):
    """Unified send: ``phone`` wins when both recipients are given."""

    phone: str | None = None
    group: str | None = None


class ActionResponse(BaseModel):
    success: bool = True
    message: str


class GroupsResponse(BaseModel):
    success: bool = True
    groups: list[GroupSummary]


class RefreshGroupsResponse(GroupsResponse):
    message: str = "Groups refreshed successfully"


class StatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    connected: bool
    needs_qr: bool = Field(serialization_alias="needsQR")


class WebhookEvent(BaseModel):
    """One Baileys event forwarded by the sidecar."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    event: str
    data: Any = None
