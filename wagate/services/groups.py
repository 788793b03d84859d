"""Group cache mirrored to a flat JSON file"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field

from wagate.core.exceptions import NotConnectedError, PersistenceError
from wagate.core.files import read_json, write_json_atomic
from wagate.core.logging import log
from wagate.whatsapp.base import Session

UNKNOWN_GROUP_NAME = "Unknown Group"


class GroupSummary(BaseModel):
    """One group as shown by the API and stored in the snapshot file."""

    id: str
    name: str = UNKNOWN_GROUP_NAME
    participants: int = Field(default=0, ge=0)
    creation: int | None = None


def summarize(group_id: str, metadata: dict[str, Any] | None) -> GroupSummary:
    """Map Baileys GroupMetadata to a summary."""
    metadata = metadata or {}
    participants = metadata.get("participants")
    return GroupSummary(
        id=group_id,
        name=metadata.get("subject") or UNKNOWN_GROUP_NAME,
        participants=len(participants) if participants else 0,
        creation=metadata.get("creation") or None,
    )


class GroupCache:
    def __init__(self, path: str | Path, session_provider: Callable[[], Session | None]):
        self.path = Path(path)
        self._session_provider = session_provider
        self._groups: list[GroupSummary] = []

    def list(self) -> list[GroupSummary]:
        return list(self._groups)

    def load(self) -> list[GroupSummary]:
        """Pre-populate from the last snapshot. Stale data is fine until the first refresh."""
        if not self.path.exists():
            self._write([])
            return self.list()

        try:
            raw = read_json(self.path)
            self._groups = [GroupSummary.model_validate(item) for item in raw or []]
            log.info(f"Loaded {len(self._groups)} groups from file")
        except (PersistenceError, ValueError, TypeError) as e:
            log.warning(f"Error loading groups file, starting empty: {e}")
            self._groups = []
        return self.list()

    async def refresh(self) -> list[GroupSummary]:
        """Re-enumerate groups from the live session and persist the result."""
        session = self._session_provider()
        if session is None:
            raise NotConnectedError()

        log.info("Fetching groups...")
        chats = await session.group_fetch_all_participating()

        groups = [summarize(group_id, metadata) for group_id, metadata in chats.items()]

        self._groups = groups
        self._write(groups)
        log.info(f"Found {len(groups)} groups")
        return self.list()

    def _write(self, groups: list[GroupSummary]) -> None:
        try:
            write_json_atomic(self.path, [g.model_dump() for g in groups])
            log.debug(f"Saved {len(groups)} groups to file")
        except PersistenceError as e:
            log.warning(f"Could not save groups snapshot: {e}")
