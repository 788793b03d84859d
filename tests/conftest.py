"""Pytest configuration and fixtures for wagate tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import pytest
from fastapi.testclient import TestClient

from wagate.core.scheduler import JobFactory, TaskScheduler
from wagate.main import create_app
from wagate.services.connection import ConnectionStatus
from wagate.services.context import GatewayContext, build_context
from wagate.whatsapp.base import CredentialState, EventListener, Session, SessionFactory

WEBHOOK_KEY = "test-key"


class FakeSession(Session):
    """In-memory session handle standing in for the Baileys sidecar."""

    def __init__(self, session_id: str, listener: EventListener, groups: dict[str, Any] | None = None):
        super().__init__(session_id, listener)
        self.groups = groups if groups is not None else {}
        self.sent: list[tuple[str, dict[str, Any]]] = []
        self.send_error: Exception | None = None
        self.groups_error: Exception | None = None
        self.closed = False

    async def send_message(self, jid: str, content: dict[str, Any]) -> dict[str, Any]:
        if self.send_error:
            raise self.send_error
        self.sent.append((jid, content))
        return {"status": "sent"}

    async def group_fetch_all_participating(self) -> dict[str, dict[str, Any]]:
        if self.groups_error:
            raise self.groups_error
        return self.groups

    async def close(self) -> None:
        self.closed = True

    async def emit(self, event: str, data: Any = None) -> int:
        return await self.deliver(event, data)


class FakeSessionFactory(SessionFactory):
    def __init__(self):
        self.sessions: list[FakeSession] = []
        self.credentials: list[CredentialState] = []
        self.groups: dict[str, Any] = {}
        self.error: Exception | None = None
        # Runs with the new session before open_session returns
        self.on_open: Callable[[FakeSession], Awaitable[None]] | None = None

    async def open_session(self, credentials: CredentialState, listener: EventListener) -> Session:
        # Yield once so overlapping connect() calls really overlap
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        session = FakeSession("test", listener, groups=self.groups)
        self.sessions.append(session)
        self.credentials.append(credentials)
        if self.on_open:
            await self.on_open(session)
        return session

    @property
    def latest(self) -> FakeSession:
        return self.sessions[-1]


@dataclass
class ScheduledJob:
    key: str
    delay: float
    job: JobFactory


class RecordingScheduler(TaskScheduler):
    """Records deferred jobs instead of sleeping; tests run them explicitly."""

    def __init__(self):
        super().__init__()
        self.scheduled: list[ScheduledJob] = []

    def schedule(self, key: str, delay: float, job: JobFactory):
        self.scheduled.append(ScheduledJob(key, delay, job))

    def keys(self) -> list[str]:
        return [job.key for job in self.scheduled]

    async def run_pending(self) -> None:
        jobs, self.scheduled = self.scheduled, []
        for job in jobs:
            await job.job()


class FakeViewer:
    """Stands in for a WebSocket viewer subscribed to notifications."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.frames: list[dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise ConnectionError("viewer went away")
        self.frames.append(data)


def mark_connected(gateway: GatewayContext, session: Session) -> None:
    """Put the connection manager straight into the connected state."""
    gateway.connection.session = session
    gateway.connection.status = ConnectionStatus.CONNECTED
    gateway.connection.qr = None


@pytest.fixture
def factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def gateway(tmp_path, factory, scheduler) -> GatewayContext:
    ctx = build_context(
        factory,
        session_dir=str(tmp_path / "sessions"),
        groups_file=str(tmp_path / "groups.json"),
        scheduler=scheduler,
        webhook_api_key=WEBHOOK_KEY,
    )
    ctx.load()
    return ctx


@pytest.fixture
def session(gateway) -> FakeSession:
    """A fake session already marked as connected."""
    fake = FakeSession("test", gateway.connection.dispatch)
    mark_connected(gateway, fake)
    return fake


@pytest.fixture
def app(gateway):
    return create_app(gateway)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
