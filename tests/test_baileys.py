"""Tests for the Baileys sidecar client."""

import json

import httpx
import pytest

from wagate.core.exceptions import CollaboratorError
from wagate.whatsapp.baileys import BaileysClient, BaileysSessionFactory
from wagate.whatsapp.base import CredentialState
from wagate.whatsapp.events import QrIssued


class Sidecar:
    """Records requests and answers from a route table."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes.get((request.method, request.url.path), httpx.Response(200, json={"ok": True}))

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


def make_factory(sidecar: Sidecar) -> BaileysSessionFactory:
    client = BaileysClient("http://sidecar:3001/", "secret", transport=httpx.MockTransport(sidecar))
    return BaileysSessionFactory(client, "main", "http://gateway/webhook/events", ["WhatsApp API", "Chrome", "1"])


async def _collect(events):
    async def listener(event):
        events.append(event)
    return listener


@pytest.mark.asyncio
async def test_start_sends_credentials_and_webhook():
    sidecar = Sidecar()
    factory = make_factory(sidecar)
    creds = CredentialState(creds={"me": {"id": "628@s.whatsapp.net"}}, keys={"pre-key": {"1": "x"}})

    session = await factory.open_session(creds, await _collect([]))

    request = sidecar.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/sessions/main/start"
    assert request.headers["X-API-Key"] == "secret"
    assert sidecar.body() == {
        "creds": {"me": {"id": "628@s.whatsapp.net"}},
        "keys": {"pre-key": {"1": "x"}},
        "webhookUrl": "http://gateway/webhook/events",
        "browser": ["WhatsApp API", "Chrome", "1"],
    }
    assert session.session_id == "main"


@pytest.mark.asyncio
async def test_send_posts_content():
    sidecar = Sidecar()
    session = await make_factory(sidecar).open_session(CredentialState(), await _collect([]))

    await session.send_message("628@s.whatsapp.net", {"text": "hi"})

    assert sidecar.requests[-1].url.path == "/sessions/main/send"
    assert sidecar.body() == {"to": "628@s.whatsapp.net", "content": {"text": "hi"}}


@pytest.mark.asyncio
async def test_sidecar_error_message_passes_through():
    sidecar = Sidecar({("POST", "/sessions/main/send"): httpx.Response(500, json={"message": "not-authorized"})})
    session = await make_factory(sidecar).open_session(CredentialState(), await _collect([]))

    with pytest.raises(CollaboratorError) as exc:
        await session.send_message("628@s.whatsapp.net", {"text": "hi"})

    assert exc.value.message == "not-authorized"
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_plain_text_error_body():
    sidecar = Sidecar({("POST", "/sessions/main/send"): httpx.Response(502, text="bad gateway")})
    session = await make_factory(sidecar).open_session(CredentialState(), await _collect([]))

    with pytest.raises(CollaboratorError) as exc:
        await session.send_message("x@s.whatsapp.net", {"text": "hi"})

    assert exc.value.message == "bad gateway"


@pytest.mark.asyncio
async def test_transport_failure_becomes_collaborator_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = BaileysClient("http://sidecar:3001", "secret", transport=httpx.MockTransport(refuse))
    factory = BaileysSessionFactory(client, "main", "http://gateway/webhook/events")

    with pytest.raises(CollaboratorError) as exc:
        await factory.open_session(CredentialState(), await _collect([]))

    assert "connection refused" in exc.value.message
    assert await factory.deliver("main", "connection.update", {"qr": "x"}) is None


@pytest.mark.asyncio
async def test_group_enumeration_unwraps_groups_key():
    groups = {"A@g.us": {"subject": "Team", "participants": []}}
    sidecar = Sidecar({("GET", "/sessions/main/groups"): httpx.Response(200, json={"groups": groups})})
    session = await make_factory(sidecar).open_session(CredentialState(), await _collect([]))

    assert await session.group_fetch_all_participating() == groups


@pytest.mark.asyncio
async def test_deliver_routes_to_latest_handle():
    factory = make_factory(Sidecar())
    first_events, second_events = [], []
    await factory.open_session(CredentialState(), await _collect(first_events))
    await factory.open_session(CredentialState(), await _collect(second_events))

    dispatched = await factory.deliver("main", "connection.update", {"qr": "2@abc"})

    assert dispatched == 1
    assert first_events == []
    assert second_events == [QrIssued(payload="2@abc")]
    assert await factory.deliver("other", "connection.update", {"qr": "2@abc"}) is None


@pytest.mark.asyncio
async def test_close_calls_disconnect():
    sidecar = Sidecar()
    session = await make_factory(sidecar).open_session(CredentialState(), await _collect([]))

    await session.close()

    assert sidecar.requests[-1].url.path == "/sessions/main/disconnect"
