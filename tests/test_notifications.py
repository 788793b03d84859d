"""Tests for the live notification channel."""

import pytest

from wagate.services.notifications import NotificationChannel
from tests.conftest import FakeViewer


@pytest.mark.asyncio
async def test_every_subscriber_receives_events():
    channel = NotificationChannel()
    first, second = FakeViewer(), FakeViewer()
    channel.subscribe(first)
    channel.subscribe(second)

    await channel.publish_status(True, "Connected")
    await channel.publish_qr("2@pairing")

    expected = [
        {"event": "status", "data": {"connected": True, "message": "Connected"}},
        {"event": "qr", "data": {"payload": "2@pairing"}},
    ]
    assert first.frames == expected
    assert second.frames == expected


@pytest.mark.asyncio
async def test_late_subscriber_gets_no_history():
    channel = NotificationChannel()
    await channel.publish_qr("old")

    viewer = FakeViewer()
    channel.subscribe(viewer)
    await channel.publish_qr("new")

    assert viewer.frames == [{"event": "qr", "data": {"payload": "new"}}]


@pytest.mark.asyncio
async def test_broken_subscriber_is_dropped():
    channel = NotificationChannel()
    good, broken = FakeViewer(), FakeViewer(fail=True)
    channel.subscribe(good)
    channel.subscribe(broken)

    await channel.publish_status(False, "Reconnecting")

    assert channel.subscribers == 1
    assert len(good.frames) == 1


@pytest.mark.asyncio
async def test_publish_without_subscribers():
    channel = NotificationChannel()
    await channel.publish_status(False, "Disconnected permanently")
    assert channel.subscribers == 0
