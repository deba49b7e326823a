"""Tests for bridging committed messages to realtime events."""

from datetime import datetime, timezone

import anyio
import pytest

from app.domain.entities import Message, User
from app.infrastructure.realtime import RealtimeHub, RealtimePublisher, serialize_message


def _message(**overrides) -> Message:
    values = {
        "id": 5,
        "sender_id": 1,
        "receiver_id": 2,
        "content": "hello",
        "read": False,
        "created_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "sender": User(id=1, username="alice", email="a@example.com", password="x"),
    }
    values.update(overrides)
    return Message(**values)


def test_serialize_message_embeds_sender_without_secrets():
    payload = serialize_message(_message())

    assert payload["created_at"] == "2024-01-02T03:04:05+00:00"
    assert payload["sender"] == {
        "id": 1,
        "username": "alice",
        "role": "student",
        "avatar_url": None,
    }
    assert "password" not in payload["sender"]


@pytest.mark.anyio
async def test_publish_from_worker_thread_completes_before_returning(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    receiver, sender = transport_factory(), transport_factory()
    await hub.register(await hub.connect(receiver), 2)
    await hub.register(await hub.connect(sender), 1)
    publisher = RealtimePublisher(hub)

    await anyio.to_thread.run_sync(publisher.publish_new_message, _message())

    [event] = receiver.events("new_message")
    assert event["message"]["id"] == 5
    assert sender.events("new_message") == []


@pytest.mark.anyio
async def test_publish_messages_read_targets_other_participant(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    author = transport_factory()
    await hub.register(await hub.connect(author), 1)
    publisher = RealtimePublisher(hub)

    await anyio.to_thread.run_sync(
        lambda: publisher.publish_messages_read(reader_id=2, other_user_id=1, message_ids=[3, 4])
    )

    assert author.events("message_read") == [
        {"type": "message_read", "readerId": 2, "messageIds": [3, 4]}
    ]


@pytest.mark.anyio
async def test_publish_inside_event_loop_schedules_a_task(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    receiver = transport_factory()
    await hub.register(await hub.connect(receiver), 2)
    publisher = RealtimePublisher(hub)

    publisher.publish_new_message(_message())
    await anyio.sleep(0.01)

    assert len(receiver.events("new_message")) == 1


@pytest.mark.anyio
async def test_stop_waits_for_deliveries_scheduled_on_the_loop(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    await hub.start()
    receiver = transport_factory()
    await hub.register(await hub.connect(receiver), 2)

    RealtimePublisher(hub).publish_new_message(_message())
    await hub.stop()

    assert len(receiver.events("new_message")) == 1
    assert receiver.closed is True


def test_publish_without_event_loop_is_not_fatal(caplog):
    publisher = RealtimePublisher(RealtimeHub(ping_interval=3600))

    publisher.publish_new_message(_message())

    assert "Could not deliver new_message event" in caplog.text


def test_empty_read_receipt_is_not_published():
    publisher = RealtimePublisher(RealtimeHub(ping_interval=3600))

    publisher.publish_messages_read(reader_id=2, other_user_id=1, message_ids=[])
