"""Tests for the hub lifecycle and registration flow."""

import pytest

from app.infrastructure.realtime import RealtimeHub


@pytest.mark.anyio
async def test_connect_greets_and_register_acknowledges(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    transport = transport_factory()

    connection = await hub.connect(transport)
    inserted = await hub.register(connection, 10)

    assert inserted is True
    assert [event["type"] for event in transport.sent] == [
        "connection",
        "registered",
        "online_users",
    ]
    assert transport.sent[1] == {"type": "registered", "userId": 10}
    assert transport.sent[2] == {"type": "online_users", "userIds": [10]}
    assert hub.is_online(10)


@pytest.mark.anyio
async def test_repeated_register_does_not_rebroadcast(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    transport = transport_factory()
    connection = await hub.connect(transport)
    await hub.register(connection, 10)

    assert await hub.register(connection, 10) is False
    assert len(transport.events("online_users")) == 1
    assert len(transport.events("registered")) == 2


@pytest.mark.anyio
async def test_disconnect_broadcasts_remaining_roster(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    staying, leaving = transport_factory(), transport_factory()
    await hub.register(await hub.connect(staying), 1)
    leaving_connection = await hub.connect(leaving)
    await hub.register(leaving_connection, 2)

    await hub.disconnect(leaving_connection)

    assert staying.events("online_users")[-1] == {"type": "online_users", "userIds": [1]}
    assert hub.list_online() == {1}
    assert not leaving.closed


@pytest.mark.anyio
async def test_ping_is_answered_with_the_same_timestamp(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    transport = transport_factory()
    connection = await hub.connect(transport)
    connection.is_alive = False

    await hub.pong(connection, 1234)

    assert transport.events("pong") == [{"type": "pong", "timestamp": 1234}]
    assert connection.is_alive is True


@pytest.mark.anyio
async def test_start_and_stop_close_every_connection(transport_factory):
    hub = RealtimeHub(ping_interval=3600)
    await hub.start()
    assert hub.running

    transport = transport_factory()
    await hub.register(await hub.connect(transport), 1)
    await hub.stop()

    assert not hub.running
    assert transport.closed
    assert hub.list_online() == set()
