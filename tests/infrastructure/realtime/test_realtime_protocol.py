"""Tests for decoding client frames."""

import json
from datetime import datetime, timezone

import pytest

from app.infrastructure.realtime import ProtocolError, parse_client_frame, parse_user_id
from app.infrastructure.realtime.protocol import serialize_event


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("not json", "Invalid message format"),
        ("[1, 2]", "Invalid message format"),
        ('{"userId": 1}', "Message type is required"),
        ('{"type": "subscribe"}', "Unknown message type: subscribe"),
    ],
)
def test_parse_client_frame_rejects_bad_frames(raw, message):
    with pytest.raises(ProtocolError, match=message):
        parse_client_frame(raw)


def test_parse_client_frame_accepts_bytes():
    assert parse_client_frame(b'{"type": "ping", "timestamp": 5}') == {
        "type": "ping",
        "timestamp": 5,
    }


@pytest.mark.parametrize("value", [3, "3", " 3 "])
def test_parse_user_id_accepts_numeric_values(value):
    assert parse_user_id(value) == 3


@pytest.mark.parametrize(
    "value", [None, True, 0, -1, "abc", "", 1.5, {"id": 1}, 2**63, 10**30, str(10**30)]
)
def test_parse_user_id_rejects_invalid_values(value):
    with pytest.raises(ProtocolError, match="A valid userId is required"):
        parse_user_id(value)


def test_serialize_event_handles_datetimes():
    moment = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    payload = json.loads(serialize_event({"type": "x", "at": moment}))

    assert payload == {"type": "x", "at": "2024-05-01T12:30:00+00:00"}
