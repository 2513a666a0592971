import json
from datetime import datetime, timezone

import pytest

from relay_api.models import MessageDecodeError, create_message, decode_message, encode_message

RECEIVED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_decode_full_frame():
    frame = json.dumps(
        {"sender": "bob", "receiver": "alice", "content": "hi", "time": "2024-04-30T08:15:00Z"}
    )
    message = decode_message(frame, received_at=RECEIVED)
    assert message.sender == "bob"
    assert message.receiver == "alice"
    assert message.content == "hi"
    assert message.timestamp == datetime(2024, 4, 30, 8, 15, tzinfo=timezone.utc)


def test_missing_time_is_stamped_at_receipt():
    message = decode_message('{"sender":"bob","receiver":"alice","content":"hi"}', received_at=RECEIVED)
    assert message.timestamp == RECEIVED


def test_naive_time_is_treated_as_utc():
    message = decode_message(
        '{"sender":"bob","receiver":"alice","content":"hi","time":"2024-04-30T08:15:00"}',
        received_at=RECEIVED,
    )
    assert message.timestamp.tzinfo is not None
    assert message.timestamp.utcoffset().total_seconds() == 0


def test_bytes_frames_are_accepted():
    message = decode_message(b'{"sender":"bob","receiver":"alice","content":"hi"}', received_at=RECEIVED)
    assert message.content == "hi"


@pytest.mark.parametrize(
    "frame",
    [
        "not json",
        "[1, 2]",
        '{"sender":"bob","receiver":"alice"}',
        '{"sender":"","receiver":"alice","content":"x"}',
        '{"sender":"bob","receiver":"","content":"x"}',
        '{"sender":"bob","receiver":"alice","content":"x","priority":1}',
        '{"sender":"bob","receiver":"alice","content":"x","timestamp":"2024-04-30T08:15:00Z"}',
        '{"sender":"bob","receiver":"alice","content":"x","time":"yesterday"}',
        b"\xff\xfe",
    ],
)
def test_malformed_frames_raise_decode_error(frame):
    with pytest.raises(MessageDecodeError):
        decode_message(frame, received_at=RECEIVED)


def test_encode_uses_wire_field_names():
    message = create_message("bob", "alice", "héllo", timestamp=RECEIVED)
    payload = json.loads(encode_message(message))
    assert payload == {
        "sender": "bob",
        "receiver": "alice",
        "content": "héllo",
        "time": "2024-05-01T12:00:00Z",
    }
    assert decode_message(encode_message(message)) == message


def test_messages_are_immutable():
    message = create_message("bob", "alice", "hi")
    with pytest.raises(Exception):
        message.content = "changed"
