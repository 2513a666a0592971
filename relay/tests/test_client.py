import json

import pytest

import relay_api.client as client_module
from relay_api.client import RelayClient


class _FakeSocket:
    def __init__(self, incoming):
        self.sent = []
        self.incoming = list(incoming)
        self.closed = False

    async def send(self, data):
        self.sent.append(data)

    async def recv(self):
        return self.incoming.pop(0)

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_client_sends_and_receives_wire_frames(monkeypatch):
    socket = _FakeSocket([json.dumps({"sender": "alice", "receiver": "bob", "content": "hey"})])
    urls = []

    async def _connect(url):
        urls.append(url)
        return socket

    monkeypatch.setattr(client_module.websockets, "connect", _connect)

    async with RelayClient("ws://relay.local/", "bob") as client:
        sent = await client.send("alice", "hello")
        received = await client.receive()

    assert urls == ["ws://relay.local/ws?user_id=bob"]
    assert json.loads(socket.sent[0])["content"] == "hello"
    assert sent.sender == "bob"
    assert received.sender == "alice"
    assert received.content == "hey"
    assert socket.closed


@pytest.mark.asyncio
async def test_client_requires_connection():
    client = RelayClient("ws://relay.local", "bob")
    with pytest.raises(RuntimeError):
        await client.send("alice", "hello")


def test_client_requires_user_id():
    with pytest.raises(ValueError):
        RelayClient("ws://relay.local", "")
