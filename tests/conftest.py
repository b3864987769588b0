from __future__ import annotations

import struct

import pytest

KV_PADDING = b"splitnum\x00\x80\x00"
PLAYERS_PADDING = b"\x01player_\x00\x00"


def handshake_response(session_id: int, token: str = "12345", kind: int = 0x09) -> bytes:
    return bytes([kind]) + struct.pack(">i", session_id) + token.encode() + b"\x00"


def stat_response(session_id: int, pairs=(), players=(), kind: int = 0x00) -> bytes:
    body = b"".join(k.encode() + b"\x00" + v.encode() + b"\x00" for k, v in pairs) + b"\x00"
    names = b"".join(n.encode() + b"\x00" for n in players) + b"\x00"
    return bytes([kind]) + struct.pack(">i", session_id) + KV_PADDING + body + PLAYERS_PADDING + names


class FakeTransport:
    def __init__(self, *responses: bytes | Exception):
        self.responses = list(responses)
        self.sent: list[bytes] = []

    def send(self, data: bytes) -> None:
        self.sent.append(data)

    def receive(self, bufsize: int = 65535) -> bytes:
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


@pytest.fixture
def session_id() -> int:
    return 0x01020304
