"""Minecraft full-stat query over UDP.

One query is four datagrams, strictly in order:

    client  FE FD 09 <session>                          handshake
    server  09 <session> <token ascii> 00
    client  FE FD 00 <session> <token int32> 00 00 00 00 full stat
    server  00 <session> <11 bytes padding> k\\0v\\0...\\0 <10 bytes padding> name\\0...\\0

All integers are big-endian. Every response must echo the session id.
"""
from __future__ import annotations

import enum
import logging
import random
import re
import struct
from dataclasses import dataclass, field
from typing import Optional

from .constants import DEFAULT_PORT, KV_PADDING, PLAYERS_PADDING, SESSION_ID_MASK
from .errors import ChallengeTokenError, ProtocolError, SessionMismatchError
from .net import Transport
from .packet import ByteOrder, PacketBuffer, PacketType, full_stat_request, handshake_request
from .stat import QueryResult, decode_key_values, decode_players

log = logging.getLogger(__name__)

# seeded once from the OS at import; every query draws from it
_rng = random.Random()

_TOKEN_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def generate_session_id(rng: Optional[random.Random] = None) -> int:
    return (rng or _rng).getrandbits(31) & SESSION_ID_MASK


def parse_challenge_token(text: str) -> bytes:
    if not _TOKEN_RE.fullmatch(text):
        raise ChallengeTokenError(f"challenge token is not an integer: {text!r}")
    value = int(text, 10)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ChallengeTokenError(f"challenge token out of int32 range: {text!r}")
    return struct.pack(">i", value)


class QueryState(enum.Enum):
    INIT = "init"
    AWAIT_HANDSHAKE = "await_handshake"
    SEND_FULL_STAT = "send_full_stat"
    AWAIT_FULL_STAT = "await_full_stat"
    DECODE_KV = "decode_kv"
    DECODE_PLAYERS = "decode_players"
    DONE = "done"


@dataclass(slots=True)
class FullStatQuery:
    transport: Transport
    session_id: int = field(default_factory=generate_session_id)
    state: QueryState = QueryState.INIT

    def _expect(self, packet: PacketBuffer, tag: PacketType, step: str) -> None:
        kind = packet.read_uint8()
        if kind != tag:
            raise ProtocolError(
                f"sent a {step} request, but didn't receive {step} response back (type {kind:#04x})",
                step,
            )
        echoed = packet.read_int32()
        if echoed != self.session_id:
            raise SessionMismatchError(step, self.session_id, echoed)

    def handshake(self) -> bytes:
        self.state = QueryState.INIT
        log.debug("handshake; session=%#010x", self.session_id)
        self.transport.send(handshake_request(self.session_id))

        self.state = QueryState.AWAIT_HANDSHAKE
        packet = PacketBuffer(self.transport.receive(), order=ByteOrder.BIG)
        self._expect(packet, PacketType.HANDSHAKE, "handshake")
        text = packet.read_string()
        token = parse_challenge_token(text)
        log.debug("challenge token %s", text)
        return token

    def full_stat(self, token: bytes) -> QueryResult:
        self.state = QueryState.SEND_FULL_STAT
        self.transport.send(full_stat_request(self.session_id, token))

        self.state = QueryState.AWAIT_FULL_STAT
        packet = PacketBuffer(self.transport.receive(), order=ByteOrder.BIG)
        self._expect(packet, PacketType.STAT, "full stat")
        packet.forward(KV_PADDING)

        self.state = QueryState.DECODE_KV
        fields = decode_key_values(packet)

        self.state = QueryState.DECODE_PLAYERS
        packet.forward(PLAYERS_PADDING)
        players = decode_players(packet)

        self.state = QueryState.DONE
        log.debug("full stat done; %d keys, %d players", len(fields), len(players))
        return QueryResult(**fields, players=tuple(players))

    def run(self) -> QueryResult:
        return self.full_stat(self.handshake())


class MinecraftQuery:
    names = ("minecraft", "minecraft_udp")
    default_port = DEFAULT_PORT
    priority = 10
    network = "udp"

    def execute(self, transport: Transport) -> QueryResult:
        return FullStatQuery(transport).run()
