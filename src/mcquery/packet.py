from __future__ import annotations

import enum
import struct

from .constants import FULL_STAT_SUFFIX, HANDSHAKE, MAGIC, STAT
from .errors import TruncatedPacketError


class PacketType(enum.IntEnum):
    HANDSHAKE = HANDSHAKE
    STAT = STAT


class ByteOrder(str, enum.Enum):
    BIG = ">"
    LITTLE = "<"


class PacketBuffer:
    """Growable byte buffer with a read cursor.

    Writes append to the end; reads consume from the cursor. Multi-byte
    integers use the buffer's byte order.
    """

    def __init__(self, data: bytes = b"", order: ByteOrder = ByteOrder.BIG):
        self._buf = bytearray(data)
        self._pos = 0
        self.order = order

    def set_order(self, order: ByteOrder) -> None:
        self.order = order

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def clear(self) -> None:
        self._buf.clear()
        self._pos = 0

    def __len__(self) -> int:
        return len(self._buf)

    # --- writing ---

    def write_raw(self, *values: int | bytes) -> None:
        for v in values:
            if isinstance(v, int):
                self._buf.append(v)
            else:
                self._buf += v

    def write_uint8(self, value: int) -> None:
        self._buf += struct.pack("B", value)

    def write_int32(self, value: int) -> None:
        self._buf += struct.pack(self.order.value + "i", value)

    def write_string(self, value: str) -> None:
        self._buf += value.encode("utf-8") + b"\x00"

    # --- reading ---

    def _unpack(self, fmt: str) -> int:
        size = struct.calcsize(fmt)
        if self.remaining < size:
            raise TruncatedPacketError(
                f"need {size} bytes at offset {self._pos}, only {self.remaining} left"
            )
        (value,) = struct.unpack_from(fmt, self._buf, self._pos)
        self._pos += size
        return value

    def read_uint8(self) -> int:
        return self._unpack("B")

    def read_int32(self) -> int:
        return self._unpack(self.order.value + "i")

    def read_string(self) -> str:
        end = self._buf.find(b"\x00", self._pos)
        if end == -1:
            raw = self._buf[self._pos :]
            self._pos = len(self._buf)
        else:
            raw = self._buf[self._pos : end]
            self._pos = end + 1
        return raw.decode("utf-8", "replace")

    def forward(self, n: int) -> None:
        self._pos = min(len(self._buf), self._pos + n)


def handshake_request(session_id: int) -> bytes:
    packet = PacketBuffer(order=ByteOrder.BIG)
    packet.write_raw(MAGIC, PacketType.HANDSHAKE)
    packet.write_int32(session_id)
    return packet.getvalue()


def full_stat_request(session_id: int, challenge: bytes) -> bytes:
    if len(challenge) != 4:
        raise ValueError(f"challenge token must be 4 bytes, got {len(challenge)}")
    packet = PacketBuffer(order=ByteOrder.BIG)
    packet.write_raw(MAGIC, PacketType.STAT)
    packet.write_int32(session_id)
    packet.write_raw(challenge, FULL_STAT_SUFFIX)
    return packet.getvalue()
