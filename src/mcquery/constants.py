from __future__ import annotations

MAGIC = b"\xfe\xfd"

HANDSHAKE = 0x09
STAT = 0x00

SESSION_ID_MASK = 0x0F0F0F0F
FULL_STAT_SUFFIX = b"\x00\x00\x00\x00"

KV_PADDING = 11  # "splitnum\x00\x80\x00"
PLAYERS_PADDING = 10  # "\x01player_\x00\x00"

DEFAULT_PORT = 25565
DEFAULT_TIMEOUT_MS = 3000
RECV_BUFSIZE = 65535
