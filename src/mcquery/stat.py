from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from .packet import PacketBuffer

log = logging.getLogger(__name__)

UINT16_MAX = 0xFFFF


class StatKey(str, enum.Enum):
    HOSTNAME = "hostname"
    GAMETYPE = "gametype"
    GAME_ID = "game_id"
    VERSION = "version"
    PLUGINS = "plugins"
    MAP = "map"
    NUMPLAYERS = "numplayers"
    MAXPLAYERS = "maxplayers"
    HOSTPORT = "hostport"
    HOSTIP = "hostip"

    @classmethod
    def lookup(cls, key: str) -> Optional["StatKey"]:
        try:
            return cls(key)
        except ValueError:
            return None


# StatKey -> QueryResult field
_FIELDS = {
    StatKey.HOSTNAME: "hostname",
    StatKey.GAMETYPE: "game_type",
    StatKey.GAME_ID: "game_id",
    StatKey.VERSION: "version",
    StatKey.PLUGINS: "plugins",
    StatKey.MAP: "map",
    StatKey.NUMPLAYERS: "num_players",
    StatKey.MAXPLAYERS: "max_players",
    StatKey.HOSTPORT: "host_port",
    StatKey.HOSTIP: "host_ip",
}

_NUMERIC = frozenset({StatKey.NUMPLAYERS, StatKey.MAXPLAYERS, StatKey.HOSTPORT})


@dataclass(frozen=True, slots=True)
class QueryResult:
    hostname: str = ""
    game_type: str = ""
    game_id: str = ""
    version: str = ""
    plugins: str = ""
    map: str = ""
    num_players: int = 0
    max_players: int = 0
    host_port: int = 0
    host_ip: str = ""
    players: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["players"] = list(self.players)
        return d


def parse_uint16(text: str) -> Optional[int]:
    """Parse base-10 ``text`` as an unsigned 16-bit integer, or None."""
    if not text.isascii() or not text.isdigit():
        return None
    value = int(text, 10)
    if value > UINT16_MAX:
        return None
    return value


def format_uint16(value: int) -> str:
    if not 0 <= value <= UINT16_MAX:
        raise ValueError(f"{value} does not fit in 16 unsigned bits")
    return str(value)


def decode_key_values(packet: PacketBuffer) -> Dict[str, Any]:
    """Read key/value string pairs until an empty key.

    Returns keyword arguments for :class:`QueryResult`. Unknown keys are
    consumed and dropped; numeric values that do not parse are left at 0.
    """
    fields: Dict[str, Any] = {}
    while True:
        key = packet.read_string()
        if key == "":
            break
        value = packet.read_string()

        tag = StatKey.lookup(key)
        if tag is None:
            log.debug("ignoring unknown stat key %r", key)
            continue

        if tag in _NUMERIC:
            number = parse_uint16(value)
            if number is None:
                log.warning("could not parse %s=%r; defaulting to 0", key, value)
                number = 0
            fields[_FIELDS[tag]] = number
        else:
            fields[_FIELDS[tag]] = value
    return fields


def decode_players(packet: PacketBuffer) -> List[str]:
    players: List[str] = []
    while True:
        name = packet.read_string()
        if name == "":
            break
        players.append(name)
    return players
