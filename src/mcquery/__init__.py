"""Minecraft full-stat query client (GameSpot-style UDP query protocol).

- packet framing and the binary buffer live apart from the query state machine
- the transport is a small send/receive interface so the protocol can be
  driven without a socket
- protocols are looked up by name, port and priority through a registry
"""

from .errors import ChallengeTokenError, ProtocolError, QueryError, SessionMismatchError
from .query import FullStatQuery, MinecraftQuery
from .registry import ProtocolRegistry, default_registry
from .stat import QueryResult

__all__ = [
    "ChallengeTokenError",
    "FullStatQuery",
    "MinecraftQuery",
    "ProtocolError",
    "ProtocolRegistry",
    "QueryError",
    "QueryResult",
    "SessionMismatchError",
    "default_registry",
]
