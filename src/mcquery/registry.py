from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, Sequence

from .constants import DEFAULT_TIMEOUT_MS
from .errors import UnknownProtocolError, UnsupportedNetworkError
from .net import Transport, UdpEndpoint
from .query import MinecraftQuery
from .stat import QueryResult

log = logging.getLogger(__name__)


class QueryProtocol(Protocol):
    names: Sequence[str]
    default_port: int
    priority: int
    network: str

    def execute(self, transport: Transport) -> QueryResult: ...


class ProtocolRegistry:
    def __init__(self) -> None:
        self._by_name: Dict[str, QueryProtocol] = {}
        self._protocols: List[QueryProtocol] = []

    def register(self, protocol: QueryProtocol) -> None:
        keys = [n.lower() for n in protocol.names]
        for k in keys:
            if k in self._by_name:
                raise ValueError(f"protocol name already registered: {k}")
        for k in keys:
            self._by_name[k] = protocol
        self._protocols.append(protocol)

    def get(self, name: str) -> QueryProtocol:
        try:
            return self._by_name[name.lower()]
        except KeyError:
            raise UnknownProtocolError(f"unknown protocol: {name}") from None

    def __iter__(self):
        return iter(self._protocols)

    def candidates(self, port: Optional[int] = None) -> List[QueryProtocol]:
        """Protocols to try, default-port matches first, then by priority."""
        return sorted(
            self._protocols,
            key=lambda p: (port is None or p.default_port != port, -p.priority),
        )

    def query(
        self,
        host: str,
        port: Optional[int] = None,
        protocol: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> QueryResult:
        if protocol is not None:
            proto = self.get(protocol)
        else:
            found = self.candidates(port)
            if not found:
                raise UnknownProtocolError("no protocols registered")
            proto = found[0]

        if proto.network != "udp":
            raise UnsupportedNetworkError(f"unsupported network {proto.network!r} for {proto.names[0]}")

        if port is None:
            port = proto.default_port
        log.info("querying %s:%d with %s", host, port, proto.names[0])
        with UdpEndpoint.connect(host, port, timeout_ms=timeout_ms) as udp:
            return proto.execute(udp)


def default_registry() -> ProtocolRegistry:
    registry = ProtocolRegistry()
    registry.register(MinecraftQuery())
    return registry
