from __future__ import annotations

import logging
import socket
from typing import Protocol, Tuple

from .constants import DEFAULT_TIMEOUT_MS, RECV_BUFSIZE

log = logging.getLogger(__name__)


class Transport(Protocol):
    def send(self, data: bytes) -> None: ...

    def receive(self, bufsize: int = RECV_BUFSIZE) -> bytes: ...


class UdpEndpoint:
    """UDP socket bound to a single server address."""

    def __init__(self, sock: socket.socket, addr: Tuple[str, int]):
        self.sock = sock
        self.addr = addr

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> "UdpEndpoint":
        info = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
        family, type_, proto, _, addr = info[0]
        sock = socket.socket(family, type_, proto)
        if timeout_ms > 0:
            sock.settimeout(timeout_ms / 1000.0)
        try:
            sock.connect(addr)
        except OSError:
            sock.close()
            raise
        return cls(sock, (addr[0], addr[1]))

    def send(self, data: bytes) -> None:
        log.debug("-> %s:%d %d bytes", self.addr[0], self.addr[1], len(data))
        self.sock.send(data)

    def receive(self, bufsize: int = RECV_BUFSIZE) -> bytes:
        data = self.sock.recv(bufsize)
        log.debug("<- %s:%d %d bytes", self.addr[0], self.addr[1], len(data))
        return data

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "UdpEndpoint":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
