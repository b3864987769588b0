from __future__ import annotations

import pytest

from mcquery.errors import QueryError, UnknownProtocolError, UnsupportedNetworkError
from mcquery.query import MinecraftQuery
from mcquery.registry import ProtocolRegistry, default_registry
from mcquery.stat import QueryResult


class StubProtocol:
    def __init__(self, names, default_port, priority, network="udp"):
        self.names = names
        self.default_port = default_port
        self.priority = priority
        self.network = network
        self.calls = 0

    def execute(self, transport):
        self.calls += 1
        return QueryResult(hostname=self.names[0])


def test_default_registry_has_minecraft():
    reg = default_registry()
    assert isinstance(reg.get("minecraft"), MinecraftQuery)
    assert reg.get("Minecraft_UDP") is reg.get("MINECRAFT")


def test_unknown_name():
    with pytest.raises(UnknownProtocolError):
        default_registry().get("quake3")


def test_duplicate_names_rejected():
    reg = ProtocolRegistry()
    reg.register(StubProtocol(("a", "b"), 1, 1))
    with pytest.raises(ValueError):
        reg.register(StubProtocol(("B",), 2, 2))
    assert len(list(reg)) == 1


def test_candidates_order():
    reg = ProtocolRegistry()
    low = StubProtocol(("low",), 1000, 1)
    high = StubProtocol(("high",), 2000, 50)
    port_match = StubProtocol(("match",), 3000, 5)
    for p in (low, high, port_match):
        reg.register(p)
    assert reg.candidates() == [high, port_match, low]
    assert reg.candidates(3000) == [port_match, high, low]


def test_query_dispatches_over_udp():
    reg = ProtocolRegistry()
    stub = StubProtocol(("stub",), 25565, 1)
    reg.register(stub)
    result = reg.query("127.0.0.1", protocol="STUB", timeout_ms=100)
    assert result.hostname == "stub"
    assert stub.calls == 1


def test_query_rejects_non_udp():
    reg = ProtocolRegistry()
    reg.register(StubProtocol(("tcp",), 1, 1, network="tcp"))
    with pytest.raises(UnsupportedNetworkError) as exc:
        reg.query("127.0.0.1", protocol="tcp")
    assert isinstance(exc.value, QueryError)


def test_query_with_empty_registry():
    with pytest.raises(UnknownProtocolError):
        ProtocolRegistry().query("127.0.0.1")


def test_query_uses_explicit_port_over_default(monkeypatch):
    seen = []

    class RecordingEndpoint:
        @classmethod
        def connect(cls, host, port, timeout_ms=0):
            seen.append((host, port))
            return cls()

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            pass

    monkeypatch.setattr("mcquery.registry.UdpEndpoint", RecordingEndpoint)
    reg = ProtocolRegistry()
    reg.register(StubProtocol(("stub",), 25565, 1))
    reg.query("127.0.0.1", 0, protocol="stub")
    reg.query("127.0.0.1", protocol="stub")
    assert seen == [("127.0.0.1", 0), ("127.0.0.1", 25565)]
