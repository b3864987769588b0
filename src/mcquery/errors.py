from __future__ import annotations


class QueryError(Exception):
    """Base class for failures of a single query run."""


class ProtocolError(QueryError):
    """A response did not have the shape expected at ``step``."""

    def __init__(self, message: str, step: str = ""):
        super().__init__(message)
        self.step = step


class SessionMismatchError(ProtocolError):
    def __init__(self, step: str, expected: int, received: int):
        super().__init__(
            f"received {step} response for wrong session id: expected {expected:#010x}, got {received:#010x}",
            step,
        )
        self.expected = expected
        self.received = received


class TruncatedPacketError(ProtocolError):
    pass


class ChallengeTokenError(QueryError, ValueError):
    pass


class UnsupportedNetworkError(QueryError, ValueError):
    pass


class UnknownProtocolError(QueryError, KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
