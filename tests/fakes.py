# File: tests/fakes.py
"""Scripted fake transports for session and pipeline tests."""

from typing import Optional, Union

Reply = Union[bytes, None, Exception]


class FakeTransport:
    """In-memory `ByteTransport` that replays scripted reads."""

    def __init__(self, replies: Optional[list[Reply]] = None, short_write: int = 0):
        self.replies = list(replies or [])
        self.short_write = short_write
        self.writes: list[bytes] = []
        self.read_timeouts: list[float] = []
        self.closed = False
        self.write_error: Optional[Exception] = None

    def write(self, data: bytes) -> int:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(data)
        return len(data) - self.short_write

    def read(self, timeout: float) -> Optional[bytes]:
        self.read_timeouts.append(timeout)
        if not self.replies:
            return None
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True

    @property
    def commands(self) -> list[str]:
        return [w.decode("utf-8") for w in self.writes]


class FakeTransportFactory:
    """Records connect calls and hands out a prepared `FakeTransport`."""

    def __init__(self, transport: Optional[FakeTransport] = None, error: Optional[OSError] = None):
        self.transport = transport or FakeTransport()
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def __call__(self, host: str, port: int) -> FakeTransport:
        self.calls.append((host, port))
        if self.error is not None:
            raise self.error
        return self.transport


BANNER = b"TS3\n\rWelcome to the TeamSpeak 3 ServerQuery interface.\n\r"
OK = b"error id=0 msg=ok\n\r"
INVALID_LOGIN = b"error id=520 msg=invalid\\sloginname\\sor\\spassword\n\r"
