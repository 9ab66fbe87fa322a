"""Transporte TCP sobre `socket`.

Por qué un wrapper:
- Estandariza timeouts y tamaño de lectura para que la sesión no toque sockets.
- Facilita testeo: se puede sustituir por un fake que implemente `ByteTransport`.
"""

from __future__ import annotations

import socket
from functools import partial

from core.config import AppSettings
from core.interfaces.transport import ByteTransport


class SocketTransport(ByteTransport):
    """Socket TCP conectado con lecturas acotadas por timeout."""

    def __init__(self, sock: socket.socket, *, buffer_size: int = 512) -> None:
        self._sock = sock
        self._buffer_size = buffer_size

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        *,
        connect_timeout: float = 10.0,
        buffer_size: int = 512,
    ) -> "SocketTransport":
        sock = socket.create_connection((host, port), timeout=connect_timeout)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        return cls(sock, buffer_size=buffer_size)

    def write(self, data: bytes) -> int:
        # `send` (no `sendall`) para poder detectar escrituras parciales.
        self._sock.settimeout(None)
        return self._sock.send(data)

    def read(self, timeout: float) -> bytes | None:
        self._sock.settimeout(timeout)
        try:
            chunk = self._sock.recv(self._buffer_size)
        except socket.timeout:
            return None
        if not chunk:
            # El par cerró la conexión: no hay datos.
            return None
        return chunk

    def close(self) -> None:
        self._sock.close()


def build_transport_factory(settings: AppSettings | None = None):
    """Devuelve un `TransportFactory` con los timeouts de `AppSettings`."""

    settings = settings or AppSettings()
    return partial(
        SocketTransport.open,
        connect_timeout=settings.connect_timeout_seconds,
        buffer_size=settings.read_buffer_size,
    )
