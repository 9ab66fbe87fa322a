"""Sesión ServerQuery síncrona.

La sesión es dueña exclusiva de un `ByteTransport` conectado. Cada operación
es un *exchange*: escribir una línea de comando, esperar un único chunk de
respuesta con timeout y decodificar la línea de estado. Nunca se envía un
segundo comando sin haber consumido la respuesta (o el timeout) del anterior.
"""

from __future__ import annotations

import logging

from core.domain.errors import (
    ConnectError,
    NoResponse,
    NoStatusLine,
    TransportError,
    WriteError,
)
from core.domain.models import QueryStatus
from core.interfaces.transport import ByteTransport, TransportFactory
from core.protocol import TEXT_ENCODING, decode_status, format_command

BANNER_TIMEOUT_SECONDS = 1.0
COMMAND_TIMEOUT_SECONDS = 2.0

_log = logging.getLogger(__name__)


def _mask_command(command_line: str) -> str:
    if command_line.startswith("login "):
        parts = command_line.split(" ", 2)
        if len(parts) == 3:
            return f"login {parts[1]} ***"
    return command_line.rstrip("\r\n")


class QuerySession:
    """Canal ServerQuery listo para `login` / `select_server`."""

    def __init__(
        self,
        transport: ByteTransport,
        *,
        command_timeout: float = COMMAND_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._transport = transport
        self._command_timeout = command_timeout
        self._log = logger or _log
        self._closed = False

    @classmethod
    def connect(
        cls,
        address: str,
        port: int,
        *,
        transport_factory: TransportFactory,
        banner_timeout: float = BANNER_TIMEOUT_SECONDS,
        command_timeout: float = COMMAND_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
    ) -> "QuerySession":
        """Conecta y consume el banner (best-effort).

        - Si no llega banner dentro de `banner_timeout`: warning y se sigue.
        - Si la lectura falla por otro motivo: `TransportError`.
        """

        log = logger or _log
        try:
            transport = transport_factory(address, port)
        except OSError as exc:
            raise ConnectError(
                f"cannot connect to {address}:{port}: {exc}",
                stage="connect",
                details={"server": address, "port": port},
            ) from exc

        session = cls(transport, command_timeout=command_timeout, logger=log)
        try:
            banner = transport.read(banner_timeout)
        except OSError as exc:
            session.close()
            raise TransportError(
                f"error while reading banner: {exc}",
                stage="connect",
            ) from exc

        if banner is None:
            log.warning("No banner received from %s:%s within %.1fs", address, port, banner_timeout)
        else:
            log.debug("Banner: %s", banner.decode(TEXT_ENCODING, "replace").strip())
        return session

    def exchange(self, command_line: str, timeout: float) -> bytes:
        """Escribe `command_line` y devuelve el primer chunk de respuesta."""

        payload = command_line.encode(TEXT_ENCODING)
        self._log.debug("-> %s", _mask_command(command_line))
        try:
            written = self._transport.write(payload)
        except OSError as exc:
            raise WriteError(f"error while sending command: {exc}") from exc

        if written != len(payload):
            # Se registra y se sigue leyendo la respuesta.
            self._log.error("Short write: sent %d of %d bytes", written, len(payload))

        try:
            data = self._transport.read(timeout)
        except OSError as exc:
            raise TransportError(f"error while reading response: {exc}") from exc

        if data is None:
            raise NoResponse(f"no response within {timeout:g}s")
        self._log.debug("<- %r", data)
        return data

    def _command(self, command_line: str) -> QueryStatus:
        data = self.exchange(command_line, self._command_timeout)
        status = decode_status(data)
        if status is None:
            raise NoStatusLine("can't find status line in response", details={"response": data})
        return status

    def login(self, user: str, password: str) -> QueryStatus:
        """Envía `login <user> <password>`; un estado != 0 se devuelve, no se lanza."""

        return self._command(format_command("login", user, password))

    def select_server(self, server_id: int) -> QueryStatus:
        """Envía `use <server_id>`; mismo contrato que `login`."""

        return self._command(format_command("use", server_id))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._transport.close()
        except OSError as exc:
            self._log.debug("Ignoring error while closing transport: %s", exc)

    def __enter__(self) -> "QuerySession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
