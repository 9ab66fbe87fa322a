"""Contrato del canal de bytes.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- La sesión no sabe si habla con un socket real o con un fake de tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteTransport(Protocol):
    """Canal bidireccional ya conectado.

    Reglas de diseño:
    - `read` bloquea como mucho `timeout` segundos y devuelve `None` si no
      llegó nada (timeout o el par cerró); cualquier otro fallo es `OSError`.
    - `write` devuelve los bytes efectivamente enviados (puede ser < len).
    """

    def write(self, data: bytes) -> int:
        ...

    def read(self, timeout: float) -> bytes | None:
        ...

    def close(self) -> None:
        ...


class TransportFactory(Protocol):
    """Abre un `ByteTransport` contra `host:port` (lanza `OSError` si falla)."""

    def __call__(self, host: str, port: int) -> ByteTransport:
        ...
