"""Taxonomía de errores del Core.

Por qué una jerarquía propia:
- La CLI solo necesita capturar `QueryError` para imprimir un mensaje y salir
  con código != 0; cada subclase dice *en qué etapa* falló la ejecución.
- `code` es estable (machine-readable) y `details` conserva el contexto.
"""

from __future__ import annotations

from typing import Any

from core.domain.models import QueryStatus


class QueryError(Exception):
    """Base de todos los errores del login ServerQuery."""

    code = "QUERY_ERROR"

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.stage = stage
        self.details = details or {}
        super().__init__(message)

    def describe(self) -> str:
        """Mensaje para humanos con la etapa (si se conoce)."""

        if self.stage:
            return f"{self.stage}: {self.message}"
        return self.message


class ConnectError(QueryError):
    """No se pudo abrir el canal TCP."""

    code = "CONNECT_ERROR"


class EncodingError(QueryError):
    """La respuesta no es texto UTF-8 válido."""

    code = "ENCODING_ERROR"


class MalformedStatus(QueryError):
    """Hay línea de estado pero no se puede parsear."""

    code = "MALFORMED_STATUS"


class NoStatusLine(QueryError):
    """La respuesta no contiene ninguna línea `error ...`."""

    code = "NO_STATUS_LINE"


class InvalidServerId(QueryError):
    """El server id recibido no es un entero."""

    code = "INVALID_SERVER_ID"


class ExchangeError(QueryError):
    """Fallo de E/S durante un intercambio comando/respuesta."""

    code = "EXCHANGE_ERROR"


class WriteError(ExchangeError):
    code = "WRITE_ERROR"


class TransportError(ExchangeError):
    code = "TRANSPORT_ERROR"


class NoResponse(ExchangeError):
    """No llegaron datos antes del timeout (no se reintenta)."""

    code = "NO_RESPONSE"


class StatusFailed(QueryError):
    """El servidor respondió con un estado distinto de 0."""

    code = "STATUS_FAILED"
    default_stage = "query"

    def __init__(self, status: QueryStatus, *, stage: str | None = None) -> None:
        self.status = status
        stage = stage or self.default_stage
        super().__init__(
            f"server returned id={status.code} msg={status.display_message}",
            stage=stage,
            details={"id": status.code, "msg": status.message},
        )


class LoginFailed(StatusFailed):
    code = "LOGIN_FAILED"
    default_stage = "login"


class SelectFailed(StatusFailed):
    code = "SELECT_FAILED"
    default_stage = "select server"
