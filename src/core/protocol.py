"""Codec del protocolo ServerQuery (solo lo que necesita el login).

Por qué funciones puras:
- El decoder no toca el socket: recibe bytes de *una* lectura y devuelve un
  `QueryStatus` (o `None`). Así se testea sin red.
- La sesión compone estos helpers con el transporte.

Formato de una respuesta (un chunk puede traer eco + líneas informativas):

    error id=<int> msg=<texto>

`id=0` es éxito pese a la palabra `error` (vocabulario propio del protocolo).
"""

from __future__ import annotations

import re

from core.domain.errors import EncodingError, MalformedStatus
from core.domain.models import QueryStatus

# El servidor espera `\n\r` (sí, invertido respecto a CRLF).
LINE_TERMINATOR = "\n\r"
STATUS_PREFIX = "error "
TEXT_ENCODING = "utf-8"

_INT_RE = re.compile(r"[+-]?[0-9]+")
# Solo los terminadores del protocolo; `str.splitlines()` también corta en
# \x0b, \x0c, \x1c-\x1e, \x85, \u2028 y \u2029.
_LINE_SPLIT_RE = re.compile(r"\r\n|\n|\r")

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


def parse_int(raw: str, *, low: int = I32_MIN, high: int = I32_MAX) -> int | None:
    """Entero decimal ASCII estricto (`[+-]?[0-9]+`) dentro de `[low, high]`.

    Devuelve `None` si no cumple; `int()` a secas acepta `1_000`, dígitos
    no ASCII y espacios.
    """

    if not _INT_RE.fullmatch(raw):
        return None
    value = int(raw)
    if not low <= value <= high:
        return None
    return value


def format_command(*parts: object) -> str:
    """Une las partes con espacios y añade el terminador del protocolo."""

    return " ".join(str(part) for part in parts) + LINE_TERMINATOR


def _field_value(field: str, raw_line: str) -> str:
    _, sep, value = field.partition("=")
    if not sep:
        raise MalformedStatus(
            f"status field without '=': {field!r}",
            details={"line": raw_line},
        )
    return value


def parse_status_line(line: str) -> QueryStatus:
    """Parsea una única línea `error id=<N> msg=<texto>`."""

    _, sep, rest = line.partition(STATUS_PREFIX)
    if not sep:
        raise MalformedStatus(f"not a status line: {line!r}", details={"line": line})

    id_field, sep, msg_field = rest.partition(" ")
    if not sep:
        raise MalformedStatus(f"status line without msg field: {line!r}", details={"line": line})

    raw_id = _field_value(id_field, line)
    message = _field_value(msg_field, line)

    code = parse_int(raw_id)
    if code is None:
        raise MalformedStatus(f"status id is not a 32-bit integer: {raw_id!r}", details={"line": line})

    return QueryStatus(code=code, message=message)


def decode_status(raw: bytes) -> QueryStatus | None:
    """Busca y decodifica la línea de estado de un chunk de respuesta.

    Reglas:
    - Bytes no UTF-8 -> `EncodingError` (antes de escanear líneas).
    - Se usa la *primera* línea que empieza por `error `.
    - Sin línea de estado -> `None` (distinto de un estado de fallo explícito).
    """

    try:
        content = raw.decode(TEXT_ENCODING)
    except UnicodeDecodeError as exc:
        raise EncodingError(f"response is not valid {TEXT_ENCODING}: {exc}") from exc

    # `\n\r` produce una línea vacía intermedia y ningún resto en la siguiente.
    for line in _LINE_SPLIT_RE.split(content):
        if line.startswith(STATUS_PREFIX):
            return parse_status_line(line)
    return None
