"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Valores inmutables con igualdad estructural sin escribir `__eq__` a mano.
- Facilita mostrar/serializar resultados desde la CLI.

Nota:
- Estos modelos describen *qué* responde el servidor, no *cómo* se obtiene.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# Secuencias de escape del protocolo ServerQuery (orden irrelevante: cada
# escape empieza por backslash y se consume de izquierda a derecha).
_ESCAPES = {
    "\\": "\\",
    "/": "/",
    "s": " ",
    "p": "|",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def unescape_query_text(text: str) -> str:
    """Decodifica los escapes ServerQuery (`\\s` -> espacio, `\\p` -> `|`, ...)."""

    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in _ESCAPES:
            out.append(_ESCAPES[text[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


class QueryStatus(BaseModel):
    """Línea de estado `error id=<N> msg=<texto>` ya decodificada.

    Por qué existe:
    - El protocolo termina *toda* respuesta con una línea `error`, incluso
      las exitosas (`id=0`). Este valor separa el código del mensaje.
    """

    model_config = ConfigDict(frozen=True)

    code: int = Field(
        ...,
        description="Código de estado (0 = éxito, cualquier otro = fallo del protocolo).",
    )
    message: str = Field(
        default="",
        description="Mensaje tal como lo envía el servidor (con escapes).",
    )

    @property
    def is_ok(self) -> bool:
        return self.code == 0

    @property
    def display_message(self) -> str:
        """Mensaje legible para humanos (escapes decodificados)."""

        return unescape_query_text(self.message)


class LoginResult(BaseModel):
    """Resultado de una ejecución completa login + use."""

    model_config = ConfigDict(frozen=True)

    server: str = Field(..., min_length=1, description="Host al que se conectó.")
    port: int = Field(..., ge=0, le=65535, description="Puerto usado.")
    server_id: int = Field(..., description="Server id virtual seleccionado.")
    login_status: QueryStatus = Field(..., description="Estado devuelto por `login`.")
    select_status: QueryStatus = Field(..., description="Estado devuelto por `use`.")
