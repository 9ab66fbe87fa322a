"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `login` y en `doctor`.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.errors import QueryError, StatusFailed
from core.domain.models import LoginResult


def build_result_table(result: LoginResult) -> Table:
    """Tabla con el estado de cada comando enviado."""

    table = Table(title=f"ServerQuery {result.server}:{result.port}")
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Id", style="white")
    table.add_column("Message", style="green")
    table.add_row("login", str(result.login_status.code), result.login_status.display_message)
    table.add_row(
        f"use {result.server_id}",
        str(result.select_status.code),
        result.select_status.display_message,
    )
    return table


def build_error_panel(error: QueryError) -> Panel:
    """Panel para presentar un `QueryError` con la etapa que falló."""

    title = Text("Error", style="bold red")
    body = Text()
    body.append(error.describe() + "\n")
    body.append(f"\ncode: {error.code}", style="dim")
    if isinstance(error, StatusFailed):
        body.append(f"\nserver id={error.status.code}", style="dim")

    return Panel(body, title=title, border_style="red")
