"""CLI principal: login + selección de servidor virtual.

Uso:

    ts3query-login USER PASSWORD [--server HOST] [--port PORT] [--sid ID]

Sale con 0 si `login` y `use` devuelven `id=0`; con 1 en cualquier otro caso.
"""

from __future__ import annotations

import typer
from rich.console import Console

from adapters.tcp_transport import build_transport_factory
from cli.logging_setup import configure_logging
from cli.ui_components import build_error_panel, build_result_table
from core.config import AppSettings
from core.domain.errors import QueryError
from core.services import login_pipeline

app = typer.Typer(add_completion=False, help="Log in to a TeamSpeak ServerQuery and select a virtual server.")

_console = Console()
_err_console = Console(stderr=True)


@app.command()
def login(
    user: str = typer.Argument(..., help="ServerQuery user."),
    password: str = typer.Argument(..., help="ServerQuery password."),
    server: str | None = typer.Option(None, "--server", help="ServerQuery server address."),
    port: str | None = typer.Option(None, "--port", help="ServerQuery server port."),
    sid: str | None = typer.Option(None, "--sid", help="Virtual server id to select."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the result table."),
) -> None:
    """Log in and select the virtual server."""

    settings = AppSettings()
    logger = configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        result = login_pipeline.run(
            server or settings.default_server,
            settings.default_port if port is None else login_pipeline.parse_port(port, logger=logger),
            user,
            password,
            sid if sid is not None else settings.default_server_id,
            transport_factory=build_transport_factory(settings),
            settings=settings,
            logger=logger,
        )
    except QueryError as exc:
        _err_console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc

    if not quiet:
        _console.print(build_result_table(result))


def run() -> None:
    app()
