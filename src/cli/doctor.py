"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.tcp_transport import build_transport_factory
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import QueryError
from core.interfaces.transport import TransportFactory
from core.services.login_pipeline import parse_port, parse_server_id

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_banner(
    factory: TransportFactory, host: str, port: int, timeout: float
) -> tuple[bool, str]:
    """Open a connection and report the first banner line (best-effort)."""

    try:
        transport = factory(host, port)
    except OSError as exc:
        return False, str(exc)
    try:
        banner = transport.read(timeout)
    except OSError as exc:
        return False, str(exc)
    finally:
        transport.close()
    if banner is None:
        return True, "connected, no banner"
    first_line = banner.decode("utf-8", "replace").strip().splitlines()
    return True, first_line[0] if first_line else "connected"


@app.command()
def check(
    server: str | None = typer.Option(None, "--server", help="Override the configured server."),
    port: str | None = typer.Option(None, "--port", help="Override the configured port."),
) -> None:
    """Show effective settings and probe the ServerQuery port."""

    settings = AppSettings()
    host = server or settings.default_server
    port_value = settings.default_port if port is None else parse_port(port)

    table = Table(title="ts3query Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Server", "OK", f"{host}:{port_value}")
    try:
        sid = parse_server_id(settings.default_server_id)
        table.add_row("Default sid", "OK", str(sid))
    except QueryError as exc:
        table.add_row("Default sid", "FAIL", exc.message)
    table.add_row(
        "Timeouts",
        "OK",
        f"banner {settings.banner_timeout_seconds:g}s, command {settings.command_timeout_seconds:g}s",
    )
    table.add_row("User config", "OK", str(get_user_env_file()))

    ok, detail = _check_banner(
        build_transport_factory(settings), host, port_value, settings.banner_timeout_seconds
    )
    table.add_row("ServerQuery port", "OK" if ok else "FAIL", detail)

    _console.print(table)

    if not ok:
        raise typer.Exit(code=1)


@app.command(name="set-defaults")
def set_defaults(
    server: str | None = typer.Option(None, "--server", help="Default server address."),
    port: int | None = typer.Option(None, "--port", min=0, max=65535, help="Default port."),
    sid: int | None = typer.Option(None, "--sid", help="Default virtual server id."),
) -> None:
    """Store defaults in the user config .env (passwords are never stored)."""

    values: dict[str, str] = {}
    if server:
        values["TS3QUERY_DEFAULT_SERVER"] = server
    if port is not None:
        values["TS3QUERY_DEFAULT_PORT"] = str(port)
    if sid is not None:
        values["TS3QUERY_DEFAULT_SERVER_ID"] = str(sid)

    if not values:
        raise typer.BadParameter("pass at least one of --server, --port, --sid")

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved defaults to:[/green] {env_path}")


def run() -> None:
    app()
