"""Orquestación connect -> login -> use.

Por qué aquí:
- Todo el flujo de negocio vive en el Core; la CLI solo parsea flags y pinta.
- Los fallos se lanzan como subclases de `QueryError` con la etapa que falló.
  No se reintenta nada y la sesión siempre se cierra.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from core.config import DEFAULT_QUERY_PORT, AppSettings
from core.domain.errors import InvalidServerId, LoginFailed, QueryError, SelectFailed
from core.domain.models import LoginResult
from core.interfaces.transport import TransportFactory
from core.protocol import I32_MAX, I32_MIN, parse_int
from core.services.query_session import QuerySession

_log = logging.getLogger(__name__)


@dataclass
class RunHooks:
    """Optional callbacks for UI layers (progress)."""

    stage_started: Callable[[str], None] | None = None
    stage_finished: Callable[[str], None] | None = None


def parse_port(
    raw: str | int | None,
    *,
    default: int = DEFAULT_QUERY_PORT,
    logger: logging.Logger | None = None,
) -> int:
    """Parsea el puerto; cualquier fallo cae en `default` con un warning."""

    log = logger or _log
    if raw is None:
        return default
    port = parse_int(str(raw).strip(), low=0, high=65535)
    if port is None:
        log.warning("Got parse error for port %r (expected 0-65535), using %d", raw, default)
        return default
    return port


def parse_server_id(raw: str | int) -> int:
    """Parsea el server id virtual; un fallo aborta la ejecución."""

    sid = parse_int(str(raw).strip())
    if sid is None:
        raise InvalidServerId(
            f"got error while parsing sid {raw!r}: expected an integer in [{I32_MIN}, {I32_MAX}]",
            stage="arguments",
        )
    return sid


def _notify(callback: Callable[[str], None] | None, stage: str) -> None:
    if callback is not None:
        callback(stage)


def run(
    server: str,
    port: int,
    user: str,
    password: str,
    server_id: str | int,
    *,
    transport_factory: TransportFactory,
    settings: AppSettings | None = None,
    logger: logging.Logger | None = None,
    hooks: RunHooks | None = None,
) -> LoginResult:
    """Ejecuta la secuencia completa y devuelve ambos estados.

    Raises:
        QueryError: cualquier fallo (conexión, E/S, decode, estado != 0).
    """

    settings = settings or AppSettings()
    log = logger or _log
    hooks = hooks or RunHooks()

    sid = parse_server_id(server_id)

    _notify(hooks.stage_started, "connect")
    session = QuerySession.connect(
        server,
        port,
        transport_factory=transport_factory,
        banner_timeout=settings.banner_timeout_seconds,
        command_timeout=settings.command_timeout_seconds,
        logger=log,
    )
    _notify(hooks.stage_finished, "connect")

    with session:
        _notify(hooks.stage_started, "login")
        try:
            login_status = session.login(user, password)
        except QueryError as exc:
            exc.stage = exc.stage or "login"
            raise
        if not login_status.is_ok:
            raise LoginFailed(login_status)
        log.info("Logged in as %s", user)
        _notify(hooks.stage_finished, "login")

        _notify(hooks.stage_started, "select server")
        try:
            select_status = session.select_server(sid)
        except QueryError as exc:
            exc.stage = exc.stage or "select server"
            raise
        if not select_status.is_ok:
            raise SelectFailed(select_status)
        log.info("Selected virtual server %d", sid)
        _notify(hooks.stage_finished, "select server")

    return LoginResult(
        server=server,
        port=port,
        server_id=sid,
        login_status=login_status,
        select_status=select_status,
    )
