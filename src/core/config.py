"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el transporte TCP y la sesión lean timeouts de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUERY_PORT = 10011


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ts3query-login"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ts3query-login"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ts3query-login"
    return Path.home() / ".config" / "ts3query-login"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ts3query-login user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Los flags de la CLI tienen prioridad; esto solo aporta los defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TS3QUERY_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    default_server: str = Field(
        default="localhost",
        min_length=1,
        description="Host del ServerQuery cuando no se pasa --server.",
    )
    default_port: int = Field(
        default=DEFAULT_QUERY_PORT,
        ge=0,
        le=65535,
        description="Puerto del ServerQuery cuando no se pasa --port.",
    )
    default_server_id: str = Field(
        default="0",
        description="Server id virtual (sin parsear) cuando no se pasa --sid.",
    )

    connect_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout para abrir la conexión TCP (segundos).",
    )
    banner_timeout_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Espera máxima para el banner inicial (segundos).",
    )
    command_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Espera máxima por la respuesta de cada comando (segundos).",
    )
    read_buffer_size: int = Field(
        default=512,
        ge=64,
        le=65536,
        description="Bytes máximos por lectura del socket.",
    )

    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging por defecto (DEBUG/INFO/WARNING/ERROR).",
    )
