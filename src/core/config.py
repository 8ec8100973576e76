"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Resuelve una única vez la cadena entorno → opciones → default y entrega
  un `GeoScreenshotConfig` inmutable a los adaptadores.
"""

from __future__ import annotations

import base64
import os
import sys
from pathlib import Path

from dotenv import set_key
from pydantic import BaseModel, Field, SecretStr, ValidationError
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigError

DEFAULT_API_BASE = "https://www.geoscreenshot.com"
DEFAULT_TARGET_URL = "http://weather.yahoo.com"
DEFAULT_IMAGE_DIR = Path("./out")

# 3 es óptimo para la mayoría de peticiones; el servicio pide no pasar de 5.
API_LIMIT = 3

# Claves que `doctor setup` puede persistir en el .env del usuario.
USER_ENV_KEYS = ("GS_API_BASE", "GS_USERNAME", "GS_PASSWORD", "GS_API_LIMIT", "GS_HTTP_TIMEOUT_SECONDS")


def get_user_env_file() -> Path:
    """`.env` por usuario: `%APPDATA%`, `~/Library/Application Support` o XDG."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return base / "geoscreenshot" / ".env"


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Actualiza credenciales `GS_*` en el .env del usuario (modo 0600).

    Las claves ya presentes se conservan; los valores `None` se ignoran.
    """

    unknown = sorted(set(values) - set(USER_ENV_KEYS))
    if unknown:
        raise ConfigError(f"Unsupported user settings: {', '.join(unknown)}")

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    if not env_path.exists():
        env_path.write_text("# GeoScreenshot credentials\n", encoding="utf-8")
    env_path.chmod(0o600)

    for key, value in values.items():
        if value is not None:
            set_key(str(env_path), key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Variables de entorno del cliente (`GS_*`).

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Las credenciales viven en el entorno, no en el código.
    """

    model_config = SettingsConfigDict(
        env_prefix="GS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base: str = Field(
        default=DEFAULT_API_BASE,
        min_length=8,
        description="Base URL del servicio (GS_API_BASE).",
    )
    username: str | None = Field(
        default=None,
        description="Usuario de la API (GS_USERNAME).",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Password de la API (GS_PASSWORD).",
    )
    api_limit: int = Field(
        default=API_LIMIT,
        ge=1,
        le=5,
        description="Capturas simultáneas permitidas contra la API.",
    )
    http_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout por request (segundos). Una captura tarda `delay` + render.",
    )
    user_agent: str = Field(
        default="geoscreenshot-client/0.1",
        min_length=1,
        description="User-Agent del cliente HTTP.",
    )


class ClientOptions(BaseModel):
    """Registro de configuración que pasa el llamador.

    `username`/`password` son solo para pruebas: en uso real van en el entorno.
    """

    url: str | None = None
    username: str | None = None
    password: str | None = None
    image_dir: Path | None = None
    verbose: bool = False


class GeoScreenshotConfig(BaseModel):
    """Configuración efectiva, resuelta una vez al arrancar."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    authorization: str = Field(..., repr=False)
    target_url: str
    image_dir: Path
    api_limit: int = API_LIMIT
    timeout_seconds: float = 120.0
    user_agent: str = "geoscreenshot-client/0.1"
    verbose: bool = False


def encode_basic_auth(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def load_settings() -> AppSettings:
    """Lee `GS_*` del entorno y los .env; valores inválidos elevan `ConfigError`."""

    try:
        return AppSettings()
    except ValidationError as exc:
        problems = "; ".join(
            f"GS_{str(err['loc'][0]).upper()}: {err['msg']}" if err.get("loc") else err["msg"]
            for err in exc.errors()
        )
        raise ConfigError(f"Invalid GeoScreenshot settings: {problems}") from exc


def resolve_config(
    options: ClientOptions | None = None,
    *,
    settings: AppSettings | None = None,
) -> GeoScreenshotConfig:
    """Resuelve entorno → opciones → default y prepara el directorio de salida.

    El entorno gana para usuario, password y base URL. Falla con `ConfigError`
    si no hay credenciales: no tiene sentido reintentar.
    """

    options = options or ClientOptions()
    settings = settings or load_settings()

    username = settings.username or options.username
    password = (
        settings.password.get_secret_value() if settings.password else None
    ) or options.password
    if not (username and password):
        raise ConfigError(
            "GeoScreenshot API credentials not specified. Env variables: GS_USERNAME, GS_PASSWORD"
        )

    image_dir = options.image_dir or DEFAULT_IMAGE_DIR
    try:
        image_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Cannot create image directory {image_dir}: {exc}") from exc

    return GeoScreenshotConfig(
        base_url=settings.api_base.rstrip("/"),
        authorization=encode_basic_auth(username, password),
        target_url=options.url or DEFAULT_TARGET_URL,
        image_dir=image_dir,
        api_limit=settings.api_limit,
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.user_agent,
        verbose=options.verbose,
    )
