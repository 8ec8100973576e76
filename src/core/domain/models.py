"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación del JSON que devuelve la API sin acoplar el Core a httpx.
- Serialización estable para la petición de captura y el sidecar de metadata.

Nota:
- Estos modelos describen *qué* es una captura, no *cómo* se obtiene.
"""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.config import ConfigDict


class Location(BaseModel):
    """Punto geográfico desde el que el servicio renderiza una URL.

    Solo llega desde el directorio remoto; la única instancia local es
    `DEFAULT_LOCATION`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(
        ...,
        min_length=1,
        description="Clave única de la ubicación (p.ej. 'us-ny-nwy').",
    )
    city: str | None = None
    state: str | None = None
    country_code: str | None = Field(
        default=None,
        description="Código ISO alpha-2 del país.",
    )
    country: str | None = None
    lat: float | None = None
    lon: float | None = None
    plan: str | None = Field(
        default=None,
        description="Plan mínimo requerido para usar la ubicación.",
    )
    timezone: str | None = None


# Servidor de alta disponibilidad.
DEFAULT_LOCATION = Location(
    name="us-ny-nwy",
    city="New York",
    state="NY",
    country_code="US",
    country="United States",
    lat=40.7143,
    lon=-74.006,
    plan="free",
    timezone="America/New_York",
)


class CaptureRequest(BaseModel):
    """Cuerpo del POST `capture`.

    El servicio espera `delay` como string y los flags como 0/1.
    """

    url: str = Field(..., min_length=1)
    viewport: str = "1336x1400"
    delay: int = Field(default=5, ge=0, description="Segundos de espera antes de capturar.")
    location: str = Field(..., min_length=1, description="`Location.name` destino.")
    useragent: str = "chrome"
    fullpage: bool = False
    no_images: bool = False
    no_cache: bool = False

    @field_serializer("delay")
    def _delay_as_str(self, value: int) -> str:
        return str(value)

    @field_serializer("fullpage", "no_images", "no_cache")
    def _flag_as_int(self, value: bool) -> int:
        return int(value)


class CaptureResult(BaseModel):
    """Respuesta de una captura más la metadata que adjunta el invocador.

    `image` es transitorio: el procesador lo vacía tras escribir el PNG.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = Field(default=None, description="Identificador opaco asignado por el servidor.")
    image: str | None = Field(default=None, repr=False, description="PNG en base64 (puede traer prefijo data-URI).")
    url: str | None = None
    location: Location | None = None
    request: CaptureRequest | None = None
    size: int | None = Field(default=None, ge=0, description="Bytes del PNG decodificado.")
    error: str | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _error_as_str(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CaptureMetadata(BaseModel):
    """Sidecar `<id>.json` que acompaña a cada PNG."""

    date: int = Field(
        default_factory=lambda: int(time.time() * 1000),
        description="Momento de la captura (ms desde epoch).",
    )
    id: str
    url: str | None = None
    location: Location | None = None
    request: CaptureRequest | None = None
    size: int = Field(..., ge=0)
    error: str | None = None
