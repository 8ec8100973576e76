"""Errores del cliente GeoScreenshot.

Por qué una jerarquía propia:
- La CLI captura un único tipo (`GeoScreenshotError`) y muestra el mensaje.
- Los llamadores de librería distinguen red, API, parseo y disco sin mirar httpx.
"""

from __future__ import annotations

from typing import Any


class GeoScreenshotError(Exception):
    """Base de todos los errores del cliente."""


class ConfigError(GeoScreenshotError):
    """Credenciales ausentes o configuración inválida (fatal al arrancar)."""


class TransportError(GeoScreenshotError):
    """Fallo de red (DNS, conexión, timeout del transporte)."""


class ParseError(GeoScreenshotError):
    """Respuesta o payload que no se puede decodificar (JSON/base64)."""


class WriteError(GeoScreenshotError):
    """Fallo de I/O local al persistir una captura."""


class ApiError(GeoScreenshotError):
    """Status HTTP distinto de 200 o campo `error` reportado por el servidor."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = strip_image(payload)


class MissingImageError(ApiError):
    """Resultado de captura sin imagen: no se escribe nada a disco."""


def strip_image(payload: Any) -> Any:
    """Devuelve una copia de `payload` sin el campo `image` (si es un dict)."""

    if isinstance(payload, dict) and "image" in payload:
        return {k: v for k, v in payload.items() if k != "image"}
    return payload
