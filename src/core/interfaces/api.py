"""Contrato de la API remota de capturas.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- `LocationDirectory` y `CaptureInvoker` dependen de esto, no de httpx,
  así los tests pueden pasar un stub en memoria.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ScreenshotApi(Protocol):
    """Acceso autenticado a `{base}/api/ws/<path>`.

    Reglas de diseño:
    - Ambos métodos son asíncronos porque hacen I/O (HTTP).
    - Los fallos se elevan como `core.errors.GeoScreenshotError`, sin reintentos.
    """

    async def get_json(self, path: str) -> Any:
        """GET autenticado; devuelve el cuerpo JSON parseado."""

        ...

    async def post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST autenticado con cuerpo JSON; devuelve el objeto JSON de respuesta."""

        ...
