"""Wrapper de httpx para la API de GeoScreenshot.

Por qué un wrapper:
- Estandariza timeouts, headers de auth y no-cache para todas las llamadas.
- Normaliza fallos de red, HTTP y de la aplicación en `core.errors`.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import GeoScreenshotConfig
from core.errors import ApiError, ParseError, TransportError, strip_image
from core.logger import null_logger

PATH_BASE = "/api/ws/"


def build_async_client(
    config: GeoScreenshotConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` autenticado.

    Por qué un builder:
    - Centraliza timeouts/headers para que `get_json` y `post_json` se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    headers: dict[str, str] = {
        "User-Agent": config.user_agent,
        "Authorization": config.authorization,
        "Cache-Control": "no-cache",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=config.base_url + PATH_BASE,
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"HTTP {status_code}"


class GeoScreenshotClient:
    """Cliente JSON autenticado (implementa `core.interfaces.api.ScreenshotApi`).

    Sin reintentos: cualquier fallo se eleva de inmediato al llamador.
    """

    def __init__(
        self,
        config: GeoScreenshotConfig,
        *,
        client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._client = client or build_async_client(config)
        self._log = logger or null_logger()

    async def __aenter__(self) -> "GeoScreenshotClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str) -> Any:
        self._log.debug("GET %s", path)
        response = await self._send("GET", path)
        return self._decode(response, path)

    async def post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        self._log.debug("POST %s", path)
        response = await self._send("POST", path, json=body)
        payload = self._decode(response, path)
        if not isinstance(payload, dict):
            raise ParseError(f"Expected a JSON object from {path}, got {type(payload).__name__}")
        return payload

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

    def _decode(self, response: httpx.Response, path: str) -> Any:
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            if response.status_code != 200:
                raise ApiError(
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                ) from exc
            raise ParseError(f"Invalid JSON from {path}: {exc}") from exc

        if response.status_code != 200 or (isinstance(payload, dict) and payload.get("error")):
            message = _error_message(payload, response.status_code)
            self._log.debug("API error on %s: %s", path, message)
            raise ApiError(
                message,
                status_code=response.status_code,
                payload=strip_image(payload),
            )
        return payload
