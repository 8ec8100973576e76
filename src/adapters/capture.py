"""Invocador de capturas (`POST /api/ws/capture`).

Responsabilidad:
- Construir el `CaptureRequest` con los defaults del servicio.
- Adjuntar `location` y `request` a la respuesta.
- No escribe a disco: eso es trabajo de `adapters.capture_writer`.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from core.domain.models import DEFAULT_LOCATION, CaptureRequest, CaptureResult, Location
from core.errors import ParseError
from core.interfaces.api import ScreenshotApi
from core.logger import null_logger


class CaptureInvoker:
    """Emite una captura para un par (url, ubicación)."""

    endpoint = "capture"

    def __init__(
        self,
        api: ScreenshotApi,
        *,
        default_url: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api = api
        self._default_url = default_url
        self._log = logger or null_logger()

    def build_request(self, url: str | None = None, location: Location | None = None) -> CaptureRequest:
        location = location or DEFAULT_LOCATION
        return CaptureRequest(url=url or self._default_url, location=location.name)

    async def capture(self, url: str | None = None, location: Location | None = None) -> CaptureResult:
        location = location or DEFAULT_LOCATION
        request = self.build_request(url, location)
        self._log.info("Capturing URL: %s Location: %s", request.url, location.name)

        # ApiError ya llega sin el campo `image`.
        body = await self._api.post_json(self.endpoint, request.model_dump(mode="json"))

        # `location` y `request` los adjuntamos nosotros.
        fields = {k: v for k, v in body.items() if k not in ("location", "request")}
        try:
            result = CaptureResult.model_validate(fields)
        except ValidationError as exc:
            raise ParseError(f"Unexpected capture payload: {exc}") from exc

        result.url = request.url
        result.location = location
        result.request = request
        self._log.info("Done capturing URL: %s Location: %s", request.url, location.name)
        return result
