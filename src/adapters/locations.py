"""Directorio de ubicaciones de captura.

Fuente: `GET /api/ws/locations`. La lista se devuelve tal cual (solo se valida
la forma JSON); filtrado y muestreo viven en `core.domain.locations`.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from pydantic import TypeAdapter, ValidationError

from core.domain.locations import filter_by_country, sample_locations
from core.domain.models import Location
from core.errors import ParseError
from core.interfaces.api import ScreenshotApi
from core.logger import null_logger

_LOCATIONS = TypeAdapter(list[Location])


class LocationDirectory:
    """Lista las ubicaciones disponibles para la cuenta."""

    endpoint = "locations"

    def __init__(self, api: ScreenshotApi, *, logger: logging.Logger | None = None) -> None:
        self._api = api
        self._log = logger or null_logger()

    async def list(self) -> list[Location]:
        self._log.info("Retrieving all locations")
        payload = await self._api.get_json(self.endpoint)
        try:
            locations = _LOCATIONS.validate_python(payload)
        except ValidationError as exc:
            raise ParseError(f"Unexpected locations payload: {exc}") from exc
        self._log.debug("Retrieved %d locations", len(locations))
        return locations

    @staticmethod
    def filter_by_country(country_code: object = "US") -> Callable[[Sequence[Location]], list[Location]]:
        return filter_by_country(country_code)

    @staticmethod
    def sample(locations: Sequence[Location], n: int | None = None) -> list[Location]:
        return sample_locations(locations, n)
