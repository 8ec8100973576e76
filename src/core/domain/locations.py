"""Utilidades puras sobre listas de ubicaciones."""

from __future__ import annotations

import random
from typing import Callable, Sequence

from core.domain.models import Location

DEFAULT_COUNTRY_CODE = "US"


def filter_by_country(country_code: object = DEFAULT_COUNTRY_CODE) -> Callable[[Sequence[Location]], list[Location]]:
    """Devuelve un filtro reutilizable por `country_code` exacto.

    El código se normaliza (trim + mayúsculas). Si no es un string no vacío
    se usa "US".
    """

    code = country_code.strip().upper() if isinstance(country_code, str) else ""
    code = code or DEFAULT_COUNTRY_CODE

    def _filter(locations: Sequence[Location]) -> list[Location]:
        return [loc for loc in locations if loc.country_code == code]

    return _filter


def sample_locations(
    locations: Sequence[Location],
    n: int | None = None,
    *,
    rng: random.Random | None = None,
) -> list[Location]:
    """Copia barajada (Fisher-Yates) de `locations`, truncada a `n` si se indica.

    No muta la secuencia de entrada.
    """

    if n is not None and n < 0:
        raise ValueError("n must be >= 0")
    rng = rng or random.Random()
    shuffled = list(locations)
    rng.shuffle(shuffled)
    if n is not None:
        return shuffled[:n]
    return shuffled
