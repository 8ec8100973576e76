"""Persistencia de capturas: `<id>.png` + sidecar `<id>.json`.

Por qué JSON:
- El sidecar deja trazabilidad (petición, ubicación, tamaño) junto a cada PNG.
- Formato estable e indentado para revisarlo a mano o con otras herramientas.

Contrato de durabilidad:
- Las dos escrituras se lanzan juntas y `process` espera a ambas.
- Un fallo al escribir el PNG se registra y no aborta el lote.
- Un fallo al escribir el sidecar eleva `WriteError`.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import re
from pathlib import Path

from core.domain.models import CaptureMetadata, CaptureResult
from core.errors import MissingImageError, ParseError, WriteError
from core.logger import null_logger

_DATA_URI_RE = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)


def decode_image(image: str) -> bytes:
    """Quita el prefijo data-URI (si lo hay) y decodifica el base64."""

    data = "".join(_DATA_URI_RE.sub("", image.strip(), count=1).split())
    # El servicio a veces omite el relleno final.
    data += "=" * (-len(data) % 4)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ParseError(f"Invalid base64 image payload: {exc}") from exc


def export_metadata_json(*, metadata: CaptureMetadata, output_path: Path) -> Path:
    """Exporta el sidecar a JSON UTF-8 indentado."""

    payload = metadata.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return output_path


class ResultProcessor:
    """Decodifica la imagen de un `CaptureResult` y la guarda en `image_dir`."""

    def __init__(self, image_dir: Path, *, logger: logging.Logger | None = None) -> None:
        self._image_dir = Path(image_dir)
        self._log = logger or null_logger()

    def paths_for(self, capture_id: str) -> tuple[Path, Path]:
        return (
            self._image_dir / f"{capture_id}.png",
            self._image_dir / f"{capture_id}.json",
        )

    async def process(self, result: CaptureResult) -> None:
        if not result.image:
            # Resultado mal formado: no se escribe nada.
            raise MissingImageError(
                result.error or f"Capture {result.id or '<no id>'} returned no image",
                payload=result.model_dump(mode="json", exclude={"image"}),
            )
        if not result.id:
            raise ParseError("Capture result has an image but no id")

        png = decode_image(result.image)
        result.size = len(png)
        png_path, meta_path = self.paths_for(result.id)
        metadata = CaptureMetadata(
            id=result.id,
            url=result.url,
            location=result.location,
            request=result.request,
            size=result.size,
            error=result.error,
        )

        image_outcome, meta_outcome = await asyncio.gather(
            asyncio.to_thread(png_path.write_bytes, png),
            asyncio.to_thread(export_metadata_json, metadata=metadata, output_path=meta_path),
            return_exceptions=True,
        )
        result.image = None

        if isinstance(image_outcome, OSError):
            self._log.warning("Unable to save to %s: %s", png_path, image_outcome)
        elif isinstance(image_outcome, BaseException):
            raise image_outcome
        else:
            self._log.info("Processed %s. Saved file to %s", result.id, png_path)

        if isinstance(meta_outcome, OSError):
            raise WriteError(f"Unable to save metadata to {meta_path}: {meta_outcome}") from meta_outcome
        if isinstance(meta_outcome, BaseException):
            raise meta_outcome
