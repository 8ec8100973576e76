"""Fixtures compartidas: config de prueba, ubicaciones y transporte falso."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import httpx
import pytest

from adapters.http_client import GeoScreenshotClient, build_async_client
from core.config import AppSettings, GeoScreenshotConfig, encode_basic_auth
from core.domain.models import Location

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("GS_USERNAME", "GS_PASSWORD", "GS_API_BASE", "GS_API_LIMIT", "GS_HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setitem(AppSettings.model_config, "env_file", None)


def make_location(name: str, country_code: str = "US", **extra: object) -> Location:
    return Location(
        name=name,
        city=extra.get("city", "City"),
        state=extra.get("state"),
        country_code=country_code,
        country=extra.get("country"),
        lat=0.0,
        lon=0.0,
        plan="free",
        timezone="UTC",
    )


@pytest.fixture
def locations() -> list[Location]:
    return [
        make_location("us-ny-nwy", "US"),
        make_location("us-ca-sfo", "US"),
        make_location("lv-rix-riga", "LV"),
        make_location("de-be-ber", "DE"),
        make_location("us-tx-dal", "US"),
    ]


@pytest.fixture
def config(tmp_path: Path) -> GeoScreenshotConfig:
    return GeoScreenshotConfig(
        base_url="https://gs.test",
        authorization=encode_basic_auth("user", "secret"),
        target_url="http://example.com",
        image_dir=tmp_path,
    )


@pytest.fixture
def make_client(config: GeoScreenshotConfig) -> Callable[[Handler], GeoScreenshotClient]:
    def _make(handler: Handler) -> GeoScreenshotClient:
        http = build_async_client(config, transport=httpx.MockTransport(handler))
        return GeoScreenshotClient(config, client=http)

    return _make


def json_body(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))
