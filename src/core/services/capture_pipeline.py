"""Capture orchestration utilities.

This module holds the bounded fan-out over locations and the facade that
wires config, HTTP client, location directory, capture invoker and result
processor together. The CLI delegates every run mode to the helpers at the
bottom, which keeps side-effects (printing, tables) out of the core flow
and makes the pipeline reusable from scripts and tests.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Sequence

import httpx

from adapters.capture import CaptureInvoker
from adapters.capture_writer import ResultProcessor
from adapters.http_client import GeoScreenshotClient, build_async_client
from adapters.locations import LocationDirectory
from core.config import API_LIMIT, AppSettings, ClientOptions, GeoScreenshotConfig, resolve_config
from core.domain.locations import filter_by_country, sample_locations
from core.domain.models import CaptureResult, Location
from core.errors import GeoScreenshotError
from core.interfaces.api import ScreenshotApi
from core.logger import get_logger, null_logger

CompletionCallback = Callable[[list[CaptureResult], BaseException | None], None]


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    capture_done: Callable[[CaptureResult], None] | None = None
    warning: Callable[[str], None] | None = None


async def multicapture(
    locations: Sequence[Location],
    *,
    capture: Callable[[Location], Awaitable[CaptureResult]],
    process: Callable[[CaptureResult], Awaitable[None]],
    limit: int = API_LIMIT,
    on_complete: CompletionCallback | None = None,
    logger: logging.Logger | None = None,
) -> list[CaptureResult]:
    """Run capture + process for every location, at most `limit` at a time.

    Results are returned in completion order. The first failure stops new
    locations from starting; pipelines already in flight finish normally
    and their files stay on disk. `on_complete` receives the partial results
    and the error before the error is raised.
    """

    log = logger or null_logger()
    log.info("Capturing %d locations", len(locations))

    results: list[CaptureResult] = []
    first_error: BaseException | None = None
    pending = iter(locations)

    async def worker() -> None:
        nonlocal first_error
        for location in pending:
            if first_error is not None:
                return
            try:
                result = await capture(location)
                await process(result)
            except Exception as exc:
                log.error("Capture failed for %s: %s", location.name, exc)
                if first_error is None:
                    first_error = exc
                return
            results.append(result)

    workers = min(max(1, limit), len(locations))
    await asyncio.gather(*(worker() for _ in range(workers)))

    if on_complete:
        on_complete(list(results), first_error)
    if first_error is not None:
        raise first_error
    return results


class GeoScreenshot:
    """Per-configuration facade over the GeoScreenshot API."""

    def __init__(
        self,
        config: GeoScreenshotConfig,
        api: ScreenshotApi,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self._log = logger or get_logger(config.verbose)
        self.directory = LocationDirectory(api, logger=self._log)
        self.invoker = CaptureInvoker(api, default_url=config.target_url, logger=self._log)
        self.processor = ResultProcessor(config.image_dir, logger=self._log)

    async def locations(self) -> list[Location]:
        return await self.directory.list()

    @staticmethod
    def filter(country_code: object = "US") -> Callable[[Sequence[Location]], list[Location]]:
        return filter_by_country(country_code)

    @staticmethod
    def sample(locations: Sequence[Location], n: int | None = None) -> list[Location]:
        return sample_locations(locations, n)

    async def capture(self, url: str | None = None, location: Location | None = None) -> CaptureResult:
        return await self.invoker.capture(url, location)

    async def process(self, result: CaptureResult) -> None:
        await self.processor.process(result)

    async def multicapture(
        self,
        locations: Sequence[Location],
        *,
        url: str | None = None,
        on_complete: CompletionCallback | None = None,
        hooks: PipelineHooks | None = None,
    ) -> list[CaptureResult]:
        hooks = hooks or PipelineHooks()
        target = url or self.config.target_url

        async def capture_one(location: Location) -> CaptureResult:
            return await self.capture(target, location)

        async def process_one(result: CaptureResult) -> None:
            await self.process(result)
            if hooks.capture_done:
                hooks.capture_done(result)

        return await multicapture(
            locations,
            capture=capture_one,
            process=process_one,
            limit=self.config.api_limit,
            on_complete=on_complete,
            logger=self._log,
        )


@asynccontextmanager
async def open_geoscreenshot(
    options: ClientOptions | None = None,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> AsyncIterator[GeoScreenshot]:
    """Resolve config once, open the HTTP client and yield the facade."""

    config = resolve_config(options, settings=settings)
    log = logger or get_logger(config.verbose)
    http = build_async_client(config, transport=transport)
    async with GeoScreenshotClient(config, client=http, logger=log) as api:
        yield GeoScreenshot(config, api, logger=log)


async def run_single(
    gs: GeoScreenshot,
    url: str | None = None,
    *,
    hooks: PipelineHooks | None = None,
) -> CaptureResult:
    """Capture `url` from one random location.

    Locations are fetched before every run so the chosen one is known to be up.
    """

    hooks = hooks or PipelineHooks()
    locations = await gs.locations()
    picked = gs.sample(locations, 1)
    if not picked:
        raise GeoScreenshotError("No locations available for this account")
    result = await gs.capture(url, picked[0])
    await gs.process(result)
    if hooks.capture_done:
        hooks.capture_done(result)
    return result


async def run_random(
    gs: GeoScreenshot,
    url: str | None = None,
    *,
    count: int = 5,
    country_code: str | None = None,
    hooks: PipelineHooks | None = None,
) -> list[CaptureResult]:
    """Capture `url` from `count` random locations (optionally one country)."""

    locations = await gs.locations()
    if country_code:
        locations = gs.filter(country_code)(locations)
    return await gs.multicapture(gs.sample(locations, count), url=url, hooks=hooks)


async def run_multi(
    gs: GeoScreenshot,
    url: str | None = None,
    *,
    country_code: str | None = None,
    hooks: PipelineHooks | None = None,
) -> list[CaptureResult]:
    """Capture `url` from every available location (optionally one country)."""

    hooks = hooks or PipelineHooks()
    locations = await gs.locations()
    if country_code:
        locations = gs.filter(country_code)(locations)
    if not locations and hooks.warning:
        hooks.warning("No locations matched; nothing to capture.")
    return await gs.multicapture(locations, url=url, hooks=hooks)
