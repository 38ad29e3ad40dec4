"""
Field conditions loader — fetches soil, weather, and market data together.

The three providers are queried concurrently over one ``httpx.AsyncClient``.
Each fetch has its own fallback: any failure (HTTP error, timeout, malformed
body) is logged and replaced with that provider's demo reading.  A failure in
one source never cancels the others, and there is no retry.

Entry points:
  ``load_field_conditions(config, coords=None)``  — sync wrapper
  ``gather_field_conditions(config, coords)``     — async core

Offline mode is ``config.sources.use_fixtures``, which ``--offline`` and
``KISAN_ADVISOR_OFFLINE`` set through the config override layers.
Log records carry the source and location via ``log_context``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, TypeVar

import httpx

from kisan_advisor.config import AppConfig
from kisan_advisor.ingestion.market_client import MarketClient
from kisan_advisor.ingestion.open_meteo_client import OpenMeteoClient
from kisan_advisor.ingestion.soilgrids_client import SoilGridsClient
from kisan_advisor.models.readings import Coordinates, MarketPrice, SoilReading, WeatherReading
from kisan_advisor.utils.logging import log_context

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = "Failed to load some data. Showing demo values."

T = TypeVar("T")


@dataclass
class FieldConditions:
    """Everything the scorer and advisors need for one location.

    Attributes:
        coords:        Location the readings belong to.
        soil:          Soil reading (live or demo).
        weather:       Weather reading (live or demo).
        market:        Market quotes.
        market_source: Provenance of the market quotes.
        fallbacks:     Names of sources ("soil", "weather", "market") that
                       failed and were replaced with demo values.
    """

    coords:        Coordinates
    soil:          SoilReading
    weather:       WeatherReading
    market:        list[MarketPrice]
    market_source: str = MarketClient.SOURCE
    fallbacks:     list[str] = field(default_factory=list)

    @property
    def sources(self) -> dict[str, str]:
        return {
            "soil":    self.soil.source,
            "weather": self.weather.source,
            "market":  self.market_source,
        }

    @property
    def notice(self) -> Optional[str]:
        """Generic user-facing notice when any source fell back, else ``None``."""
        return FALLBACK_NOTICE if self.fallbacks else None


def default_coordinates(config: AppConfig) -> Coordinates:
    return Coordinates(lat=config.location.default_lat, lon=config.location.default_lon)


def fixture_conditions(
    coords: Coordinates,
    today:  Optional[date] = None,
) -> FieldConditions:
    """Demo readings for every source, with no network access."""
    return FieldConditions(
        coords=coords,
        soil=SoilGridsClient().get_fixture_reading(),
        weather=OpenMeteoClient().get_fixture_reading(today),
        market=MarketClient().get_fixture_prices(),
    )


async def _with_fallback(
    name:     str,
    fetch:    Awaitable[T],
    fallback: Callable[[], T],
    failed:   list[str],
    coords:   Coordinates,
) -> T:
    """Await ``fetch``; on any error log it, record ``name``, and use ``fallback()``."""
    try:
        return await fetch
    except Exception as exc:
        logger.warning(
            "%s fetch failed (%s: %s); showing demo values",
            name, type(exc).__name__, exc,
            extra=log_context(coords, name),
        )
        failed.append(name)
        return fallback()


async def gather_field_conditions(
    config:    AppConfig,
    coords:    Coordinates,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    today:     Optional[date] = None,
) -> FieldConditions:
    """Fetch soil, weather, and market data concurrently, each with fallback.

    Args:
        config:    Application config (endpoints and timeout).
        coords:    Location to query.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        today:     Start date for the demo weather outlook, if it is needed.

    Returns:
        FieldConditions; ``fallbacks`` lists the sources that failed.
    """
    sources = config.sources
    soil_client    = SoilGridsClient(sources.soilgrids_base_url, sources.timeout_seconds)
    weather_client = OpenMeteoClient(sources.open_meteo_base_url, sources.timeout_seconds)
    market_client  = MarketClient()

    failed: list[str] = []
    async with httpx.AsyncClient(timeout=sources.timeout_seconds, transport=transport) as client:
        soil, weather, market = await asyncio.gather(
            _with_fallback(
                "soil", soil_client.fetch(client, coords),
                soil_client.get_fixture_reading, failed, coords,
            ),
            _with_fallback(
                "weather", weather_client.fetch(client, coords),
                lambda: weather_client.get_fixture_reading(today), failed, coords,
            ),
            _with_fallback(
                "market", market_client.fetch(client),
                market_client.get_fixture_prices, failed, coords,
            ),
        )

    # Keep a stable source order regardless of completion order
    fallbacks = [name for name in ("soil", "weather", "market") if name in failed]
    if fallbacks:
        logger.info(
            "Loaded conditions with demo fallback for: %s", ", ".join(fallbacks),
            extra=log_context(coords),
        )
    else:
        logger.info("Loaded live conditions", extra=log_context(coords))

    return FieldConditions(
        coords=coords,
        soil=soil,
        weather=weather,
        market=market,
        fallbacks=fallbacks,
    )


def load_field_conditions(
    config:    AppConfig,
    coords:    Optional[Coordinates] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    today:     Optional[date] = None,
) -> FieldConditions:
    """Synchronous entry point used by the CLI.

    Args:
        config:    Application config.
        coords:    Location; defaults to ``config.location``.
        transport: Optional httpx transport override.
        today:     Start date for demo weather.

    Returns:
        FieldConditions for the location.
    """
    if coords is None:
        coords = default_coordinates(config)

    if config.sources.use_fixtures:
        logger.info("Offline mode: using demo readings", extra=log_context(coords, "demo"))
        return fixture_conditions(coords, today)

    return asyncio.run(gather_field_conditions(config, coords, transport, today))
