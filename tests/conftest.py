"""
Shared pytest fixtures for the KisanAI Advisor test suite.

Provides:
  - Sample readings matching the demo fixtures (pH 6.6, 58% moisture,
    31.5 °C, four mandi quotes) for scorer / advisory tests.
  - ``app_config``: an ``AppConfig`` pointing at fake provider hosts, for
    loader tests driven by ``httpx.MockTransport``.
"""

from __future__ import annotations

from datetime import date

import pytest

from kisan_advisor.config import AppConfig, SourcesConfig
from kisan_advisor.models.readings import (
    Coordinates,
    DailyForecast,
    MarketPrice,
    SoilReading,
    WeatherReading,
)

TODAY = date(2026, 10, 18)


# ── Readings ──────────────────────────────────────────────────────────────────

@pytest.fixture
def delhi() -> Coordinates:
    return Coordinates(lat=28.6139, lon=77.209)


@pytest.fixture
def sample_soil() -> SoilReading:
    """Soil reading equal to the demo fixture."""
    return SoilReading(ph=6.6, moisture_percent=58.0, organic_carbon=8.2, source="demo")


@pytest.fixture
def sample_weather() -> WeatherReading:
    """Weather at 31.5 °C with a light-rain day first and a wet day second."""
    return WeatherReading(
        temperature_c=31.5,
        precipitation_mm=0.0,
        wind_speed=8.0,
        humidity=58.0,
        daily=[
            DailyForecast(date=date(2026, 10, 18), temp_max_c=33.0, temp_min_c=24.0, rain_mm=1.5),
            DailyForecast(date=date(2026, 10, 19), temp_max_c=32.0, temp_min_c=23.0, rain_mm=6.0),
        ],
        source="demo",
    )


@pytest.fixture
def sample_market() -> list[MarketPrice]:
    """The four demo mandi quotes."""
    return [
        MarketPrice(crop_name="Wheat",  unit="quintal", price=2275.0, market_name="Delhi Mandi"),
        MarketPrice(crop_name="Rice",   unit="quintal", price=2400.0, market_name="Lucknow Mandi"),
        MarketPrice(crop_name="Tomato", unit="kg",      price=22.0,   market_name="Pune Market"),
        MarketPrice(crop_name="Onion",  unit="kg",      price=28.0,   market_name="Nashik"),
    ]


@pytest.fixture
def empty_soil() -> SoilReading:
    return SoilReading(source="none")


@pytest.fixture
def empty_weather() -> WeatherReading:
    return WeatherReading(source="none")


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def app_config() -> AppConfig:
    """Config with fake hosts so MockTransport handlers can route by host."""
    return AppConfig(
        sources=SourcesConfig(
            soilgrids_base_url="https://soil.test/soilgrids/v2.0",
            open_meteo_base_url="https://weather.test",
            timeout_seconds=2.0,
            use_fixtures=False,
        )
    )
