"""
Tests for kisan_advisor/ingestion/loader.py.

What we test
------------
- All sources live -> no fallbacks, no notice.
- One source failing (HTTP error, connection error, bad JSON) falls back
  for that source only; the others keep their live readings.
- All network sources failing -> demo soil and weather, notice set.
- config.sources.use_fixtures (set by --offline through the config
  override layer) skips the network entirely.
- Fallback warnings carry the source and coordinates as log record fields.
- Default coordinates come from config.
"""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from kisan_advisor.config import AppConfig, SourcesConfig, cli_overrides, load_config
from kisan_advisor.ingestion.loader import (
    FALLBACK_NOTICE,
    FieldConditions,
    load_field_conditions,
)
from kisan_advisor.models.readings import Coordinates

TODAY = date(2026, 10, 18)

_SOIL_BODY = {
    "properties": {
        "layers": [
            {"name": "phh2o", "depths": [{"values": {"Q50": 72}}]},
            {"name": "soc", "depths": [{"values": {"Q50": 55}}]},
        ]
    }
}
_WEATHER_BODY = {
    "current": {"temperature_2m": 24.0},
    "daily": {
        "time": ["2026-10-18"],
        "temperature_2m_max": [27.0],
        "temperature_2m_min": [15.0],
        "precipitation_sum": [0.0],
    },
}


def _transport(soil="ok", weather="ok") -> httpx.MockTransport:
    """Route by host; each source can be 'ok', 'error', 'down', or 'garbage'."""

    def respond(mode: str, body: dict, request: httpx.Request) -> httpx.Response:
        if mode == "error":
            return httpx.Response(500, text="internal error")
        if mode == "down":
            raise httpx.ConnectError("connection refused", request=request)
        if mode == "garbage":
            return httpx.Response(200, text="<html>not json</html>")
        return httpx.Response(200, json=body)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "soil.test":
            return respond(soil, _SOIL_BODY, request)
        if request.url.host == "weather.test":
            return respond(weather, _WEATHER_BODY, request)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


class TestLiveLoad:
    def test_all_sources_live(self, app_config, delhi):
        cond = load_field_conditions(app_config, delhi, transport=_transport(), today=TODAY)

        assert isinstance(cond, FieldConditions)
        assert cond.fallbacks == []
        assert cond.notice is None
        assert cond.soil.ph == pytest.approx(7.2)
        assert cond.soil.source == "SoilGrids"
        assert cond.weather.temperature_c == 24.0
        assert cond.weather.source == "Open-Meteo"
        assert len(cond.market) == 4
        assert cond.sources == {"soil": "SoilGrids", "weather": "Open-Meteo", "market": "demo"}

    def test_coords_recorded(self, app_config, delhi):
        cond = load_field_conditions(app_config, delhi, transport=_transport(), today=TODAY)
        assert cond.coords == delhi


class TestPerSourceFallback:
    @pytest.mark.parametrize("mode", ["error", "down", "garbage"])
    def test_soil_failure_isolated(self, app_config, delhi, mode):
        cond = load_field_conditions(
            app_config, delhi, transport=_transport(soil=mode), today=TODAY
        )
        assert cond.fallbacks == ["soil"]
        assert cond.soil.source == "demo"
        assert cond.soil.ph == 6.6
        assert cond.weather.source == "Open-Meteo"
        assert cond.notice == FALLBACK_NOTICE

    def test_weather_failure_isolated(self, app_config, delhi):
        cond = load_field_conditions(
            app_config, delhi, transport=_transport(weather="error"), today=TODAY
        )
        assert cond.fallbacks == ["weather"]
        assert cond.soil.source == "SoilGrids"
        assert cond.weather.source == "demo"
        assert cond.weather.daily[0].date == TODAY

    def test_everything_down(self, app_config, delhi):
        cond = load_field_conditions(
            app_config, delhi, transport=_transport(soil="down", weather="down"), today=TODAY
        )
        assert cond.fallbacks == ["soil", "weather"]
        assert cond.soil.source == "demo"
        assert cond.weather.source == "demo"
        assert cond.notice == FALLBACK_NOTICE

    def test_failure_is_logged(self, app_config, delhi, caplog):
        with caplog.at_level("WARNING", logger="kisan_advisor.ingestion.loader"):
            load_field_conditions(
                app_config, delhi, transport=_transport(soil="error"), today=TODAY
            )
        record = next(r for r in caplog.records if "soil fetch failed" in r.getMessage())
        assert record.source == "soil"
        assert record.lat == pytest.approx(28.6139)
        assert record.lon == pytest.approx(77.209)

    def test_summary_logged_with_location(self, app_config, delhi, caplog):
        with caplog.at_level("INFO", logger="kisan_advisor.ingestion.loader"):
            load_field_conditions(
                app_config, delhi, transport=_transport(weather="down"), today=TODAY
            )
        summary = next(r for r in caplog.records if "demo fallback" in r.getMessage())
        assert summary.getMessage().endswith("weather")
        assert summary.lat == pytest.approx(28.6139)


class TestOfflineLoad:
    def test_offline_skips_network(self, delhi):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("network must not be used offline")

        config = load_config(overrides=cli_overrides(offline=True))
        cond = load_field_conditions(
            config, delhi, transport=httpx.MockTransport(handler), today=TODAY,
        )
        assert cond.sources == {"soil": "demo", "weather": "demo", "market": "demo"}
        assert cond.fallbacks == []
        assert cond.notice is None

    def test_use_fixtures_config(self, delhi):
        config = AppConfig(sources=SourcesConfig(use_fixtures=True))
        cond = load_field_conditions(config, delhi, today=TODAY)
        assert cond.soil.source == "demo"
        assert len(cond.weather.daily) == 5

    def test_default_coordinates_from_config(self):
        config = AppConfig(sources=SourcesConfig(use_fixtures=True))
        cond = load_field_conditions(config, today=TODAY)
        assert cond.coords.lat == pytest.approx(28.6139)
        assert cond.coords.lon == pytest.approx(77.209)

    def test_overridden_location_used(self):
        config = load_config(overrides=cli_overrides(lat=18.52, lon=73.86, offline=True))
        cond = load_field_conditions(config, today=TODAY)
        assert cond.coords == Coordinates(lat=18.52, lon=73.86)
