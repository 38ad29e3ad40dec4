"""
Open-Meteo forecast client — current conditions and daily outlook.

API:   https://api.open-meteo.com/v1/forecast
Docs:  https://open-meteo.com/en/docs

No API key required for non-commercial use.

Query used::

    GET /v1/forecast?latitude={lat}&longitude={lon}
        &current=temperature_2m,relative_humidity_2m,precipitation,wind_speed_10m
        &daily=temperature_2m_max,temperature_2m_min,precipitation_sum
        &timezone=auto
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, ClassVar, Optional

import httpx

from kisan_advisor.models.readings import Coordinates, DailyForecast, WeatherReading

logger = logging.getLogger(__name__)

_CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,precipitation,wind_speed_10m"
_DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_sum"


class OpenMeteoClient:
    """Client for the Open-Meteo forecast endpoint.

    Usage (fixture / demo mode)::

        reading = OpenMeteoClient().get_fixture_reading()

    Usage (real API)::

        async with httpx.AsyncClient() as http:
            reading = await OpenMeteoClient().fetch(http, coords)
    """

    BASE_URL: ClassVar[str] = "https://api.open-meteo.com"
    SOURCE: ClassVar[str] = "Open-Meteo"
    FIXTURE_DAYS: ClassVar[int] = 5

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0) -> None:
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout

    # ── Real API ───────────────────────────────────────────────────────────────

    async def fetch(self, client: httpx.AsyncClient, coords: Coordinates) -> WeatherReading:
        """Fetch current weather and the daily forecast for a point.

        Raises:
            httpx.HTTPStatusError: On non-2xx response.
            httpx.RequestError:    On connection failure or timeout.
            ValueError:            If the body is not a JSON object.
        """
        params = {
            "latitude":  coords.lat,
            "longitude": coords.lon,
            "current":   _CURRENT_FIELDS,
            "daily":     _DAILY_FIELDS,
            "timezone":  "auto",
        }
        resp = await client.get(
            f"{self.base_url}/v1/forecast",
            params=params,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        reading = self.parse_response(resp.json())
        logger.debug(
            "Open-Meteo: %s°C, %d forecast days at %s",
            reading.temperature_c, len(reading.daily), coords,
        )
        return reading

    # ── Response parser ────────────────────────────────────────────────────────

    @classmethod
    def parse_response(cls, data: Any) -> WeatherReading:
        """Parse an Open-Meteo forecast body into a WeatherReading.

        Absent current values stay ``None``.  Daily arrays shorter than the
        ``time`` array (or holding nulls) are filled with 0.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected Open-Meteo payload type: {type(data).__name__}")

        current = data.get("current") or {}
        daily   = data.get("daily") or {}

        tmax = daily.get("temperature_2m_max") or []
        tmin = daily.get("temperature_2m_min") or []
        rain = daily.get("precipitation_sum") or []

        days = [
            DailyForecast(
                date=day,
                temp_max_c=_at(tmax, i),
                temp_min_c=_at(tmin, i),
                rain_mm=_at(rain, i),
            )
            for i, day in enumerate(daily.get("time") or [])
        ]

        return WeatherReading(
            temperature_c=current.get("temperature_2m"),
            precipitation_mm=current.get("precipitation"),
            wind_speed=current.get("wind_speed_10m"),
            humidity=current.get("relative_humidity_2m"),
            daily=days,
            source=cls.SOURCE,
        )

    # ── Fixture / demo mode ────────────────────────────────────────────────────

    def get_fixture_reading(self, today: Optional[date] = None) -> WeatherReading:
        """Return a synthetic five-day outlook starting ``today``.

        Day i: max 33−i °C, min 24−i °C, 6 mm rain on day 1 and 1.5 mm otherwise.
        Current conditions: 31.5 °C, no rain, wind 8, humidity 58%.
        """
        start = today or date.today()
        days = [
            DailyForecast(
                date=start + timedelta(days=i),
                temp_max_c=33.0 - i,
                temp_min_c=24.0 - i,
                rain_mm=6.0 if i == 1 else 1.5,
            )
            for i in range(self.FIXTURE_DAYS)
        ]
        return WeatherReading(
            temperature_c=31.5,
            precipitation_mm=0.0,
            wind_speed=8.0,
            humidity=58.0,
            daily=days,
            source="demo",
        )


def _at(values: list, index: int) -> float:
    if index < len(values) and values[index] is not None:
        return float(values[index])
    return 0.0
