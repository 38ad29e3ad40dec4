"""
Field reading models — soil, weather, and market inputs to the scorer.

Each reading is produced either by a provider client (SoilGrids,
Open-Meteo, market feed) or by that client's fixture fallback. Optional
numeric fields stay ``None`` when the provider did not report a value;
default substitution happens once, at the scorer's entry point.

All models are frozen (immutable) after construction.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

VALID_PRICE_UNITS = frozenset({"kg", "quintal"})


class Coordinates(BaseModel):
    """A WGS84 point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, v: float) -> float:
        if not -90.0 <= v <= 90.0:
            raise ValueError(f"Latitude must be in [-90, 90], got {v}.")
        return v

    @field_validator("lon")
    @classmethod
    def validate_lon(cls, v: float) -> float:
        if not -180.0 <= v <= 180.0:
            raise ValueError(f"Longitude must be in [-180, 180], got {v}.")
        return v


class SoilReading(BaseModel):
    """Topsoil (0-5 cm) properties at a location.

    Attributes:
        ph: Soil pH in water, or ``None`` if unavailable.
        moisture_percent: Volumetric moisture in percent, or ``None``.
        organic_carbon: Soil organic carbon in g/kg (nutrient proxy), or ``None``.
        source: Provenance label, e.g. ``"SoilGrids"`` or ``"demo"``.
    """

    model_config = ConfigDict(frozen=True)

    ph: Optional[float] = None
    moisture_percent: Optional[float] = None
    organic_carbon: Optional[float] = None
    source: str


class DailyForecast(BaseModel):
    """One day of the multi-day weather outlook."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    temp_max_c: float
    temp_min_c: float
    rain_mm: float


class WeatherReading(BaseModel):
    """Current conditions plus an ordered daily forecast.

    Attributes:
        temperature_c: Air temperature at 2 m, or ``None``.
        precipitation_mm: Current precipitation, or ``None``.
        wind_speed: Wind speed at 10 m (km/h), or ``None``.
        humidity: Relative humidity in percent, or ``None``.
        daily: Forecast days in chronological order (may be empty).
        source: Provenance label, e.g. ``"Open-Meteo"`` or ``"demo"``.
    """

    model_config = ConfigDict(frozen=True)

    temperature_c: Optional[float] = None
    precipitation_mm: Optional[float] = None
    wind_speed: Optional[float] = None
    humidity: Optional[float] = None
    daily: list[DailyForecast] = []
    source: str


class MarketPrice(BaseModel):
    """A single mandi price quote."""

    model_config = ConfigDict(frozen=True)

    crop_name: str
    unit: str
    price: float
    market_name: str

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: str) -> str:
        if v not in VALID_PRICE_UNITS:
            raise ValueError(f"Invalid unit '{v}'. Must be one of {sorted(VALID_PRICE_UNITS)}.")
        return v

    @field_validator("price")
    @classmethod
    def validate_price_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Market price must be non-negative.")
        return v
