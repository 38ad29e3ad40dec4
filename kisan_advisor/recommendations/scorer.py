"""
Crop scoring: converts soil / weather / market readings into per-crop score
components, a suitability tier, and a human-readable rationale.

Fit formula (weighted sum, nominal range 0–1)
----------------------------------------------
    fit = (
        ph_score      * 0.45   # soil pH inside the crop's window
        + temp_score  * 0.40   # air temperature inside the crop's window
        + water_score * 0.15   # soil moisture vs. the crop's water need
    )

Component explanations
----------------------
ph_score / temp_score (0–1):
    1.0 inside the inclusive ideal window.  Outside it, falls off linearly
    by 1/2.5 per unit of distance from the nearer bound, reaching 0 at 2.5.

water_score (unbounded, ~0–1 for moisture in 0–100%):
    high   water need → moisture / 100
    low    water need → 1 − |moisture − 45| / 100
    medium water need → 1 − |moisture − 60| / 100
    Not clamped; moisture far outside 0–100 can push fit slightly negative.

market_boost (≤ 1.25):
    Case-insensitive exact match on crop name against the price list.
    boost = min(1.25, 1 + (price / ref − 1) * 0.4) with ref 25 for "kg" quotes
    and 2200 for everything else (quintal).  No quote → 1.0.

Derived values
--------------
    yield_adjustment     = 0.8 + fit * 0.6
    expected_yield       = base_yield  * yield_adjustment
    profit               = base_profit * yield_adjustment * market_boost
    sustainability_score = round_half_up(60 + (1 − water_penalty) * 25 + ph_score * 15)

The sustainability score is not clamped.  With water penalties of
0.1 / 0.3 / 0.6 and ph_score in [0, 1] it stays within 70–98.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from kisan_advisor.models.readings import MarketPrice, SoilReading, WeatherReading
from kisan_advisor.recommendations.profiles import CropProfile
from kisan_advisor.taxonomy.crop_taxonomy import Suitability, WaterNeed
from kisan_advisor.utils.number_format import format_fixed

DEFAULT_PH: float = 6.5
DEFAULT_MOISTURE_PERCENT: float = 55.0
DEFAULT_TEMPERATURE_C: float = 30.0

RANGE_FALLOFF: float = 2.5

# Reference unit prices for market boost (INR)
_REFERENCE_PRICE: dict[str, float] = {
    "kg":      25.0,
    "quintal": 2200.0,
}
_MAX_MARKET_BOOST = 1.25


@dataclass(frozen=True)
class ScoringInputs:
    """Soil and weather values after default substitution."""

    ph:               float
    moisture_percent: float
    temperature_c:    float


@dataclass
class ScoreComponents:
    """All components of one crop's score.

    Attributes:
        ph_score:     0–1, pH window alignment.
        temp_score:   0–1, temperature window alignment.
        water_score:  Moisture alignment for the crop's water need.
        market_boost: Profit multiplier from the market quote (1.0 if none).
    """

    ph_score:     float
    temp_score:   float
    water_score:  float
    market_boost: float

    @property
    def fit(self) -> float:
        """Weighted composite fit.  Nominally 0–1, not clamped."""
        return (
            0.45 * self.ph_score
            + 0.40 * self.temp_score
            + 0.15 * self.water_score
        )

    @property
    def yield_adjustment(self) -> float:
        """Multiplier applied to base yield and profit (~0.8–1.4)."""
        return 0.8 + self.fit * 0.6


def resolve_inputs(soil: SoilReading, weather: WeatherReading) -> ScoringInputs:
    """Substitute defaults for absent readings (pH 6.5, moisture 55%, 30 °C).

    Only ``None`` is replaced; a reported value of 0 is kept as-is.
    """
    return ScoringInputs(
        ph=DEFAULT_PH if soil.ph is None else soil.ph,
        moisture_percent=(
            DEFAULT_MOISTURE_PERCENT if soil.moisture_percent is None
            else soil.moisture_percent
        ),
        temperature_c=(
            DEFAULT_TEMPERATURE_C if weather.temperature_c is None
            else weather.temperature_c
        ),
    )


def score_range(value: float, ideal: tuple[float, float]) -> float:
    """Score how well ``value`` sits inside the inclusive ``ideal`` window.

    Returns 1.0 inside the window; otherwise ``max(0, 1 - distance / 2.5)``
    where distance is measured from the nearer bound.
    """
    low, high = ideal
    if low <= value <= high:
        return 1.0
    distance = low - value if value < low else value - high
    return max(0.0, 1.0 - distance / RANGE_FALLOFF)


def water_score(moisture_percent: float, need: WaterNeed) -> float:
    if need is WaterNeed.HIGH:
        return moisture_percent / 100.0
    if need is WaterNeed.LOW:
        return 1.0 - abs(moisture_percent - 45.0) / 100.0
    return 1.0 - abs(moisture_percent - 60.0) / 100.0


def find_market_price(crop_name: str, market: list[MarketPrice]) -> MarketPrice | None:
    """Return the first quote whose crop name matches case-insensitively."""
    wanted = crop_name.lower()
    for quote in market:
        if quote.crop_name.lower() == wanted:
            return quote
    return None


def market_boost(crop_name: str, market: list[MarketPrice]) -> float:
    """Profit multiplier from the current price relative to a reference price.

    Capped at 1.25; there is no lower bound, so a very cheap quote can push
    the boost below 1.0.
    """
    quote = find_market_price(crop_name, market)
    if quote is None:
        return 1.0
    reference = _REFERENCE_PRICE["kg"] if quote.unit == "kg" else _REFERENCE_PRICE["quintal"]
    return min(_MAX_MARKET_BOOST, 1.0 + (quote.price / reference - 1.0) * 0.4)


def compute_score(
    profile: CropProfile,
    inputs:  ScoringInputs,
    market:  list[MarketPrice],
) -> ScoreComponents:
    """Compute all score components for one crop profile.

    Args:
        profile: Crop profile to evaluate.
        inputs:  Resolved soil / weather values (see ``resolve_inputs``).
        market:  Current market quotes (may be empty).

    Returns:
        ScoreComponents with all fields populated (unrounded).
    """
    return ScoreComponents(
        ph_score=score_range(inputs.ph, profile.ideal_ph_range),
        temp_score=score_range(inputs.temperature_c, profile.ideal_temp_range),
        water_score=water_score(inputs.moisture_percent, profile.water_need),
        market_boost=market_boost(profile.name, market),
    )


def sustainability_score(ph_score: float, need: WaterNeed) -> int:
    """Integer sustainability rating; halves round up (92.5 → 93)."""
    raw = 60.0 + (1.0 - need.penalty) * 25.0 + ph_score * 15.0
    return math.floor(raw + 0.5)


def build_rationale(inputs: ScoringInputs, suitability: Suitability) -> str:
    """One-line summary of the inputs and the resulting tier, e.g.

        "pH 6.6, temp 32°C, moisture 58% → high fit"

    Halves round up: pH 6.25 shows as 6.3, 30.5 °C as 31.
    """
    return (
        f"pH {format_fixed(inputs.ph, 1)}, temp {format_fixed(inputs.temperature_c)}°C, "
        f"moisture {format_fixed(inputs.moisture_percent)}% → {suitability} fit"
    )
