"""
Recommendation ranker: scores every built-in crop profile against the
current readings, orders them by estimated profit, and builds
CropRecommendation records for display.

Usage flow
----------
1. build_scored_crops(soil, weather, market)
   -> list[ScoredCrop]  (one per profile, profile order)

2. rank_crops(scored, n=4)
   -> list[ScoredCrop]  (profit descending, at most n)

3. build_recommendations(soil, weather, market)
   -> list[CropRecommendation]  (steps 1 + 2, converted for display)

Everything here is pure and deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass

from kisan_advisor.models.readings import MarketPrice, SoilReading, WeatherReading
from kisan_advisor.models.recommendation import CropRecommendation
from kisan_advisor.recommendations.profiles import CROP_PROFILES, CropProfile
from kisan_advisor.recommendations.scorer import (
    ScoreComponents,
    ScoringInputs,
    build_rationale,
    compute_score,
    resolve_inputs,
    sustainability_score,
)
from kisan_advisor.taxonomy.crop_taxonomy import Suitability

MAX_RECOMMENDATIONS = 4


@dataclass
class ScoredCrop:
    """Intermediate object coupling a profile with its computed scores.

    Attributes:
        profile:              The CropProfile evaluated.
        inputs:               Resolved soil / weather values used.
        components:           Detailed score breakdown.
        suitability:          Fit tier.
        expected_yield:       t/ha after fit adjustment.
        profit:               USD/ha after fit and market adjustment.
        sustainability_score: Integer sustainability rating.
        rationale:            Human-readable explanation string.
    """

    profile:              CropProfile
    inputs:               ScoringInputs
    components:           ScoreComponents
    suitability:          Suitability
    expected_yield:       float
    profit:               float
    sustainability_score: int
    rationale:            str

    def to_recommendation(self) -> CropRecommendation:
        return CropRecommendation(
            crop_name=self.profile.name,
            suitability=self.suitability,
            expected_yield_t_per_ha=self.expected_yield,
            profit_usd_per_ha=self.profit,
            sustainability_score=self.sustainability_score,
            rationale=self.rationale,
        )


def score_crop(
    profile: CropProfile,
    inputs:  ScoringInputs,
    market:  list[MarketPrice],
) -> ScoredCrop:
    """Score a single profile against resolved inputs."""
    components  = compute_score(profile, inputs, market)
    suitability = Suitability.from_fit(components.fit)
    adjustment  = components.yield_adjustment

    return ScoredCrop(
        profile=profile,
        inputs=inputs,
        components=components,
        suitability=suitability,
        expected_yield=profile.base_yield_t_per_ha * adjustment,
        profit=profile.base_profit_usd_per_ha * adjustment * components.market_boost,
        sustainability_score=sustainability_score(components.ph_score, profile.water_need),
        rationale=build_rationale(inputs, suitability),
    )


def build_scored_crops(
    soil:     SoilReading,
    weather:  WeatherReading,
    market:   list[MarketPrice],
    profiles: tuple[CropProfile, ...] = CROP_PROFILES,
) -> list[ScoredCrop]:
    """Score every profile.  Defaults are substituted once, up front.

    Args:
        soil:     Current soil reading (fields may be ``None``).
        weather:  Current weather reading (fields may be ``None``).
        market:   Market quotes; may be empty.
        profiles: Profiles to evaluate (the built-in table by default).

    Returns:
        One ScoredCrop per profile, in profile order.
    """
    inputs = resolve_inputs(soil, weather)
    return [score_crop(profile, inputs, market) for profile in profiles]


def rank_crops(
    scored: list[ScoredCrop],
    n:      int = MAX_RECOMMENDATIONS,
) -> list[ScoredCrop]:
    """Return the ``n`` most profitable crops, profit descending.

    The sort is stable: equal profits keep profile order.
    """
    return sorted(scored, key=lambda sc: sc.profit, reverse=True)[:n]


def build_recommendations(
    soil:    SoilReading,
    weather: WeatherReading,
    market:  list[MarketPrice],
) -> list[CropRecommendation]:
    """Score, rank, and convert — the scorer's public contract.

    Never raises for valid reading models: every absent input is defaulted.

    Returns:
        At most four CropRecommendation records, profit descending.
    """
    ranked = rank_crops(build_scored_crops(soil, weather, market))
    return [sc.to_recommendation() for sc in ranked]
