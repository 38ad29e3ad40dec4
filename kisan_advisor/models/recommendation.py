"""Crop recommendation output model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from kisan_advisor.taxonomy.crop_taxonomy import Suitability


class CropRecommendation(BaseModel):
    """One ranked crop suggestion, created fresh on every scoring call.

    Attributes:
        crop_name: Display name of the crop profile.
        suitability: Fit tier (high / medium / low).
        expected_yield_t_per_ha: Base yield scaled by the fit adjustment.
        profit_usd_per_ha: Base profit scaled by fit and market boost.
        sustainability_score: Integer score; observed range 70-98, not clamped.
        rationale: One-line summary of the inputs and tier.
    """

    model_config = ConfigDict(frozen=True)

    crop_name: str
    suitability: Suitability
    expected_yield_t_per_ha: float
    profit_usd_per_ha: float
    sustainability_score: int
    rationale: str
