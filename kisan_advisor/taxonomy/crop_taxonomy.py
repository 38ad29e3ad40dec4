"""
Crop taxonomy for the advisory scorer.

Two small vocabularies describe every crop recommendation:
  - ``WaterNeed``   — how thirsty a crop is (drives water score and the
                      sustainability penalty).
  - ``Suitability`` — coarse tier derived from the composite fit score.

Usage example::

    from kisan_advisor.taxonomy.crop_taxonomy import Suitability, WaterNeed

    need = WaterNeed.HIGH
    tier = Suitability.from_fit(0.82)   # Suitability.HIGH

This module has NO imports from any other ``kisan_advisor`` package.
"""

from enum import StrEnum


class WaterNeed(StrEnum):
    """Irrigation demand of a crop over its growing season."""

    LOW = "low"
    """Dryland crops (pulses); best around 45% soil moisture."""

    MEDIUM = "medium"
    """Cereals and fibre crops; best around 60% soil moisture."""

    HIGH = "high"
    """Paddy-style crops; score rises linearly with moisture."""

    @property
    def penalty(self) -> float:
        """Sustainability penalty applied for this water demand."""
        return _WATER_PENALTY[self]


_WATER_PENALTY: dict[WaterNeed, float] = {
    WaterNeed.LOW:    0.1,
    WaterNeed.MEDIUM: 0.3,
    WaterNeed.HIGH:   0.6,
}


class Suitability(StrEnum):
    """Coarse fit tier shown as a badge next to each recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_fit(cls, fit: float) -> "Suitability":
        """Bucket a fit score: > 0.7 high, > 0.5 medium, otherwise low."""
        if fit > 0.7:
            return cls.HIGH
        if fit > 0.5:
            return cls.MEDIUM
        return cls.LOW
