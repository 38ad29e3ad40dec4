"""
Built-in crop profiles.

A fixed, ordered table of five field crops common to north Indian kharif and
rabi rotations. Ranges are inclusive; yields and profits are per-hectare
baselines before fit and market adjustment.
"""

from __future__ import annotations

from dataclasses import dataclass

from kisan_advisor.taxonomy.crop_taxonomy import WaterNeed


@dataclass(frozen=True)
class CropProfile:
    """Agronomic envelope and economics for one crop.

    Attributes:
        name:                   Display name (also the market lookup key).
        ideal_ph_range:         Inclusive (low, high) soil pH window.
        ideal_temp_range:       Inclusive (low, high) air temperature window in °C.
        water_need:             Irrigation demand tier.
        base_yield_t_per_ha:    Baseline yield in tonnes per hectare.
        base_profit_usd_per_ha: Baseline profit in USD per hectare.
    """

    name:                   str
    ideal_ph_range:         tuple[float, float]
    ideal_temp_range:       tuple[float, float]
    water_need:             WaterNeed
    base_yield_t_per_ha:    float
    base_profit_usd_per_ha: float


CROP_PROFILES: tuple[CropProfile, ...] = (
    CropProfile("Wheat",    (6.0, 7.5), (10.0, 25.0), WaterNeed.MEDIUM, 3.2, 700.0),
    CropProfile("Rice",     (5.5, 7.0), (20.0, 35.0), WaterNeed.HIGH,   4.5, 900.0),
    CropProfile("Maize",    (5.8, 7.2), (18.0, 32.0), WaterNeed.MEDIUM, 3.8, 650.0),
    CropProfile("Chickpea", (6.0, 8.0), (15.0, 30.0), WaterNeed.LOW,    2.2, 780.0),
    CropProfile("Cotton",   (5.8, 8.0), (20.0, 35.0), WaterNeed.MEDIUM, 2.1, 820.0),
)
