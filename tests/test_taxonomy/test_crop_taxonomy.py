"""Tests for crop taxonomy integrity — water need penalties and fit tiers."""

from __future__ import annotations

import pytest

from kisan_advisor.recommendations.profiles import CROP_PROFILES
from kisan_advisor.taxonomy.crop_taxonomy import Suitability, WaterNeed


class TestWaterNeedEnum:
    def test_values(self):
        assert {m.value for m in WaterNeed} == {"low", "medium", "high"}

    def test_penalties(self):
        assert WaterNeed.LOW.penalty == 0.1
        assert WaterNeed.MEDIUM.penalty == 0.3
        assert WaterNeed.HIGH.penalty == 0.6

    def test_penalty_grows_with_demand(self):
        assert WaterNeed.LOW.penalty < WaterNeed.MEDIUM.penalty < WaterNeed.HIGH.penalty

    def test_str_value(self):
        assert str(WaterNeed.HIGH) == "high"
        assert WaterNeed("medium") is WaterNeed.MEDIUM


class TestSuitabilityEnum:
    def test_values(self):
        assert {m.value for m in Suitability} == {"high", "medium", "low"}

    @pytest.mark.parametrize(
        "fit, tier",
        [
            (1.0, Suitability.HIGH),
            (0.7000001, Suitability.HIGH),
            (0.7, Suitability.MEDIUM),
            (0.5000001, Suitability.MEDIUM),
            (0.5, Suitability.LOW),
            (0.0, Suitability.LOW),
        ],
    )
    def test_thresholds_are_exclusive(self, fit, tier):
        assert Suitability.from_fit(fit) is tier


class TestCropProfiles:
    def test_five_builtin_crops(self):
        assert [p.name for p in CROP_PROFILES] == ["Wheat", "Rice", "Maize", "Chickpea", "Cotton"]

    def test_names_unique(self):
        names = [p.name for p in CROP_PROFILES]
        assert len(names) == len(set(names))

    def test_ranges_are_ordered(self):
        for p in CROP_PROFILES:
            assert p.ideal_ph_range[0] <= p.ideal_ph_range[1], p.name
            assert p.ideal_temp_range[0] <= p.ideal_temp_range[1], p.name

    def test_base_figures_positive(self):
        for p in CROP_PROFILES:
            assert p.base_yield_t_per_ha > 0, p.name
            assert p.base_profit_usd_per_ha > 0, p.name

    def test_water_needs(self):
        needs = {p.name: p.water_need for p in CROP_PROFILES}
        assert needs["Rice"] is WaterNeed.HIGH
        assert needs["Chickpea"] is WaterNeed.LOW
        assert needs["Wheat"] is WaterNeed.MEDIUM
