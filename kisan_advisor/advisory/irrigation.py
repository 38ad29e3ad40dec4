"""Rule-based irrigation advice from soil moisture and the first forecast day's rain."""

from __future__ import annotations

from kisan_advisor.models.readings import SoilReading, WeatherReading

# Moisture assumed when the soil reading has none
ASSUMED_MOISTURE_PERCENT = 45.0
HIGH_MOISTURE_PERCENT = 70.0
RAIN_DELAY_MM = 5.0

SKIP_ADVICE = "Moisture is high. Skip irrigation today."
DELAY_ADVICE = "Rain expected. Delay irrigation for 24 hours."
IRRIGATE_ADVICE = "Irrigate lightly (10–15 mm). Recheck soil moisture tomorrow."


def irrigation_advice(soil: SoilReading, weather: WeatherReading) -> str:
    """Return one line of irrigation advice.

    Rules (first match wins):
        1. moisture >= 70%            → skip irrigation
        2. first forecast day > 5 mm  → delay 24 hours
        3. otherwise                  → irrigate lightly
    """
    moisture = (
        ASSUMED_MOISTURE_PERCENT if soil.moisture_percent is None
        else soil.moisture_percent
    )
    rain = weather.daily[0].rain_mm if weather.daily else 0.0

    if moisture >= HIGH_MOISTURE_PERCENT:
        return SKIP_ADVICE
    if rain > RAIN_DELAY_MM:
        return DELAY_ADVICE
    return IRRIGATE_ADVICE
