"""
ASCII terminal formatters for CLI commands.

All formatters accept readings / scored records and return plain
multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Provenance banner
-----------------
Every conditions block ends with where each reading came from, and the
fallback notice when any live source failed::

  Sources: soil=SoilGrids  weather=demo  market=demo
  [DEMO] Failed to load some data. Showing demo values.
"""

from __future__ import annotations

from kisan_advisor.ingestion.loader import FieldConditions
from kisan_advisor.models.readings import MarketPrice, WeatherReading
from kisan_advisor.recommendations.ranker import ScoredCrop
from kisan_advisor.utils.number_format import format_fixed

_MISSING = "--"


def _fmt(value: float | None, places: int, suffix: str = "") -> str:
    if value is None:
        return _MISSING
    return format_fixed(value, places) + suffix


# ── Conditions ────────────────────────────────────────────────────────────────


def format_provenance(conditions: FieldConditions) -> str:
    """Return the sources line, plus the demo notice when any source fell back."""
    src = conditions.sources
    lines = [f"  Sources: soil={src['soil']}  weather={src['weather']}  market={src['market']}"]
    if conditions.notice:
        lines.append(f"  [DEMO] {conditions.notice}")
    return "\n".join(lines)


def format_conditions(conditions: FieldConditions) -> str:
    """Format the headline soil and weather stats.

    Example::

        === Field Conditions (28.6139, 77.2090) ===
          Soil pH         6.6   (ideal 6.0–7.5)
          Moisture        58%   (field capacity 60–80%)
          Org. carbon     8.2 g/kg  (> 7 good)
          Temperature     31.5°C  (now)
    """
    soil, weather = conditions.soil, conditions.weather
    lines: list[str] = []
    lines.append("")
    lines.append(
        f"=== Field Conditions ({conditions.coords.lat:.4f}, {conditions.coords.lon:.4f}) ==="
    )
    lines.append(f"  {'Soil pH':<14}  {_fmt(soil.ph, 1):>8}   (ideal 6.0–7.5)")
    lines.append(
        f"  {'Moisture':<14}  {_fmt(soil.moisture_percent, 0, '%'):>8}   "
        f"(field capacity 60–80%)"
    )
    lines.append(
        f"  {'Org. carbon':<14}  {_fmt(soil.organic_carbon, 1, ' g/kg'):>8}   (> 7 good)"
    )
    lines.append(f"  {'Temperature':<14}  {_fmt(weather.temperature_c, 1, '°C'):>8}   (now)")
    lines.append(f"  {'Humidity':<14}  {_fmt(weather.humidity, 0, '%'):>8}")
    lines.append(f"  {'Wind':<14}  {_fmt(weather.wind_speed, 1, ' km/h'):>8}")
    lines.append(format_provenance(conditions))
    return "\n".join(lines)


def format_forecast(weather: WeatherReading, days: int = 4) -> str:
    """Format up to ``days`` forecast days as a small table.

    The header counts the days actually shown.
    """
    shown = weather.daily[:days]
    lines: list[str] = []
    lines.append("")

    if not shown:
        lines.append("=== Weather ===")
        lines.append("  No forecast")
        return "\n".join(lines)

    noun = "day" if len(shown) == 1 else "days"
    lines.append(f"=== Weather (next {len(shown)} {noun}) ===")

    lines.append(f"    {'Date':<10}  {'Min–Max °C':>10}  {'Rain mm':>7}")
    lines.append("    " + "-" * 31)
    for day in shown:
        span = f"{format_fixed(day.temp_min_c)}–{format_fixed(day.temp_max_c)}"
        rain = format_fixed(day.rain_mm, 1)
        lines.append(f"    {day.date.isoformat():<10}  {span:>10}  {rain:>7}")
    return "\n".join(lines)


# ── Recommendations ───────────────────────────────────────────────────────────


def format_recommendations(ranked: list[ScoredCrop]) -> str:
    """Format ranked crops as an ASCII table with rationale lines.

    Example::

        Rank  Crop        Fit     Yield t/ha  Profit $/ha  Sustain.
        -----------------------------------------------------------
           1  Rice        HIGH           6.0         1242        85
              pH 6.6, temp 32°C, moisture 58% → high fit
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Crop Recommendations ===")

    if not ranked:
        lines.append("  (no recommendations available)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Crop':<10}  {'Fit':<6}  {'Yield t/ha':>10}  "
        f"{'Profit $/ha':>11}  {'Sustain.':>8}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, sc in enumerate(ranked, start=1):
        lines.append(
            f"  {rank:>4}  {sc.profile.name:<10}  {sc.suitability.upper():<6}  "
            f"{format_fixed(sc.expected_yield, 1):>10}  {format_fixed(sc.profit):>11}  "
            f"{sc.sustainability_score:>8}"
        )
        lines.append(f"        {sc.rationale}")
    return "\n".join(lines)


def format_score_breakdown(scored: list[ScoredCrop]) -> str:
    """Per-crop component breakdown (used by ``recommend --explain``)."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Score Breakdown ===")
    header = (
        f"  {'Crop':<10}  {'pH':>5}  {'Temp':>5}  {'Water':>6}  "
        f"{'Fit':>6}  {'Market':>6}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for sc in scored:
        c = sc.components
        lines.append(
            f"  {sc.profile.name:<10}  {c.ph_score:>5.2f}  {c.temp_score:>5.2f}  "
            f"{c.water_score:>6.3f}  {c.fit:>6.3f}  {c.market_boost:>6.3f}"
        )
    lines.append("  fit = 0.45*pH + 0.40*Temp + 0.15*Water")
    return "\n".join(lines)


# ── Market ────────────────────────────────────────────────────────────────────


def format_market_prices(market: list[MarketPrice]) -> str:
    """Format market quotes, one per line."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Market Prices (demo) ===")
    if not market:
        lines.append("  (no quotes)")
        return "\n".join(lines)
    for quote in market:
        lines.append(
            f"  {quote.crop_name:<10}  {quote.market_name:<16}  "
            f"₹{format_fixed(quote.price):>7} / {quote.unit}"
        )
    return "\n".join(lines)
