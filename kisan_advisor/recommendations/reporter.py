"""
Recommendation report writer: CSV and JSON export of ranked crops.

All functions are pure I/O.  They consume in-memory ScoredCrop lists plus
the field conditions they were computed from, and write human-readable
and machine-readable files.

Output files
------------
  {export_dir}/
    recommendations_{lat}_{lon}_{date}.csv   -- one row per ranked crop
    recommendations_{lat}_{lon}_{date}.json  -- same data plus inputs and sources
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path

from kisan_advisor.ingestion.loader import FieldConditions
from kisan_advisor.recommendations.ranker import ScoredCrop

logger = logging.getLogger(__name__)


def _file_stem(conditions: FieldConditions, run_date: date) -> str:
    lat = f"{conditions.coords.lat:.2f}"
    lon = f"{conditions.coords.lon:.2f}"
    return f"recommendations_{lat}_{lon}_{run_date}"


def write_recommendation_csv(
    ranked:     list[ScoredCrop],
    conditions: FieldConditions,
    output_dir: Path,
    run_date:   date | None = None,
) -> Path:
    """Write ranked crops to a CSV file.

    Columns: rank, crop, suitability, fit, expected_yield_t_per_ha,
             profit_usd_per_ha, market_boost, sustainability_score, rationale.

    Args:
        ranked:     Output of rank_crops() (already ordered).
        conditions: Readings the crops were scored against (used in filename).
        output_dir: Directory to write the file (created if missing).
        run_date:   Date label for the filename. Defaults to today.

    Returns:
        Path to the written CSV file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"{_file_stem(conditions, run_date)}.csv"

    fieldnames = [
        "rank", "crop", "suitability", "fit", "expected_yield_t_per_ha",
        "profit_usd_per_ha", "market_boost", "sustainability_score", "rationale",
    ]

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for rank, sc in enumerate(ranked, start=1):
            writer.writerow(
                {
                    "rank":                    rank,
                    "crop":                    sc.profile.name,
                    "suitability":             str(sc.suitability),
                    "fit":                     round(sc.components.fit, 4),
                    "expected_yield_t_per_ha": round(sc.expected_yield, 3),
                    "profit_usd_per_ha":       round(sc.profit, 2),
                    "market_boost":            round(sc.components.market_boost, 4),
                    "sustainability_score":    sc.sustainability_score,
                    "rationale":               sc.rationale,
                }
            )

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(ranked))
    return csv_path


def write_recommendation_json(
    ranked:     list[ScoredCrop],
    conditions: FieldConditions,
    output_dir: Path,
    run_date:   date | None = None,
) -> Path:
    """Write ranked crops, the readings behind them, and provenance to JSON.

    Structure::

        {
          "generated_at": "...",
          "coords": {"lat": ..., "lon": ...},
          "sources": {"soil": "SoilGrids", "weather": "demo", "market": "demo"},
          "fallbacks": ["weather"],
          "soil": {...}, "weather": {...}, "market": [...],
          "recommendations": [{"rank": 1, "crop_name": ..., "components": {...}}, ...]
        }

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"{_file_stem(conditions, run_date)}.json"

    payload = {
        "generated_at": datetime.now(tz=timezone.utc).isoformat(),
        "coords":       conditions.coords.model_dump(),
        "sources":      conditions.sources,
        "fallbacks":    list(conditions.fallbacks),
        "soil":         conditions.soil.model_dump(mode="json"),
        "weather":      conditions.weather.model_dump(mode="json"),
        "market":       [m.model_dump(mode="json") for m in conditions.market],
        "recommendations": [
            {
                "rank": rank,
                **sc.to_recommendation().model_dump(mode="json"),
                "components": {
                    "ph_score":     sc.components.ph_score,
                    "temp_score":   sc.components.temp_score,
                    "water_score":  sc.components.water_score,
                    "market_boost": sc.components.market_boost,
                    "fit":          sc.components.fit,
                },
            }
            for rank, sc in enumerate(ranked, start=1)
        ],
    }

    json_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path
