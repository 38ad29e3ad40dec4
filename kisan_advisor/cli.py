"""
KisanAI Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``, with ``--lat``, ``--lon``,
     ``--offline`` and ``--lang`` applied as the top override layer.
  2. Configure logging.
  3. Load field conditions for the configured location (live with
     per-source fallback, or demo readings when offline).
  4. Report result to stdout.

Install and run::

    pip install -e .
    kisan-advisor --help
    kisan-advisor validate-config
    kisan-advisor conditions --lat 18.52 --lon 73.86
    kisan-advisor recommend --explain --export-dir data/outputs/recommendations
    kisan-advisor irrigation --offline
    kisan-advisor ask "Which crop should I plant?" --lang hi-IN
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="kisan-advisor",
    help="KisanAI — soil, weather, and crop advisory for your field.",
    add_completion=False,
)


# ── Shared options ────────────────────────────────────────────────────────────

_LAT_OPTION = typer.Option(None, "--lat", help="Latitude (default: config location).")
_LON_OPTION = typer.Option(None, "--lon", help="Longitude (default: config location).")
_OFFLINE_OPTION = typer.Option(
    False, "--offline", help="Skip the network and use demo readings."
)
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None, overrides: Optional[dict] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from kisan_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path, overrides)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from kisan_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _coords_or_exit(config):
    """Validate the merged location, exiting on out-of-range values."""
    from pydantic import ValidationError

    from kisan_advisor.ingestion.loader import default_coordinates

    try:
        return default_coordinates(config)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid coordinates: {exc.errors()[0]['msg']}", err=True)
        raise typer.Exit(code=1)


def _load_conditions(config_path, lat, lon, offline, lang=None):
    from kisan_advisor.config import cli_overrides
    from kisan_advisor.ingestion.loader import load_field_conditions

    overrides = cli_overrides(lat=lat, lon=lon, offline=offline, lang=lang)
    config = _load_config_or_exit(config_path, overrides)
    _configure_logging(config)
    coords = _coords_or_exit(config)
    return config, load_field_conditions(config, coords)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(
        f"  Default location: {config.location.default_lat}, {config.location.default_lon}"
    )
    typer.echo(f"  SoilGrids URL:    {config.sources.soilgrids_base_url}")
    typer.echo(f"  Open-Meteo URL:   {config.sources.open_meteo_base_url}")
    typer.echo(f"  Timeout:          {config.sources.timeout_seconds}s")
    typer.echo(f"  Offline (demo):   {config.sources.use_fixtures}")
    typer.echo(f"  Language:         {config.assistant.language}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("conditions")
def conditions(
    lat: Optional[float] = _LAT_OPTION,
    lon: Optional[float] = _LON_OPTION,
    offline: bool = _OFFLINE_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Show soil, weather, forecast, and market readings for a location."""
    from kisan_advisor.reporting.formatters import (
        format_conditions,
        format_forecast,
        format_market_prices,
    )

    _, field_conditions = _load_conditions(config_path, lat, lon, offline)

    typer.echo(format_conditions(field_conditions))
    typer.echo(format_forecast(field_conditions.weather))
    typer.echo(format_market_prices(field_conditions.market))


@app.command("recommend")
def recommend(
    lat: Optional[float] = _LAT_OPTION,
    lon: Optional[float] = _LON_OPTION,
    offline: bool = _OFFLINE_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
    explain: bool = typer.Option(
        False, "--explain", help="Also print the per-crop score breakdown."
    ),
    export: bool = typer.Option(
        False, "--export", help="Write CSV + JSON reports to the configured export dir."
    ),
    export_dir: Optional[str] = typer.Option(
        None, "--export-dir", help="Override the export directory (implies --export)."
    ),
) -> None:
    """Rank crops for the current soil, weather, and market conditions.

    Prints at most four crops, most profitable first.
    """
    from kisan_advisor.recommendations.ranker import build_scored_crops, rank_crops
    from kisan_advisor.recommendations.reporter import (
        write_recommendation_csv,
        write_recommendation_json,
    )
    from kisan_advisor.reporting.formatters import (
        format_conditions,
        format_recommendations,
        format_score_breakdown,
    )

    config, field_conditions = _load_conditions(config_path, lat, lon, offline)

    scored = build_scored_crops(
        field_conditions.soil, field_conditions.weather, field_conditions.market
    )
    ranked = rank_crops(scored)

    typer.echo(format_conditions(field_conditions))
    typer.echo(format_recommendations(ranked))
    if explain:
        typer.echo(format_score_breakdown(scored))

    if export or export_dir:
        out_dir = Path(export_dir or config.output.export_dir)
        csv_path = write_recommendation_csv(ranked, field_conditions, out_dir)
        json_path = write_recommendation_json(ranked, field_conditions, out_dir)
        typer.echo("")
        typer.echo(f"  CSV:  {csv_path}")
        typer.echo(f"  JSON: {json_path}")


@app.command("irrigation")
def irrigation(
    lat: Optional[float] = _LAT_OPTION,
    lon: Optional[float] = _LON_OPTION,
    offline: bool = _OFFLINE_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Should I irrigate today?"""
    from kisan_advisor.advisory.irrigation import irrigation_advice
    from kisan_advisor.reporting.formatters import format_provenance

    _, field_conditions = _load_conditions(config_path, lat, lon, offline)

    typer.echo(irrigation_advice(field_conditions.soil, field_conditions.weather))
    typer.echo(format_provenance(field_conditions))


@app.command("ask")
def ask(
    question: str = typer.Argument("", help="Question for the assistant."),
    image: Optional[Path] = typer.Option(
        None, "--image", help="Path to a leaf / field photo.", exists=True, dir_okay=False,
    ),
    lang: Optional[str] = typer.Option(
        None, "--lang", help="Reply language (en-IN, hi-IN, mr-IN, te-IN, ta-IN, bn-IN)."
    ),
    lat: Optional[float] = _LAT_OPTION,
    lon: Optional[float] = _LON_OPTION,
    offline: bool = _OFFLINE_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Ask the assistant about soil, irrigation, crops, or a leaf photo."""
    from kisan_advisor.advisory.assistant import SUPPORTED_LANGUAGES, Assistant
    from kisan_advisor.recommendations.ranker import build_recommendations

    if lang is not None and lang not in SUPPORTED_LANGUAGES:
        typer.echo(
            f"[ERROR] Unsupported language '{lang}'. "
            f"Choose one of: {', '.join(sorted(SUPPORTED_LANGUAGES))}",
            err=True,
        )
        raise typer.Exit(code=1)

    if not question and image is None:
        typer.echo("[ERROR] Provide a question or --image.", err=True)
        raise typer.Exit(code=1)

    config, field_conditions = _load_conditions(config_path, lat, lon, offline, lang)
    recommendations = build_recommendations(
        field_conditions.soil, field_conditions.weather, field_conditions.market
    )
    assistant = Assistant(
        soil=field_conditions.soil,
        weather=field_conditions.weather,
        recommendations=recommendations,
        lang=config.assistant.language,
    )

    reply = assistant.ask(question, image=image)
    typer.echo(reply)
    if field_conditions.notice:
        typer.echo(f"[DEMO] {field_conditions.notice}")


if __name__ == "__main__":
    app()
