"""
Application configuration.

``load_config`` builds one ``AppConfig`` from a stack of layers, later
layers winning key by key:

  1. ``config/default.toml``   (or the file passed as ``--config``)
  2. ``local.toml`` next to it, if present (gitignored)
  3. ``KISAN_ADVISOR_*`` environment variables (``.env`` is loaded first)
  4. command-line overrides from ``cli_overrides()``

So ``--lat``/``--lon`` beat ``KISAN_ADVISOR_LAT``/``LON``, which beat the
TOML location, and ``--offline`` or ``KISAN_ADVISOR_OFFLINE`` switch
``sources.use_fixtures`` on.  The conditions loader reads only the merged
result.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from kisan_advisor.advisory.assistant import SUPPORTED_LANGUAGES

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "default.toml"
LOCAL_CONFIG_NAME = "local.toml"


# ── Sections ──────────────────────────────────────────────────────────────────


class LocationConfig(BaseModel):
    """Location used when none is given on the command line (Delhi, India)."""

    model_config = ConfigDict(frozen=True)

    default_lat: float = 28.6139
    default_lon: float = 77.209


class SourcesConfig(BaseModel):
    """Provider endpoints; ``use_fixtures`` replaces every provider with demo data."""

    model_config = ConfigDict(frozen=True)

    soilgrids_base_url: str = "https://rest.isric.org/soilgrids/v2.0"
    open_meteo_base_url: str = "https://api.open-meteo.com"
    timeout_seconds: float = 10.0
    use_fixtures: bool = False

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v


class AssistantConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str = "en-IN"

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language '{v}'. Must be one of {sorted(SUPPORTED_LANGUAGES)}."
            )
        return v


class OutputConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    export_dir: str = "data/outputs/recommendations"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingConfig(BaseModel):
    """Where log lines go and how they look.

    ``level`` is case-insensitive and stored upper-case.  ``log_file`` adds a
    file handler next to stderr; ``json_format`` switches both to JSON lines.
    """

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def normalise_level(cls, v: str) -> str:
        name = v.strip().upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}; got '{v}'.")
        return name

    @property
    def level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.level]


class AppConfig(BaseModel):
    """Merged configuration handed to the loader, advisors and CLI commands."""

    model_config = ConfigDict(frozen=True)

    debug: bool = False
    location: LocationConfig = LocationConfig()
    sources: SourcesConfig = SourcesConfig()
    assistant: AssistantConfig = AssistantConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()


# ── Layers ────────────────────────────────────────────────────────────────────


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Environment variable → (key path in the merged dict, parser)
ENV_OVERRIDES: dict[str, tuple[tuple[str, ...], Callable[[str], Any]]] = {
    "KISAN_ADVISOR_LAT":       (("location", "default_lat"), float),
    "KISAN_ADVISOR_LON":       (("location", "default_lon"), float),
    "KISAN_ADVISOR_OFFLINE":   (("sources", "use_fixtures"), _env_flag),
    "KISAN_ADVISOR_LOG_LEVEL": (("logging", "level"), str),
    "KISAN_ADVISOR_DEBUG":     (("debug",), _env_flag),
}


def _set_path(layer: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    *tables, key = path
    for name in tables:
        layer = layer.setdefault(name, {})
    layer[key] = value


def merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``layers`` left to right into a new dict.

    Tables merge key by key; any other value replaces what was there.  The
    inputs are never modified.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, val in layer.items():
            current = merged.get(key)
            if isinstance(val, Mapping):
                merged[key] = merge_layers(current if isinstance(current, Mapping) else {}, val)
            else:
                merged[key] = val
    return merged


def env_layer(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Overrides taken from ``KISAN_ADVISOR_*`` variables; empty ones are ignored."""
    environ = os.environ if environ is None else environ
    layer: dict[str, Any] = {}
    for name, (path, parse) in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw:
            _set_path(layer, path, parse(raw))
    return layer


def cli_overrides(
    lat:     Optional[float] = None,
    lon:     Optional[float] = None,
    offline: bool = False,
    lang:    Optional[str] = None,
) -> dict[str, Any]:
    """Override layer for command-line options; unset options leave lower layers alone."""
    layer: dict[str, Any] = {}
    if lat is not None:
        _set_path(layer, ("location", "default_lat"), lat)
    if lon is not None:
        _set_path(layer, ("location", "default_lon"), lon)
    if offline:
        _set_path(layer, ("sources", "use_fixtures"), True)
    if lang is not None:
        _set_path(layer, ("assistant", "language"), lang)
    return layer


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(
    config_path: Optional[Path] = None,
    overrides:   Optional[Mapping[str, Any]] = None,
) -> AppConfig:
    """Merge every layer and validate the result.

    Args:
        config_path: TOML file to start from; defaults to ``config/default.toml``.
        overrides:   Highest-priority layer, normally ``cli_overrides(...)``.

    Raises:
        FileNotFoundError: ``config_path`` does not exist.
        ValueError: An environment variable cannot be parsed, or the merged
            values fail validation (``pydantic.ValidationError``).
    """
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env", override=False)

    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\nCreate config/default.toml or pass --config."
        )

    layers = [_read_toml(path)]
    local_path = path.parent / LOCAL_CONFIG_NAME
    if local_path != path and local_path.exists():
        layers.append(_read_toml(local_path))
    layers.append(env_layer())
    if overrides:
        layers.append(overrides)

    return AppConfig.model_validate(merge_layers(*layers))
